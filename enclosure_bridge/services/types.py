# shared enums, kept out of models so config can import them without cycles
from enum import Enum


class PSUState(str, Enum):
    ON = "on"
    OFF = "off"

    def opposite(self) -> "PSUState":
        return PSUState.OFF if self is PSUState.ON else PSUState.ON


class PSUBackend(str, Enum):
    PSU_CONTROL = "psucontrol"
    TPLINK = "tplink"
    TASMOTA = "tasmota"
    TASMOTA_MQTT = "tasmota_mqtt"
