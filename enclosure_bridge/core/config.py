from typing import Optional
from pydantic_settings import BaseSettings

from enclosure_bridge.services.types import PSUBackend

class Settings(BaseSettings):
    APP_NAME: str = "Enclosure Bridge"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # OctoPrint host
    OCTOPRINT_URL: str = "http://localhost:5000"
    OCTOPRINT_API_KEY: str = ""
    OCTOPRINT_TIMEOUT: float = 10.0

    # ---- Enclosure plugin ----
    # Ambient sensor, addressed by the Enclosure plugin input's index_id
    # (the dashboard calls it the sensor name; the route takes the integer id).
    ENCLOSURE_AMBIENT_SENSOR_ID: int = 1

    # ---- PSU control ----
    # Explicit backend selector. When unset, the USE_* flags below are checked
    # in this order: PSU Control, TP-Link, Tasmota, Tasmota-MQTT.
    PSU_BACKEND: Optional[PSUBackend] = None
    USE_PSU_CONTROL: bool = False
    USE_TPLINK_SMARTPLUG: bool = False
    USE_TASMOTA: bool = False
    USE_TASMOTA_MQTT: bool = False

    SMART_PLUG_IP: str = "127.0.0.1"
    TASMOTA_IP: str = "127.0.0.1"
    TASMOTA_INDEX: int = 1
    TASMOTA_MQTT_TOPIC: str = "topic"
    TASMOTA_MQTT_RELAY_NUMBER: int = 1

    # Notifications kept for the UI to read back
    NOTIFICATION_HISTORY: int = 50


    class Config:
        env_file = ".env"

settings = Settings()
