from typing import Literal, Optional
from pydantic import BaseModel, Field

from enclosure_bridge.services.types import PSUBackend, PSUState

PSUControlToken = Literal["turnPSUOn", "turnPSUOff"]
SwitchToken = Literal["turnOn", "turnOff"]

class PSUStateRequest(BaseModel):
    state: PSUState

class PSUStatus(BaseModel):
    state: PSUState
    backend: Optional[PSUBackend] = Field(None, description="Active PSU backend, null when none is configured")

# ---- PSU backend wire models (OctoPrint SimpleApi commands) ----
class PSUControlCommand(BaseModel):
    command: PSUControlToken

class TPLinkCommand(BaseModel):
    command: SwitchToken
    ip: str

class TasmotaCommand(BaseModel):
    command: SwitchToken
    ip: str
    idx: int

class TasmotaMqttCommand(BaseModel):
    command: SwitchToken
    topic: str
    relayN: int
