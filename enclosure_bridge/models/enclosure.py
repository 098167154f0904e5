from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

TemperatureUnit = Literal["°C", "°F"]

# ---- UI-facing models ----
class TemperatureReading(BaseModel):
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    unit: TemperatureUnit = "°C"

class LEDColorRequest(BaseModel):
    red: int = Field(..., ge=0, le=255)
    green: int = Field(..., ge=0, le=255)
    blue: int = Field(..., ge=0, le=255)

class OutputRequest(BaseModel):
    status: bool

class PWMRequest(BaseModel):
    duty_cycle: int = Field(..., ge=0, le=100)

class CommandResult(BaseModel):
    ok: bool
    endpoint: str
    error: Optional[str] = None

class AcceptedResponse(BaseModel):
    ok: bool = True
    accepted: str

# ---- Enclosure plugin wire models ----
class EnclosurePluginReading(BaseModel):
    """Sensor input as returned by GET plugin/enclosure/inputs/<id>"""
    model_config = ConfigDict(extra="ignore")

    temp_sensor_temp: Optional[float] = None
    temp_sensor_humidity: Optional[float] = None
    use_fahrenheit: bool = False

    def to_reading(self) -> TemperatureReading:
        return TemperatureReading(
            temperature=self.temp_sensor_temp,
            humidity=self.temp_sensor_humidity,
            unit="°F" if self.use_fahrenheit else "°C",
        )

class EnclosureColorBody(BaseModel):
    red: int
    green: int
    blue: int

class EnclosureOutputBody(BaseModel):
    status: bool

class EnclosurePWMBody(BaseModel):
    duty_cycle: int
