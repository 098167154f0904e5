"""
OctoPrint client for the Enclosure plugin and the PSU backends.

Writes are single-attempt and never raise on transport failures: the error is
turned into a notification and returned as a failed CommandResult. Reads raise
EnclosureReadException so the router can answer with a 502.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from enclosure_bridge.core.config import Settings, settings
from enclosure_bridge.exceptions.enclosure import (
    EnclosureReadException,
    OctoPrintTransportException,
    PSUNotConfiguredException,
    create_error_context,
)
from enclosure_bridge.models.enclosure import (
    CommandResult,
    EnclosureColorBody,
    EnclosureOutputBody,
    EnclosurePluginReading,
    EnclosurePWMBody,
    TemperatureReading,
)
from enclosure_bridge.models.psu import (
    PSUControlCommand,
    PSUStatus,
    TasmotaCommand,
    TasmotaMqttCommand,
    TPLinkCommand,
)
from enclosure_bridge.services.notifications import NotificationService
from enclosure_bridge.services.psu_state import PSUStateTracker
from enclosure_bridge.services.types import PSUBackend, PSUState

log = logging.getLogger("enclosure_bridge.octoprint")

# (message id, text) pairs; ids match the dashboard's translation keys
MSG_SET_COLOR = ("error-set-color", "Can't set LED color!")
MSG_SET_OUTPUT = ("error-set-output", "Can't set output!")
MSG_PSU_GCODE = ("error-send-psu-gcode", "Can't send GCode!")
MSG_SMARTPLUG_GCODE = ("error-send-smartplug-gcode", "Can't send GCode!")
MSG_TASMOTA_GCODE = ("error-send-tasmota-gcode", "Can't send GCode!")
MSG_PSU_STATE = ("error-psu-state", "Can't change PSU State!")

# legacy flag lookup order, first match wins
_BACKEND_FLAGS: Tuple[Tuple[PSUBackend, str], ...] = (
    (PSUBackend.PSU_CONTROL, "USE_PSU_CONTROL"),
    (PSUBackend.TPLINK, "USE_TPLINK_SMARTPLUG"),
    (PSUBackend.TASMOTA, "USE_TASMOTA"),
    (PSUBackend.TASMOTA_MQTT, "USE_TASMOTA_MQTT"),
)


def resolve_psu_backend(cfg: Settings) -> Optional[PSUBackend]:
    if cfg.PSU_BACKEND is not None:
        return cfg.PSU_BACKEND
    for backend, flag in _BACKEND_FLAGS:
        if getattr(cfg, flag):
            return backend
    return None


def api_url(cfg: Settings, path: str, octoprint_api: bool = True) -> str:
    """
    SimpleApi plugins (PSU backends) live under /api/plugin/<id>,
    blueprint routes (Enclosure) directly under /plugin/<id>.
    """
    base = cfg.OCTOPRINT_URL.rstrip("/")
    return f"{base}/api/{path}" if octoprint_api else f"{base}/{path}"


def http_headers(cfg: Settings) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Api-Key": cfg.OCTOPRINT_API_KEY,
    }


def _describe(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        r = exc.response
        return f"HTTP {r.status_code} {r.reason_phrase} for {exc.request.url}"
    return str(exc) or exc.__class__.__name__


class OctoPrintEnclosureClient:
    """
    Forwards enclosure and PSU requests to OctoPrint.

    One shared httpx.AsyncClient; no retries, no in-flight tracking.
    Concurrent writes race independently.
    """

    def __init__(
        self,
        cfg: Settings = settings,
        notifications: Optional[NotificationService] = None,
        http: Optional[httpx.AsyncClient] = None,
        psu_state: Optional[PSUStateTracker] = None,
    ):
        self.cfg = cfg
        self.notifications = notifications if notifications is not None else NotificationService(cfg.NOTIFICATION_HISTORY)
        self._owns_http = http is None
        self.http = http if http is not None else httpx.AsyncClient(timeout=cfg.OCTOPRINT_TIMEOUT)
        self.psu_state = psu_state if psu_state is not None else PSUStateTracker()
        self._psu_senders: Dict[PSUBackend, Callable[[PSUState], Awaitable[CommandResult]]] = {
            PSUBackend.PSU_CONTROL: self._set_psu_state_psucontrol,
            PSUBackend.TPLINK: self._set_psu_state_tplink,
            PSUBackend.TASMOTA: self._set_psu_state_tasmota,
            PSUBackend.TASMOTA_MQTT: self._set_psu_state_tasmota_mqtt,
        }

    async def aclose(self):
        if self._owns_http:
            await self.http.aclose()

    # ---- transport ----
    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        octoprint_api: bool = True,
        body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = api_url(self.cfg, path, octoprint_api)
        log.debug("%s %s %s", method, url, body)
        try:
            r = await self.http.request(method, url, json=body, headers=http_headers(self.cfg))
            r.raise_for_status()
            return r
        except httpx.HTTPError as e:
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            ctx = create_error_context(operation, endpoint=path, method=method, status_code=status_code)
            raise OctoPrintTransportException(_describe(e), path, ctx) from e

    async def _write(
        self,
        method: str,
        path: str,
        body: Dict[str, Any],
        *,
        operation: str,
        error: Tuple[str, str],
        octoprint_api: bool = True,
    ) -> CommandResult:
        try:
            await self._request(method, path, operation=operation, octoprint_api=octoprint_api, body=body)
        except OctoPrintTransportException as e:
            log.error("%s failed: %s", operation, e.message, extra={"context": e.context})
            code, message = error
            self.notifications.set_error(message, e.message, code=code)
            return CommandResult(ok=False, endpoint=path, error=e.message)
        return CommandResult(ok=True, endpoint=path)

    # ---- enclosure plugin ----
    async def get_enclosure_temperature(self) -> TemperatureReading:
        path = f"plugin/enclosure/inputs/{self.cfg.ENCLOSURE_AMBIENT_SENSOR_ID}"
        try:
            r = await self._request("GET", path, operation="get_enclosure_temperature", octoprint_api=False)
        except OctoPrintTransportException as e:
            raise EnclosureReadException(e.message, path, e.context) from e
        try:
            data = EnclosurePluginReading.model_validate(r.json())
        except ValueError as e:
            raise EnclosureReadException(f"unexpected sensor payload ({e.__class__.__name__})", path) from e
        return data.to_reading()

    async def set_led_color(self, identifier: int, red: int, green: int, blue: int) -> CommandResult:
        body = EnclosureColorBody(red=red, green=green, blue=blue)
        return await self._write(
            "PATCH", f"plugin/enclosure/neopixel/{identifier}", body.model_dump(),
            operation="set_led_color", error=MSG_SET_COLOR, octoprint_api=False,
        )

    async def set_output(self, identifier: int, status: bool) -> CommandResult:
        log.info("output %s -> %s", identifier, status)
        body = EnclosureOutputBody(status=status)
        return await self._write(
            "PATCH", f"plugin/enclosure/outputs/{identifier}", body.model_dump(),
            operation="set_output", error=MSG_SET_OUTPUT, octoprint_api=False,
        )

    async def set_output_pwm(self, identifier: int, duty_cycle: int) -> CommandResult:
        log.info("pwm %s -> %s%%", identifier, duty_cycle)
        body = EnclosurePWMBody(duty_cycle=duty_cycle)
        return await self._write(
            "PATCH", f"plugin/enclosure/pwm/{identifier}", body.model_dump(),
            operation="set_output_pwm", error=MSG_SET_OUTPUT, octoprint_api=False,
        )

    # ---- PSU ----
    def get_psu_status(self) -> PSUStatus:
        return PSUStatus(state=self.psu_state.current, backend=resolve_psu_backend(self.cfg))

    def _warn_not_configured(self) -> CommandResult:
        exc = PSUNotConfiguredException()
        code, message = MSG_PSU_STATE
        self.notifications.set_warning(message, exc.message, code=code)
        return CommandResult(ok=False, endpoint="", error=exc.message)

    async def set_psu_state(self, state: PSUState) -> CommandResult:
        backend = resolve_psu_backend(self.cfg)
        if backend is None:
            return self._warn_not_configured()

        log.info("PSU %s via %s", state.value, backend.value)
        await self.psu_state.set(state)
        return await self._psu_senders[backend](state)

    async def toggle_psu(self) -> CommandResult:
        backend = resolve_psu_backend(self.cfg)
        if backend is None:
            return self._warn_not_configured()

        target = await self.psu_state.toggle()
        log.info("PSU toggle -> %s via %s", target.value, backend.value)
        return await self._psu_senders[backend](target)

    async def _set_psu_state_psucontrol(self, state: PSUState) -> CommandResult:
        payload = PSUControlCommand(command="turnPSUOn" if state is PSUState.ON else "turnPSUOff")
        return await self._write(
            "POST", "plugin/psucontrol", payload.model_dump(),
            operation="set_psu_state_psucontrol", error=MSG_PSU_GCODE,
        )

    async def _set_psu_state_tplink(self, state: PSUState) -> CommandResult:
        payload = TPLinkCommand(
            command="turnOn" if state is PSUState.ON else "turnOff",
            ip=self.cfg.SMART_PLUG_IP,
        )
        return await self._write(
            "POST", "plugin/tplinksmartplug", payload.model_dump(),
            operation="set_psu_state_tplink", error=MSG_SMARTPLUG_GCODE,
        )

    async def _set_psu_state_tasmota(self, state: PSUState) -> CommandResult:
        payload = TasmotaCommand(
            command="turnOn" if state is PSUState.ON else "turnOff",
            ip=self.cfg.TASMOTA_IP,
            idx=self.cfg.TASMOTA_INDEX,
        )
        return await self._write(
            "POST", "plugin/tasmota", payload.model_dump(),
            operation="set_psu_state_tasmota", error=MSG_TASMOTA_GCODE,
        )

    async def _set_psu_state_tasmota_mqtt(self, state: PSUState) -> CommandResult:
        payload = TasmotaMqttCommand(
            command="turnOn" if state is PSUState.ON else "turnOff",
            topic=self.cfg.TASMOTA_MQTT_TOPIC,
            relayN=self.cfg.TASMOTA_MQTT_RELAY_NUMBER,
        )
        return await self._write(
            "POST", "plugin/tasmota_mqtt", payload.model_dump(),
            operation="set_psu_state_tasmota_mqtt", error=MSG_TASMOTA_GCODE,
        )

    # ---- misc ----
    async def get_version(self) -> Dict[str, Any]:
        path = "version"
        r = await self._request("GET", path, operation="get_version")
        try:
            data = r.json()
        except ValueError as e:
            raise OctoPrintTransportException(f"unexpected version payload ({e.__class__.__name__})", path) from e
        if not isinstance(data, dict):
            raise OctoPrintTransportException(f"unexpected version payload ({type(data).__name__})", path)
        return data
