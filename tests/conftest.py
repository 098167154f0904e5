"""Shared fixtures: an OctoPrint stand-in built on httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from enclosure_bridge.core.config import Settings
from enclosure_bridge.services.notifications import NotificationService
from enclosure_bridge.services.octoprint_client import OctoPrintEnclosureClient

OCTOPRINT_URL = "http://octopi.local"
API_KEY = "0123456789ABCDEF"


class OctoPrintMock:
    """
    Records every request and answers from a (method, path) table.
    Unknown routes answer 204. An exception instance as outcome is raised
    from the transport, like a network failure would be.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.outcomes: dict[tuple[str, str], httpx.Response | Exception] = {}

    def reply(self, method: str, path: str, status_code: int = 200, json_body=None):
        self.outcomes[(method, path)] = httpx.Response(status_code, json=json_body)

    def fail(self, method: str, path: str, exc: Exception):
        self.outcomes[(method, path)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.get((request.method, request.url.path))
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return httpx.Response(204)
        return outcome

    @property
    def calls(self) -> list[tuple[str, str, dict | None]]:
        return [
            (r.method, r.url.path, json.loads(r.content) if r.content else None)
            for r in self.requests
        ]


def make_settings(**overrides) -> Settings:
    values = {
        "OCTOPRINT_URL": OCTOPRINT_URL,
        "OCTOPRINT_API_KEY": API_KEY,
        "ENCLOSURE_AMBIENT_SENSOR_ID": 3,
        "SMART_PLUG_IP": "192.168.1.50",
        "TASMOTA_IP": "192.168.1.60",
        "TASMOTA_INDEX": 2,
        "TASMOTA_MQTT_TOPIC": "sonoff",
        "TASMOTA_MQTT_RELAY_NUMBER": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def octoprint():
    return OctoPrintMock()


@pytest.fixture()
def notifications():
    return NotificationService(history=20)


@pytest.fixture()
def client_factory(octoprint: OctoPrintMock, notifications: NotificationService):
    """Builds a client against the mock; keyword args override settings."""

    opened: list[httpx.AsyncClient] = []

    def _factory(**overrides) -> OctoPrintEnclosureClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(octoprint.handler))
        opened.append(http)
        return OctoPrintEnclosureClient(make_settings(**overrides), notifications, http)

    yield _factory

    # the factory serves sync and async tests, so close on a fresh loop
    async def _close_all():
        for http in opened:
            await http.aclose()

    asyncio.run(_close_all())
