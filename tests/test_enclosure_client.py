"""Enclosure plugin calls: temperature reads, LEDs, outputs and PWM"""

import httpx
import pytest

from enclosure_bridge.exceptions.enclosure import EnclosureReadException, OctoPrintTransportException
from enclosure_bridge.models.notification import NotificationType
from enclosure_bridge.services.octoprint_client import OctoPrintEnclosureClient

from conftest import API_KEY, make_settings

SENSOR_PATH = "/plugin/enclosure/inputs/3"


async def test_temperature_celsius(client_factory, octoprint):
    octoprint.reply("GET", SENSOR_PATH, json_body={
        "temp_sensor_temp": 21.5,
        "temp_sensor_humidity": 40,
        "use_fahrenheit": False,
    })
    client = client_factory()

    reading = await client.get_enclosure_temperature()

    assert reading.model_dump() == {"temperature": 21.5, "humidity": 40, "unit": "°C"}
    assert octoprint.requests[0].headers["X-Api-Key"] == API_KEY


async def test_temperature_fahrenheit_ignores_extra_fields(client_factory, octoprint):
    octoprint.reply("GET", SENSOR_PATH, json_body={
        "index_id": 3,
        "label": "Ambient",
        "temp_sensor_temp": 70.7,
        "temp_sensor_humidity": 35.2,
        "use_fahrenheit": True,
    })
    client = client_factory()

    reading = await client.get_enclosure_temperature()

    assert reading.temperature == 70.7
    assert reading.humidity == 35.2
    assert reading.unit == "°F"


async def test_temperature_read_failure_raises(client_factory, octoprint, notifications):
    octoprint.fail("GET", SENSOR_PATH, httpx.ReadTimeout("timed out"))
    client = client_factory()

    with pytest.raises(EnclosureReadException) as excinfo:
        await client.get_enclosure_temperature()

    assert excinfo.value.status_code == 502
    assert excinfo.value.context["endpoint"] == "plugin/enclosure/inputs/3"
    assert len(notifications) == 0


async def test_temperature_bad_payload_raises(client_factory, octoprint):
    octoprint.outcomes[("GET", SENSOR_PATH)] = httpx.Response(200, text="<html>")
    client = client_factory()

    with pytest.raises(EnclosureReadException):
        await client.get_enclosure_temperature()


async def test_set_led_color(client_factory, octoprint):
    client = client_factory()

    result = await client.set_led_color(1, 255, 128, 0)

    assert result.ok
    assert octoprint.calls == [
        ("PATCH", "/plugin/enclosure/neopixel/1", {"red": 255, "green": 128, "blue": 0}),
    ]


async def test_set_output(client_factory, octoprint):
    client = client_factory()

    await client.set_output(7, True)
    await client.set_output(7, False)

    assert octoprint.calls == [
        ("PATCH", "/plugin/enclosure/outputs/7", {"status": True}),
        ("PATCH", "/plugin/enclosure/outputs/7", {"status": False}),
    ]


async def test_set_output_pwm(client_factory, octoprint):
    client = client_factory()

    await client.set_output_pwm(2, 65)

    assert octoprint.calls == [("PATCH", "/plugin/enclosure/pwm/2", {"duty_cycle": 65})]


async def test_set_output_transport_failure(client_factory, octoprint, notifications):
    octoprint.fail("PATCH", "/plugin/enclosure/outputs/4", httpx.ConnectError("no route to host"))
    client = client_factory()

    result = await client.set_output(4, True)

    assert not result.ok
    assert result.endpoint == "plugin/enclosure/outputs/4"
    notes = notifications.list()
    assert len(notes) == 1
    assert notes[0].type is NotificationType.error
    assert notes[0].message == "Can't set output!"
    assert notes[0].detail == "no route to host"


async def test_set_led_color_server_error(client_factory, octoprint, notifications):
    octoprint.reply("PATCH", "/plugin/enclosure/neopixel/1", status_code=500)
    client = client_factory()

    result = await client.set_led_color(1, 0, 0, 0)

    assert not result.ok
    notes = notifications.list()
    assert len(notes) == 1
    assert notes[0].message == "Can't set LED color!"
    assert notes[0].detail.startswith("HTTP 500 Internal Server Error")


async def test_base_url_trailing_slash(client_factory, octoprint):
    client = client_factory(OCTOPRINT_URL="http://octopi.local:5000/")

    await client.set_output(1, True)

    assert str(octoprint.requests[0].url) == "http://octopi.local:5000/plugin/enclosure/outputs/1"


async def test_get_version(client_factory, octoprint):
    octoprint.reply("GET", "/api/version", json_body={"api": "0.1", "server": "1.10.2"})
    client = client_factory()

    assert await client.get_version() == {"api": "0.1", "server": "1.10.2"}


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>login</html>"),
    httpx.Response(200, json=["not", "a", "dict"]),
])
async def test_get_version_bad_payload(client_factory, octoprint, response):
    octoprint.outcomes[("GET", "/api/version")] = response
    client = client_factory()

    with pytest.raises(OctoPrintTransportException) as excinfo:
        await client.get_version()

    assert excinfo.value.context["endpoint"] == "version"


async def test_aclose_leaves_injected_http_open(client_factory):
    client = client_factory()

    await client.aclose()

    assert not client.http.is_closed


async def test_aclose_closes_owned_http():
    client = OctoPrintEnclosureClient(make_settings())

    await client.aclose()

    assert client.http.is_closed
