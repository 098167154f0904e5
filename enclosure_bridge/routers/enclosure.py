import logging
from typing import Annotated
from fastapi import APIRouter, BackgroundTasks, Depends, status
from enclosure_bridge.models.enclosure import (
    AcceptedResponse, LEDColorRequest, OutputRequest, PWMRequest, TemperatureReading,
)
from enclosure_bridge.services.octoprint_client import OctoPrintEnclosureClient
from enclosure_bridge.dependencies import get_enclosure_client

router = APIRouter(tags=["enclosure"])
log = logging.getLogger("enclosure_bridge.router.enclosure")

ClientDep = Annotated[OctoPrintEnclosureClient, Depends(get_enclosure_client)]

@router.get("/temperature", response_model=TemperatureReading)
async def enclosure_temperature(client: ClientDep):
    reading = await client.get_enclosure_temperature()
    log.debug("enclosure/temperature -> %s", reading)
    return reading

@router.patch("/neopixel/{identifier}", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_led_color(identifier: int, body: LEDColorRequest, client: ClientDep, tasks: BackgroundTasks):
    log.info("enclosure/neopixel/%s: %s", identifier, body)
    tasks.add_task(client.set_led_color, identifier, body.red, body.green, body.blue)
    return AcceptedResponse(accepted="set_led_color")

@router.patch("/outputs/{identifier}", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_output(identifier: int, body: OutputRequest, client: ClientDep, tasks: BackgroundTasks):
    tasks.add_task(client.set_output, identifier, body.status)
    return AcceptedResponse(accepted="set_output")

@router.patch("/pwm/{identifier}", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_output_pwm(identifier: int, body: PWMRequest, client: ClientDep, tasks: BackgroundTasks):
    tasks.add_task(client.set_output_pwm, identifier, body.duty_cycle)
    return AcceptedResponse(accepted="set_output_pwm")
