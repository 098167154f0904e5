import logging
from typing import Annotated
from fastapi import APIRouter, BackgroundTasks, Depends, status
from enclosure_bridge.models.enclosure import AcceptedResponse
from enclosure_bridge.models.psu import PSUStateRequest, PSUStatus
from enclosure_bridge.services.octoprint_client import OctoPrintEnclosureClient
from enclosure_bridge.dependencies import get_enclosure_client

router = APIRouter(tags=["psu"])
log = logging.getLogger("enclosure_bridge.router.psu")

ClientDep = Annotated[OctoPrintEnclosureClient, Depends(get_enclosure_client)]

@router.get("", response_model=PSUStatus)
async def psu_status(client: ClientDep):
    return client.get_psu_status()

@router.put("/state", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def set_psu_state(body: PSUStateRequest, client: ClientDep, tasks: BackgroundTasks):
    log.info("psu/state: %s", body.state.value)
    tasks.add_task(client.set_psu_state, body.state)
    return AcceptedResponse(accepted="set_psu_state")

@router.post("/toggle", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def toggle_psu(client: ClientDep, tasks: BackgroundTasks):
    tasks.add_task(client.toggle_psu)
    return AcceptedResponse(accepted="toggle_psu")
