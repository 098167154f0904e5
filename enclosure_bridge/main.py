from contextlib import asynccontextmanager
import logging
from typing import Annotated
from fastapi import Depends, FastAPI
from enclosure_bridge.core.config import settings
from enclosure_bridge.core.logging import setup_logging
from enclosure_bridge.dependencies import cleanup_services, check_octoprint_health, get_enclosure_client
from enclosure_bridge.exceptions.enclosure import EnclosureException, enclosure_exception_handler, general_exception_handler
from enclosure_bridge.routers import enclosure, notifications, psu
from enclosure_bridge.services.octoprint_client import OctoPrintEnclosureClient

__version__ = "0.1.0"

setup_logging(settings.LOG_LEVEL)
log = logging.getLogger("enclosure_bridge.main")

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Application startup - OctoPrint at %s", settings.OCTOPRINT_URL)
    yield
    log.info("Application shutdown - cleaning up services")
    await cleanup_services()

app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    docs_url="/docs",
    redoc_url=None,
    lifespan=lifespan,
)

app.add_exception_handler(EnclosureException, enclosure_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(enclosure.router, prefix="/enclosure")
app.include_router(psu.router, prefix="/psu")
app.include_router(notifications.router, prefix="/notifications")

@app.get("/health")
async def health_check(client: Annotated[OctoPrintEnclosureClient, Depends(get_enclosure_client)]):
    octoprint_health = await check_octoprint_health(client)
    return {
        "status": octoprint_health["status"],
        "services": {
            "octoprint": octoprint_health,
        },
        "version": __version__,
    }
