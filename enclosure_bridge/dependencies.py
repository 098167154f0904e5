"""
Dependency injection for the FastAPI application.
Lazily created singletons shared by all requests.
"""
import asyncio
import logging
from typing import Optional, Dict, Any
from enclosure_bridge.core.config import settings
from enclosure_bridge.exceptions.enclosure import OctoPrintTransportException
from enclosure_bridge.services.notifications import NotificationService
from enclosure_bridge.services.octoprint_client import OctoPrintEnclosureClient, resolve_psu_backend

log = logging.getLogger("enclosure_bridge.dependencies")

_notifications: Optional[NotificationService] = None
_client: Optional[OctoPrintEnclosureClient] = None
_client_lock = asyncio.Lock()


def get_notification_service() -> NotificationService:
    global _notifications

    if _notifications is None:
        _notifications = NotificationService(settings.NOTIFICATION_HISTORY)
    return _notifications


async def get_enclosure_client() -> OctoPrintEnclosureClient:
    global _client

    async with _client_lock:
        if _client is None:
            log.info("Initializing OctoPrint client for %s", settings.OCTOPRINT_URL)
            _client = OctoPrintEnclosureClient(settings, get_notification_service())
    return _client


async def cleanup_services():
    global _client

    if _client:
        log.info("Closing OctoPrint client")
        try:
            await _client.aclose()
        except Exception as e:
            log.error(f"Error closing OctoPrint client: {e}")
    _client = None
    log.info("Service cleanup completed")


async def check_octoprint_health(client: OctoPrintEnclosureClient) -> Dict[str, Any]:
    backend = resolve_psu_backend(client.cfg)
    try:
        version = await client.get_version()
        return {
            "status": "healthy",
            "server": version.get("server"),
            "api": version.get("api"),
            "psu_backend": backend.value if backend else None,
        }
    except OctoPrintTransportException as e:
        return {
            "status": "unhealthy",
            "error": e.message,
            "server": None,
            "api": None,
            "psu_backend": backend.value if backend else None,
        }
