from fastapi import Request
from fastapi.responses import JSONResponse
import logging
import time
from typing import Optional, Dict, Any

log = logging.getLogger("enclosure_bridge.exceptions")

class EnclosureException(Exception):
    """Base enclosure exception with error context"""
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        timestamp: Optional[float] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.timestamp = timestamp or time.time()
        super().__init__(self.message)

class OctoPrintTransportException(EnclosureException):
    """Request to OctoPrint failed (network error or non-2xx answer)"""
    def __init__(self, message: str, endpoint: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        ctx = {"endpoint": endpoint, **(context or {})} if endpoint else (context or {})
        super().__init__(message, 502, "OCTOPRINT_TRANSPORT_FAILED", ctx)

class EnclosureReadException(OctoPrintTransportException):
    """Sensor input could not be read from the Enclosure plugin"""
    def __init__(self, message: str, endpoint: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"Enclosure read failed: {message}", endpoint, context)
        self.error_code = "ENCLOSURE_READ_FAILED"

class PSUNotConfiguredException(EnclosureException):
    """No PSU backend is selected"""
    def __init__(self, message: str = "No provider for PSU Control is configured.", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, 409, "PSU_NOT_CONFIGURED", context)

# Exception handlers
async def enclosure_exception_handler(request: Request, exc: EnclosureException):
    request_info = {
        "method": request.method,
        "url": str(request.url),
    }

    log.error(
        f"Enclosure exception [{exc.error_code}]: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "status_code": exc.status_code,
            "context": exc.context,
            "request": request_info,
            "timestamp": exc.timestamp
        }
    )

    error_response = {
        "error": {
            "code": exc.error_code,
            "type": exc.__class__.__name__,
            "message": exc.message,
            "timestamp": exc.timestamp
        },
        "status_code": exc.status_code
    }

    if exc.context:
        # never echo credentials back
        safe_context = {
            k: v for k, v in exc.context.items()
            if k not in ["api_key", "token", "key", "secret"]
        }
        if safe_context:
            error_response["error"]["context"] = safe_context

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response
    )

async def general_exception_handler(request: Request, exc: Exception):
    log.error(
        f"Unexpected error: {str(exc)}",
        exc_info=True,
        extra={
            "error_type": exc.__class__.__name__,
            "request": {"method": request.method, "url": str(request.url)},
            "timestamp": time.time()
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_SERVER_ERROR",
                "type": "InternalServerError",
                "message": "An unexpected error occurred",
                "timestamp": time.time()
            },
            "status_code": 500
        }
    )


def create_error_context(
    operation: str,
    endpoint: Optional[str] = None,
    method: Optional[str] = None,
    status_code: Optional[int] = None,
    **kwargs
) -> Dict[str, Any]:
    """Helper to create standardized error context"""
    context = {"operation": operation}

    if endpoint is not None:
        context["endpoint"] = endpoint
    if method is not None:
        context["method"] = method
    if status_code is not None:
        context["status_code"] = status_code

    context.update(kwargs)

    return context
