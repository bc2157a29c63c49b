"""Centralized exception handlers for FastAPI apps using the service layer.

Register with register_exception_handlers(app). Maps service layer
exceptions to JSON responses by error_code.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from service_layer.core.config import get_settings
from service_layer.domain.exceptions import ServiceLayerException

logger = logging.getLogger(__name__)

# Map error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "PERMISSION_DENIED": 403,
    "UNAUTHORIZED_USER": 403,
    "INVALID_QUERY_PARAMETER": 400,
    "INVALID_CONTEXT": 500,
    "CACHE_UNAVAILABLE": 503,
}


def status_for(exc: ServiceLayerException) -> int:
    """HTTP status for an exception's error_code (400 when unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _service_layer_exception_handler(
    request: Request, exc: ServiceLayerException
) -> JSONResponse:
    """Return JSON from ServiceLayerException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception on %s", request.url.path)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the service layer and fallback handlers on the FastAPI app."""
    app.add_exception_handler(ServiceLayerException, _service_layer_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
