"""
Exception Handlers for FastAPI Application.

This module maps service-layer ``SiteError`` exceptions to JSON error
responses and provides a global handler that catches all unhandled
exceptions, logging an error ID, the request context and the full traceback.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from abg_site.core.logging_config import get_logger
from abg_site.core.monitoring import log_error
from abg_site.server.errors import SiteError

logger = get_logger(__name__)


async def site_error_handler(request: Request, exc: SiteError) -> JSONResponse:
    """
    Convert a refused business operation into its HTTP response.

    Args:
        request: The HTTP request that triggered the error
        exc: The service-layer error

    Returns:
        JSONResponse with the error's status code, message and details
    """
    logger.info(
        f"Request refused in {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, **exc.details},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Returns a JSON response with an error ID that clients can use to reference
    the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(SiteError, site_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
