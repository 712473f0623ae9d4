"""Global exception handlers.

All failures leave the API in one envelope::

    {"error": {"code": ..., "message": ..., "request_id": ..., "details": ...},
     "success": false}

- ``AppError`` subclasses answer with their own ``status_code``
- request body validation failures answer 400 ``invalid_request_format``
  (FastAPI's default would be 422)
- anything else is a generic 500 that never echoes the exception text

``RateLimitExceededError`` answers 429 with a flat
``{"error": str, "success": false, "retryAfter": epoch_ms}`` body.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from finchat.core.errors import AppError, RateLimitExceededError
from finchat.core.logging import get_request_id

logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    error = {"code": code, "message": message, "request_id": get_request_id()}
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error, "success": False})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": exc.status_code,
            "request_path": request.url.path,
        },
    )
    return error_response(exc.status_code, exc.code, exc.message, dict(exc.details) if exc.details else None)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    # Flat body: the web client reads error/retryAfter at the top level
    return JSONResponse(
        status_code=429,
        content={"error": exc.message, "success": False, "retryAfter": exc.retry_after_ms},
        headers=exc.headers or None,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only location, message and type: ``input`` would echo user text back
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info(
        "request_validation_failed",
        extra={"request_path": request.url.path, "error_count": len(errors)},
    )
    return error_response(400, "invalid_request_format", "Invalid request format", {"errors": errors})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the failure, answer with a generic 500."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return error_response(
        500,
        "internal_server_error",
        "An unexpected error occurred. Please try again later.",
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)
