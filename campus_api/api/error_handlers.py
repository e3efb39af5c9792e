"""Error Handlers — global exception handlers for the Campus API.

Invariants:
    - CampusError -> its own status with the {success, msg, message, error} envelope
    - RequestValidationError -> 400, msg is the first field error
    - Exception (catch-all) -> 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from campus_api.core.errors import CampusError, ErrorSeverity

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_campus_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_campus_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CampusError)
    async def campus_error_handler(request: Request, exc: CampusError):
        """Handle all Campus API domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"CampusError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        headers = None
        if exc.context.retry_after_seconds is not None:
            headers = {"Retry-After": str(exc.context.retry_after_seconds)}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.info(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        message = "An unexpected error occurred"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "msg": message,
                "message": message,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def clean_message(raw: str) -> str:
    """Strip Pydantic's 'Value error, ' prefix from custom validator messages."""
    if raw.startswith(_VALUE_ERROR_PREFIX):
        return raw[len(_VALUE_ERROR_PREFIX):]
    return raw


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    errors = exc.errors()
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": clean_message(e["msg"]),
            "type": e["type"],
        }
        for e in errors
    ]
    message = details[0]["message"] if details else "Invalid request data"
    return {
        "success": False,
        "msg": message,
        "message": message,
        "error": {
            "code": "VALIDATION_ERROR",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": details,
        },
    }
