"""
Exception handlers registered on the FastAPI app.

Every failure leaves the API as the same JSON envelope:

    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core import settings
from core.errors import BiomasError
from core.logging_config import get_logger

logger = get_logger("server")

GENERIC_INTERNAL_MESSAGE = "Internal server error."


def _error_response(status_code: int, code: str, message: str, details: object | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details,
            },
        },
    )


async def biomas_exception_handler(request: Request, exc: BiomasError) -> JSONResponse:
    status_code = getattr(exc, "status_code", 500)

    if status_code >= 500:
        logger.error("[%s] %s - Path: %s", exc.code, exc.message, request.url.path)
        message = exc.message if settings.is_development() else GENERIC_INTERNAL_MESSAGE
        return _error_response(status_code, exc.code, message)

    logger.warning("[%s] %s - Path: %s", exc.code, exc.message, request.url.path)
    return _error_response(status_code, exc.code, exc.message, exc.details())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": str(err.get("msg", "")),
        }
        for err in exc.errors()
    ]
    logger.warning("[VALIDATION_ERROR] %d invalid field(s) - Path: %s", len(errors), request.url.path)
    return _error_response(400, "VALIDATION_ERROR", "Invalid request.", {"errors": errors})


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    message = str(exc) if settings.is_development() else GENERIC_INTERNAL_MESSAGE
    return _error_response(500, "INTERNAL_ERROR", message or GENERIC_INTERNAL_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BiomasError, biomas_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
