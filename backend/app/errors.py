"""Exception handlers rendering every error as ``{"error": "<message>"}``."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.gamification.errors import GamificationError

logger = logging.getLogger(__name__)


def _detail_message(detail: Any) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict) and "error" in detail:
        return str(detail["error"])
    return str(detail)


def _validation_message(exc: RequestValidationError) -> str:
    """First validation error as ``field: reason``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _detail_message(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _validation_message(exc)},
    )


async def gamification_exception_handler(request: Request, exc: GamificationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the uniform error handlers on an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(GamificationError, gamification_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
