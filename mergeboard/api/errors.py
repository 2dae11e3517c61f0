"""Map service failures onto HTTP responses."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import ServiceError, method_error, unexpected_error, validation_error

logger = logging.getLogger(__name__)

NO_STORE = "no-store"


def error_response(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    merged = {"Cache-Control": NO_STORE, **(headers or {})}
    return JSONResponse({"error": message}, status_code=status_code, headers=merged)


def service_error_response(exc: ServiceError) -> JSONResponse:
    # Callers log store failures with their traceback before raising.
    return error_response(exc.status_code, exc.message, exc.headers)


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return service_error_response(exc)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        message = "Request body must be valid JSON"
    else:
        message = first.get("msg") or "Invalid payload"
    return service_error_response(validation_error(message))


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        allowed = (exc.headers or {}).get("Allow", "")
        return service_error_response(method_error(allowed))
    return error_response(exc.status_code, str(exc.detail), dict(exc.headers or {}))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return service_error_response(unexpected_error())


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers that render every failure as ``{"error": ...}``."""

    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = ["error_response", "register_error_handlers", "service_error_response"]
