"""JSON envelope helpers: every endpoint answers ``{success, data|message}``."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fintrack.core.errors import GENERIC_ERROR_MESSAGE, ServiceError

logger = logging.getLogger(__name__)

_NO_DATA = object()


def ok(data: Any = _NO_DATA, **extra: Any) -> dict:
    body = {"success": True}
    body.update(extra)
    if data is not _NO_DATA:
        body["data"] = data
    return body


def fail(message: Any) -> dict:
    return {"success": False, "message": message}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(fail(exc.message), status_code=exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or path params become a field -> messages map."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        errors.setdefault(str(loc[-1]), []).append(str(error.get("msg", "Invalid value.")))
    return JSONResponse(fail(errors), status_code=200)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(fail(GENERIC_ERROR_MESSAGE), status_code=200)
