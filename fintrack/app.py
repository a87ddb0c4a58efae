from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from fintrack.core.config import get_settings
from fintrack.core.errors import ServiceError
from fintrack.core.logging import configure_logging
from fintrack.core.responses import (
    ok,
    request_validation_handler,
    service_error_handler,
    unhandled_error_handler,
)
from fintrack.db.create_tables import create_all
from fintrack.routers import auth as auth_router
from fintrack.routers import categories as categories_router
from fintrack.routers import transactions as transactions_router

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers for a JSON-only API."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cache-Control", "no-store")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings = get_settings()
    if settings.app_env != "prod":
        # outside prod the schema is created on start; prod runs fintrack.db.create_tables
        create_all()
    logger.info("fintrack API started (env=%s)", settings.app_env)
    yield


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``uvicorn fintrack.app:create_app --factory``)."""
    settings = get_settings()
    configure_logging()
    application = FastAPI(title="fintrack API", lifespan=_lifespan)

    allowed_cors = set(settings.cors_origins)
    if settings.app_env != "prod":
        allowed_cors.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    if allowed_cors:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    application.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    application.add_exception_handler(ServiceError, service_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    @application.get("/health", tags=["health"])
    def health():
        return ok()

    application.include_router(auth_router.router)
    application.include_router(categories_router.router)
    application.include_router(transactions_router.router)
    return application


app = create_app()
