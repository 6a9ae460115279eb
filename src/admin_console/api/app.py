"""
admin_console.api.app

FastAPI app factory for the admin console service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Map the data-layer error taxonomy onto HTTP responses.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_502_BAD_GATEWAY,
)

from admin_console import __version__
from admin_console.api.routers.categories import router as categories_router
from admin_console.api.routers.dev_auth import router as dev_auth_router
from admin_console.api.routers.health import router as health_router
from admin_console.api.routers.tools import router as tools_router
from admin_console.auth.middleware import SessionRefreshMiddleware
from admin_console.db.init_db import init_db
from admin_console.db.session import create_engine, create_sessionmaker
from admin_console.errors import (
    HardBackendError,
    NotFoundError,
    SessionInvalid,
    TransientPermissionError,
)
from admin_console.observability.logging import configure_logging, get_logger
from admin_console.observability.middleware import RequestContextMiddleware
from admin_console.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Create the async DB engine and session factory once and stash them on app.state.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Admin Console",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(SessionRefreshMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(categories_router)
    app.include_router(tools_router)

    _register_error_handlers(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    # Handlers resolve by exception MRO, so NotFoundError wins over HardBackendError.
    @app.exception_handler(SessionInvalid)
    async def _session_invalid(_: Request, exc: SessionInvalid) -> JSONResponse:
        return JSONResponse(status_code=HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})

    @app.exception_handler(TransientPermissionError)
    async def _permission(_: Request, exc: TransientPermissionError) -> JSONResponse:
        # Reaching here means the single refresh-and-retry already failed.
        log.warning("permission_denied_after_retry", code=exc.code)
        return JSONResponse(status_code=HTTP_403_FORBIDDEN, content={"detail": "Permission denied"})

    @app.exception_handler(NotFoundError)
    async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(HardBackendError)
    async def _backend(_: Request, exc: HardBackendError) -> JSONResponse:
        log.error("backend_error", code=exc.code, error=str(exc))
        return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content={"detail": "Backend error"})


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; ordering and
# authorization logic stays in the core packages.
