"""
admin_console.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings and DB sessions.
- Encapsulate app.state access patterns (settings/engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette import status

from admin_console.settings import Settings

# Starlette renamed 422 to UNPROCESSABLE_CONTENT and warns on the old name.
HTTP_422_UNPROCESSABLE = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


def settings_dep(request: Request) -> Settings:
    # The app factory stores its Settings on app.state so tests can inject their own.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `admin_console.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session for health checks; stores open their own units of work.
    async with session_factory() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Auth-related dependencies (session provider, gate, data client) live in
# `admin_console.auth.deps` and build on these.
