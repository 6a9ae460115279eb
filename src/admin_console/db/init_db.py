"""
admin_console.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Seed a bootstrap super admin so a fresh dev database is usable.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from admin_console.auth.models import AdminRole
from admin_console.db import models  # noqa: F401  # register models on Base.metadata
from admin_console.db.base import Base
from admin_console.db.repositories.admins import AdminRepo
from admin_console.db.session import session_scope


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production should rely on Alembic migrations.
    """

    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_admin(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    identity_id: str,
    email: str,
    role: AdminRole = AdminRole.super_admin,
) -> None:
    async with session_scope(session_factory) as session:
        repo = AdminRepo(session)
        if await repo.get(identity_id) is None:
            await repo.create(id=identity_id, email=email, role=role)


# --- Module Notes -----------------------------------------------------------
# This helper is intentionally not used for prod. Production workflows should run
# Alembic migrations as part of deployment.
