"""
admin_console.stores.admins

Admin directory: identity id -> admin record.

Responsibilities:
- Define the `AdminDirectory` protocol used by the authorization gate.
- Look records up in the `admins` table through the retrying client, failing
  closed (None) on any error.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from admin_console.auth.models import AdminRecord, AdminRole
from admin_console.data.retry import RetryingDataClient
from admin_console.db.repositories.admins import AdminRepo
from admin_console.observability.logging import get_logger
from admin_console.stores.base import SqlStore

log = get_logger(__name__)


class AdminDirectory(Protocol):
    async def lookup(self, identity_id: str) -> AdminRecord | None: ...


class SqlAdminDirectory(SqlStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        client: RetryingDataClient,
    ) -> None:
        super().__init__(session_factory)
        self._client = client

    async def lookup(self, identity_id: str) -> AdminRecord | None:
        try:
            role = await self._client.execute(lambda: self._role_of(identity_id))
        except Exception as e:
            # Unknown enum values surface here as LookupError; treat like any other failure.
            log.warning("admin_lookup_failed", identity=identity_id, error=str(e))
            return None
        if role is None:
            return None
        return AdminRecord(id=identity_id, role=AdminRole(role))

    async def _role_of(self, identity_id: str) -> AdminRole | None:
        async with self._scope() as session:
            return await AdminRepo(session).role_of(identity_id)


class StaticAdminDirectory:
    """
    In-memory directory for wiring tests and local tooling.
    """

    def __init__(self, records: dict[str, AdminRole] | None = None) -> None:
        self._records = dict(records or {})

    async def lookup(self, identity_id: str) -> AdminRecord | None:
        role = self._records.get(identity_id)
        return None if role is None else AdminRecord(id=identity_id, role=role)


# --- Module Notes -----------------------------------------------------------
# The gate also treats lookup exceptions as "no record", so a directory that does
# raise still cannot produce an AUTHORIZED decision.
