"""
admin_console.stores.base

ResourceStore protocol and shared SQL store plumbing.

Responsibilities:
- Define the ordered-resource contract (`list_ordered`, `update_sort_order`).
- Translate SQLAlchemy/driver errors into `TransientPermissionError` or
  `HardBackendError` using the backend's SQLSTATE.
- Run every store operation in its own committed unit of work.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from admin_console.db.session import session_scope
from admin_console.errors import DataStoreError, HardBackendError, classify_backend_error
from admin_console.ordering.models import OrderedNode


class ResourceStore(Protocol):
    async def list_ordered(self, parent_id: str | None = None) -> list[OrderedNode]: ...

    async def update_sort_order(
        self, node_id: str, sort_order: int, *, is_child: bool = False
    ) -> None: ...


def translate_db_error(exc: SQLAlchemyError) -> DataStoreError:
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        # asyncpg exposes `sqlstate`, psycopg exposes both `sqlstate` and `pgcode`.
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return classify_backend_error(str(code) if code else None, str(orig))
    return HardBackendError(str(exc))


class SqlStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _scope(self) -> AsyncIterator[AsyncSession]:
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e


# --- Module Notes -----------------------------------------------------------
# `update_sort_order` signals failure by raising a `DataStoreError` subclass; a
# successful return means the write is committed.
