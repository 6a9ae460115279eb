"""
admin_console.data.retry

Session-aware retry wrapper for remote data operations.

Responsibilities:
- Run an operation; on a transient permission failure refresh the session, pause a
  fixed short delay and run it exactly once more.
- Surface hard failures immediately, and the second failure of a retry unmodified.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from admin_console.auth.session import SessionProvider
from admin_console.errors import TransientPermissionError
from admin_console.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]


class RetryingDataClient:
    def __init__(
        self,
        *,
        sessions: SessionProvider,
        retry_delay: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sessions = sessions
        self._retry_delay = retry_delay
        self._sleep = sleep

    async def execute(self, operation: Operation[T]) -> T:
        try:
            return await operation()
        except TransientPermissionError as e:
            log.info("transient_permission_error", code=e.code, error=str(e))

        await self._sessions.refresh_session()
        # Fixed pause for the refreshed context to propagate; not a backoff.
        await self._sleep(self._retry_delay)
        return await operation()


async def with_retry(client: RetryingDataClient, operation: Operation[T]) -> T:
    return await client.execute(operation)


# --- Module Notes -----------------------------------------------------------
# Classification is by exception type only. Stores translate backend codes into
# `TransientPermissionError` / `HardBackendError` (see `errors.classify_backend_error`).
