from __future__ import annotations

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from admin_console.data.retry import RetryingDataClient, with_retry
from admin_console.errors import (
    HardBackendError,
    NotFoundError,
    TransientPermissionError,
    classify_backend_error,
)
from admin_console.stores.base import translate_db_error
from tests.fakes import FakeSessions, RecordingSleep, transient


class _Op:
    def __init__(self, *outcomes: object) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.mark.asyncio
async def test_success_needs_no_refresh(data_client, sessions, sleeper) -> None:
    op = _Op("rows")
    assert await data_client.execute(op) == "rows"
    assert op.calls == 1
    assert sessions.refreshes == 0
    assert sleeper.delays == []


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["42501", "PGRST301", "PGRST302", "PGRST303"])
async def test_transient_failure_refreshes_pauses_and_retries_once(
    data_client, sessions, sleeper, code
) -> None:
    op = _Op(transient(code), "rows")
    assert await data_client.execute(op) == "rows"
    assert op.calls == 2
    assert sessions.refreshes == 1
    assert sleeper.delays == [0.1]


@pytest.mark.asyncio
async def test_refresh_happens_before_the_pause() -> None:
    events: list[str] = []
    client = RetryingDataClient(
        sessions=FakeSessions(events=events), retry_delay=0.1, sleep=RecordingSleep(events)
    )
    await client.execute(_Op(transient(), None))
    assert events == ["refresh", "sleep"]


@pytest.mark.asyncio
async def test_second_transient_failure_is_surfaced_unmodified(data_client, sessions) -> None:
    second = transient("PGRST301")
    op = _Op(transient(), second, "never")

    with pytest.raises(TransientPermissionError) as exc_info:
        await data_client.execute(op)

    assert exc_info.value is second
    assert op.calls == 2
    assert sessions.refreshes == 1


@pytest.mark.asyncio
async def test_hard_error_is_not_retried(data_client, sessions, sleeper) -> None:
    op = _Op(HardBackendError("unique violation", code="23505"), "never")
    with pytest.raises(HardBackendError):
        await data_client.execute(op)
    assert op.calls == 1
    assert sessions.refreshes == 0
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_hard_error_after_refresh_is_surfaced(data_client, sessions) -> None:
    op = _Op(transient(), NotFoundError("gone"))
    with pytest.raises(NotFoundError):
        await data_client.execute(op)
    assert sessions.refreshes == 1


@pytest.mark.asyncio
async def test_with_retry_delegates(data_client) -> None:
    assert await with_retry(data_client, _Op(transient(), 7)) == 7


def test_classification_is_by_code_only() -> None:
    assert isinstance(classify_backend_error("42501", "whatever"), TransientPermissionError)
    assert isinstance(classify_backend_error("PGRST303", ""), TransientPermissionError)
    # Message text never promotes an error to transient.
    assert type(classify_backend_error(None, "JWT expired")) is HardBackendError
    assert type(classify_backend_error("23505", "permission denied")) is HardBackendError


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def test_translate_db_error_reads_sqlstate() -> None:
    exc = DBAPIError("UPDATE categories", {}, _DriverError("rls rejected", "42501"))
    translated = translate_db_error(exc)
    assert isinstance(translated, TransientPermissionError)
    assert translated.code == "42501"

    exc = IntegrityError("INSERT", {}, _DriverError("duplicate key", "23505"))
    translated = translate_db_error(exc)
    assert type(translated) is HardBackendError
    assert translated.code == "23505"


def test_translate_db_error_without_code_is_hard() -> None:
    translated = translate_db_error(DBAPIError("SELECT 1", {}, _DriverError("closed", None)))
    assert type(translated) is HardBackendError
    assert translated.code is None
