"""
tests.conftest

Shared fixtures.

Responsibilities:
- Fake session provider + retrying client with a recorded (instant) sleep.
- A file-backed SQLite database per test for store and API tests.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from admin_console.auth.models import Identity
from admin_console.data.retry import RetryingDataClient
from admin_console.db.init_db import init_db
from admin_console.db.session import create_engine, create_sessionmaker
from admin_console.settings import Settings
from tests.fakes import FakeSessions, RecordingSleep


@pytest.fixture
def sessions() -> FakeSessions:
    return FakeSessions(identity=Identity(id="admin-1", email="a@example.com"))


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def data_client(sessions: FakeSessions, sleeper: RecordingSleep) -> RetryingDataClient:
    return RetryingDataClient(sessions=sessions, retry_delay=0.1, sleep=sleeper)


@pytest.fixture
def settings(tmp_path) -> Settings:
    # File-backed: every new aiosqlite connection to ":memory:" would see an empty DB.
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'admin_console.db'}",
        retry_delay_seconds=0.0,
        jwt_secret="test-secret",
    )


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()
