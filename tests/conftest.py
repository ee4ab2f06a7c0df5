"""
Shared pytest fixtures for the database, settings, and task log capture.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.config import Settings
from src.db.models import Base
from src.logger import CapturingTaskLog


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    """Provide an async in-memory SQLite engine with the CMS tables created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""

    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Create an AsyncSession per test."""

    async with session_factory() as session:
        yield session


@pytest.fixture
def executed_statements(db_engine: AsyncEngine) -> Iterator[list[str]]:
    """Record every SQL statement sent to the test engine."""

    statements: list[str] = []

    def _record(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        statements.append(statement)

    event.listen(db_engine.sync_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(db_engine.sync_engine, "before_cursor_execute", _record)


@pytest.fixture
def task_log() -> CapturingTaskLog:
    """Task log sink that keeps lines for assertions."""

    return CapturingTaskLog()


@pytest.fixture
def settings_override(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Override global settings with test-friendly configuration."""

    from src import config as config_module

    base_settings = config_module.Settings()
    database = base_settings.database.model_copy(
        update={"url": "sqlite+aiosqlite:///:memory:", "echo": False}
    )
    overrides = base_settings.model_copy(update={"database": database})
    monkeypatch.setattr(config_module, "get_settings", lambda: overrides)
    return overrides
