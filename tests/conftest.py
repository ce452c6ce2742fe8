"""
SaaS App: Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- File-backed aiosqlite database per test (shared across sessions)
- Session factories with and without the default email templates
- SQL statement recorder for "no writes" assertions
- Notification dispatcher double and a repository wired to it
"""

from __future__ import annotations

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from saas_app.accounts.email_templates import insert_default_templates
from saas_app.accounts.user_repository import UserRepository
from saas_app.models.base import Base
from saas_app.notifications.dispatcher import NotificationDispatcher


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

pytest_plugins = ("pytest_asyncio",)


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Async engine on a temporary SQLite file.

    A file (not :memory:) so that every session opened by the repository
    sees the same database.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def empty_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory over the schema only: no email templates."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session_factory(
    empty_session_factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Session factory with the default email templates seeded."""
    async with empty_session_factory() as session:
        await insert_default_templates(session)
    return empty_session_factory


@pytest.fixture
def sql_statements(db_engine: AsyncEngine) -> list[str]:
    """Every SQL statement executed on the engine after this fixture is set up."""
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement)

    event.listen(db_engine.sync_engine, "before_cursor_execute", _record)
    yield statements
    event.remove(db_engine.sync_engine, "before_cursor_execute", _record)


# ---------------------------------------------------------------------------
# Notification Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def dispatcher() -> AsyncMock:
    """Dispatcher double: every notification succeeds."""
    mock = AsyncMock(spec=NotificationDispatcher)
    mock.send_welcome_email.return_value = True
    mock.register_signup.return_value = True
    return mock


@pytest.fixture
def repo(session_factory: async_sessionmaker[AsyncSession], dispatcher: AsyncMock) -> UserRepository:
    return UserRepository(session_factory, dispatcher)

