"""
SaaS App: Process-Wide Database Handle

One async engine and session factory per process, created explicitly at
startup with init_db() and disposed at shutdown with close_db(). Components
receive the session factory by injection (get_session_factory()) instead of
importing a global connection.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from saas_app.config import settings
from saas_app.models.base import Base

logger = structlog.get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    # SQLite (tests, local dev) does not take pool sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,
    }


async def init_db(url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """
    Create the process-wide engine and session factory.

    Idempotent: a second call returns the existing factory.

    Args:
        url: SQLAlchemy async URL. Defaults to settings.DATABASE_URL.
    """
    global _engine, _session_factory

    if _session_factory is not None:
        return _session_factory

    database_url = url or settings.DATABASE_URL
    logger.info("database_engine_initializing", dialect=database_url.split(":", 1)[0])

    _engine = create_async_engine(database_url, echo=False, **_engine_options(database_url))
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.info("database_engine_ready")
    return _session_factory


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() at startup.")
    return _session_factory


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() at startup.")
    return _engine


async def create_tables() -> None:
    """Create all tables from model metadata (tests and local dev; production uses alembic)."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection() -> None:
    """Health check: raises if the database is unreachable."""
    async with get_session_factory()() as session:
        await session.execute(text("SELECT 1"))


async def close_db() -> None:
    """Dispose the engine. Safe to call when init_db() never ran."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("database_engine_disposed")
    _engine = None
    _session_factory = None
