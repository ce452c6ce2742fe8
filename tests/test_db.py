"""Tests for the process-wide database handle and the bootstrap entrypoint."""

from __future__ import annotations

import pytest
import pytest_asyncio
from sqlalchemy import select

from saas_app import db, main as main_module
from saas_app.accounts.email_templates import DEFAULT_TEMPLATES
from saas_app.models.email_template import EmailTemplate


@pytest_asyncio.fixture
async def database_url(tmp_path):
    """SQLite URL for the global handle; the handle is always reset afterwards."""
    yield f"sqlite+aiosqlite:///{tmp_path / 'app.db'}"
    await db.close_db()


class TestEngineOptions:
    def test_sqlite_has_no_pool_sizing(self) -> None:
        assert db._engine_options("sqlite+aiosqlite:///x.db") == {}

    def test_postgres_uses_pool_settings(self) -> None:
        options = db._engine_options("postgresql+asyncpg://u:p@localhost/app")
        assert options["pool_pre_ping"] is True
        assert "pool_size" in options
        assert "max_overflow" in options


@pytest.mark.asyncio
class TestLifecycle:
    async def test_factory_before_init_raises(self) -> None:
        await db.close_db()
        with pytest.raises(RuntimeError, match="init_db"):
            db.get_session_factory()
        with pytest.raises(RuntimeError):
            db.get_engine()

    async def test_init_is_idempotent(self, database_url) -> None:
        first = await db.init_db(database_url)
        second = await db.init_db(database_url)

        assert first is second
        assert db.get_session_factory() is first

    async def test_close_resets_handle(self, database_url) -> None:
        await db.init_db(database_url)
        await db.close_db()

        with pytest.raises(RuntimeError):
            db.get_session_factory()

    async def test_close_without_init_is_safe(self) -> None:
        await db.close_db()
        await db.close_db()

    async def test_create_tables_and_health_check(self, database_url) -> None:
        await db.init_db(database_url)
        await db.create_tables()
        await db.check_connection()

        async with db.get_session_factory()() as session:
            rows = (await session.execute(select(EmailTemplate))).scalars().all()
        assert rows == []


@pytest.mark.asyncio
class TestBootstrap:
    async def test_main_seeds_templates_and_closes(self, database_url, monkeypatch) -> None:
        await db.init_db(database_url)
        await db.create_tables()
        monkeypatch.setattr(main_module, "configure_logging", lambda log_level="INFO": None)

        await main_module.main()

        # main() disposed the handle it reused
        with pytest.raises(RuntimeError):
            db.get_session_factory()

        await db.init_db(database_url)
        async with db.get_session_factory()() as session:
            names = (await session.execute(select(EmailTemplate.name))).scalars().all()
        assert sorted(names) == sorted(DEFAULT_TEMPLATES)

    async def test_main_propagates_startup_failure(self, database_url, monkeypatch) -> None:
        # Schema never created: seeding fails
        await db.init_db(database_url)
        monkeypatch.setattr(main_module, "configure_logging", lambda log_level="INFO": None)

        with pytest.raises(Exception):
            await main_module.main()

        with pytest.raises(RuntimeError):
            db.get_session_factory()
