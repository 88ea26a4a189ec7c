# tests/test_db_session.py
"""Tests for the database connection manager."""

import asyncio

import pytest
from sqlalchemy import text

from threadline.core.errors import StoreError, StoreUnavailableError
from threadline.db.session import (
    Database,
    _connect_args,
    get_database,
    get_session,
    set_database,
)
from threadline.models import User


@pytest.mark.asyncio
async def test_missing_url_raises_unavailable() -> None:
    """An unconfigured store is reported instead of silently ignored."""
    database = Database("")

    with pytest.raises(StoreUnavailableError, match="not configured"):
        await database.ensure_connected()

    assert database.is_connected is False


@pytest.mark.asyncio
async def test_unreachable_store_raises_unavailable(tmp_path) -> None:
    missing_dir = tmp_path / "does-not-exist" / "db.sqlite"
    database = Database(f"sqlite+aiosqlite:///{missing_dir}")

    with pytest.raises(StoreUnavailableError, match="Could not connect"):
        await database.ensure_connected()

    assert database.is_connected is False
    assert isinstance(StoreUnavailableError("x"), StoreError)


@pytest.mark.asyncio
async def test_ensure_connected_is_idempotent() -> None:
    database = Database("sqlite+aiosqlite://")
    try:
        first = await database.ensure_connected()
        second = await database.ensure_connected()

        assert first is second
        assert database.is_connected is True
    finally:
        await database.dispose()


@pytest.mark.asyncio
async def test_concurrent_first_calls_share_one_engine() -> None:
    database = Database("sqlite+aiosqlite://")
    try:
        engines = await asyncio.gather(*(database.ensure_connected() for _ in range(5)))

        assert len({id(engine) for engine in engines}) == 1
    finally:
        await database.dispose()


@pytest.mark.asyncio
async def test_dispose_then_reconnect() -> None:
    database = Database("sqlite+aiosqlite://")
    first = await database.ensure_connected()

    await database.dispose()
    assert database.is_connected is False
    with pytest.raises(StoreUnavailableError):
        _ = database.engine

    second = await database.ensure_connected()
    try:
        assert second is not first
    finally:
        await database.dispose()


@pytest.mark.asyncio
async def test_session_rolls_back_on_error(database) -> None:
    with pytest.raises(RuntimeError):
        async with database.session() as session:
            session.add(User(external_id="u1", username="u1", name="U1"))
            await session.flush()
            raise RuntimeError("abort")

    async with database.session() as session:
        count = await session.scalar(text("SELECT COUNT(*) FROM users"))
    assert count == 0


@pytest.mark.asyncio
async def test_sqlite_foreign_keys_enforced(database) -> None:
    async with database.session() as session:
        enabled = await session.scalar(text("PRAGMA foreign_keys"))
    assert enabled == 1


def test_connect_args_carry_timeouts() -> None:
    assert _connect_args("postgresql+asyncpg", 20.0, 20.0) == {
        "timeout": 20.0,
        "command_timeout": 20.0,
    }
    assert _connect_args("postgresql+psycopg", 20.0, 20.0) == {"connect_timeout": 20}
    assert _connect_args("sqlite+aiosqlite", 20.0, 15.0) == {"timeout": 15.0}
    assert _connect_args("mysql+aiomysql", 20.0, 20.0) == {}


def test_database_defaults_to_configured_timeouts() -> None:
    database = Database("sqlite+aiosqlite://")

    assert database.connect_timeout == 20.0
    assert database.socket_timeout == 20.0


def test_set_database_returns_previous() -> None:
    replacement = Database("sqlite+aiosqlite://")
    previous = set_database(replacement)
    try:
        assert get_database() is replacement
    finally:
        set_database(previous)


@pytest.mark.asyncio
async def test_get_session_yields_session_from_process_database(database) -> None:
    sessions = get_session()
    session = await anext(sessions)
    try:
        assert await session.scalar(text("SELECT 1")) == 1
    finally:
        await sessions.aclose()


@pytest.mark.asyncio
async def test_get_session_without_database_raises_unavailable() -> None:
    previous = set_database(Database(""))
    try:
        with pytest.raises(StoreUnavailableError):
            await anext(get_session())
    finally:
        set_database(previous)
