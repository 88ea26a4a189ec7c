"""Database connection management.

The :class:`Database` object owns the process-scoped engine. It is created
lazily by :meth:`Database.ensure_connected`, which is idempotent and safe to
call from many concurrent requests: the first caller builds the engine and
verifies connectivity while the others wait on a lock.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from threadline.core.errors import StoreUnavailableError
from threadline.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import threadline.models  # noqa: E402,F401


def _connect_args(drivername: str, connect_timeout: float, socket_timeout: float) -> dict[str, Any]:
    """Translate the configured timeouts into driver-specific connect arguments."""
    if drivername == "postgresql+asyncpg":
        return {"timeout": connect_timeout, "command_timeout": socket_timeout}
    if drivername == "postgresql+psycopg":
        return {"connect_timeout": int(connect_timeout)}
    if drivername.startswith("sqlite"):
        return {"timeout": socket_timeout}
    return {}


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Process-scoped connection state with an explicit connect/dispose lifecycle."""

    def __init__(
        self,
        url: str | None = None,
        *,
        connect_timeout: float | None = None,
        socket_timeout: float | None = None,
        echo: bool | None = None,
    ) -> None:
        self.url = url if url is not None else settings.database_url
        self.connect_timeout = (
            connect_timeout if connect_timeout is not None else settings.db_connect_timeout_seconds
        )
        self.socket_timeout = (
            socket_timeout if socket_timeout is not None else settings.db_socket_timeout_seconds
        )
        self.echo = settings.sql_debug if echo is None else echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """Return True once connectivity has been verified and not yet disposed."""
        return self._sessionmaker is not None

    @property
    def engine(self) -> AsyncEngine:
        """Return the live engine, raising if the database is not connected."""
        if self._engine is None or self._sessionmaker is None:
            raise StoreUnavailableError("Database is not connected")
        return self._engine

    def _build_engine(self, url: str) -> AsyncEngine:
        parsed = make_url(url)
        options: dict[str, Any] = {
            "echo": self.echo,
            "connect_args": _connect_args(
                parsed.drivername, self.connect_timeout, self.socket_timeout
            ),
        }
        if parsed.drivername.startswith("sqlite"):
            if parsed.database in (None, "", ":memory:"):
                # A single shared connection keeps an in-memory database alive.
                options["poolclass"] = StaticPool
        else:
            options["pool_pre_ping"] = True
            options["pool_timeout"] = self.connect_timeout

        engine = create_async_engine(url, **options)
        if parsed.drivername.startswith("sqlite"):
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    async def _ping(self, engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def ensure_connected(self) -> AsyncEngine:
        """Open the connection on first use and return the engine.

        Returns:
            The connected engine.

        Raises:
            StoreUnavailableError: If no URL is configured or the store cannot
                be reached within the connect timeout.
        """
        if self._sessionmaker is not None and self._engine is not None:
            return self._engine

        async with self._lock:
            if self._sessionmaker is not None and self._engine is not None:
                return self._engine

            if not self.url:
                logger.warning("DATABASE_URL not configured; refusing to connect")
                raise StoreUnavailableError("DATABASE_URL is not configured")

            engine = self._build_engine(self.url)
            try:
                await asyncio.wait_for(self._ping(engine), timeout=self.connect_timeout)
            except (SQLAlchemyError, OSError, TimeoutError) as exc:
                logger.error("Database connection failed: %s", exc)
                await engine.dispose()
                raise StoreUnavailableError(f"Could not connect to database: {exc}") from exc

            self._engine = engine
            self._sessionmaker = async_sessionmaker(
                engine,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info("Database connected (%s)", make_url(self.url).render_as_string())
            return engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a unit-of-work session, committing on success.

        The session is rolled back if the body raises and is always closed.
        """
        await self.ensure_connected()
        assert self._sessionmaker is not None
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close pooled connections; a later ``ensure_connected`` reconnects."""
        async with self._lock:
            engine = self._engine
            self._engine = None
            self._sessionmaker = None
            if engine is not None:
                await engine.dispose()
                logger.info("Database connection disposed")

    async def create_tables(self) -> None:
        """Create all database tables."""
        engine = await self.ensure_connected()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        """Drop all database tables."""
        engine = await self.ensure_connected()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)


class _DatabaseSingleton:
    """Holder for the process-wide Database instance."""

    _instance: Database | None = None

    @classmethod
    def get_instance(cls) -> Database:
        """Get or create the process-wide Database instance."""
        if cls._instance is None:
            cls._instance = Database()
        return cls._instance

    @classmethod
    def set_instance(cls, database: Database | None) -> Database | None:
        previous = cls._instance
        cls._instance = database
        return previous


def get_database() -> Database:
    """Return the process-wide database instance."""
    return _DatabaseSingleton.get_instance()


def set_database(database: Database | None) -> Database | None:
    """Install ``database`` as the process-wide instance and return the previous one."""
    return _DatabaseSingleton.set_instance(database)


async def ensure_connected() -> AsyncEngine:
    """Ensure the process-wide database is connected."""
    return await get_database().ensure_connected()


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield a unit-of-work session for dependency injection."""
    async with get_database().session() as session:
        yield session
