# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from itertools import count

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from threadline.db.session import Database, set_database
from threadline.main import app as fastapi_app
from threadline.services import communities as community_service
from threadline.services import threads as thread_service
from threadline.services import users as user_service
from threadline.services.revalidation import Revalidator, set_revalidator

TEST_DB_URL = "sqlite+aiosqlite://"

_COMMUNITY_COUNTER = count(1)


@pytest_asyncio.fixture()
async def database() -> AsyncIterator[Database]:
    """Install a fresh in-memory database as the process-wide instance."""
    db = Database(TEST_DB_URL)
    await db.create_tables()
    previous = set_database(db)
    try:
        yield db
    finally:
        set_database(previous)
        await db.dispose()


@pytest.fixture()
def revalidated() -> Iterator[list[str]]:
    """Collect every path revalidated during the test."""
    paths: list[str] = []
    revalidator = Revalidator()
    revalidator.add_listener(paths.append)
    previous = set_revalidator(revalidator)
    try:
        yield paths
    finally:
        set_revalidator(previous)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest_asyncio.fixture()
async def client(app: FastAPI, database: Database) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(database: Database, revalidated: list[str]) -> Callable[..., Awaitable[str]]:
    """Return a coroutine factory that onboards a user and returns their external id."""

    async def _make_user(
        user_id: str,
        *,
        username: str | None = None,
        name: str | None = None,
        bio: str | None = "",
        image: str | None = None,
    ) -> str:
        await user_service.update_user(
            user_id=user_id,
            username=username or user_id,
            name=name or user_id.title(),
            bio=bio,
            image=image,
            path="/onboarding",
        )
        return user_id

    return _make_user


@pytest.fixture()
def make_community(database: Database) -> Callable[..., Awaitable[str]]:
    """Return a coroutine factory that creates a community and returns its external id."""

    async def _make_community(
        created_by_id: str,
        *,
        community_id: str | None = None,
        name: str | None = None,
        username: str | None = None,
        bio: str | None = "A test community",
    ) -> str:
        seq = next(_COMMUNITY_COUNTER)
        community_id = community_id or f"org_{seq}"
        await community_service.create_community(
            id=community_id,
            name=name or f"Community {seq}",
            username=username or f"community-{seq}",
            image=None,
            bio=bio,
            created_by_id=created_by_id,
        )
        return community_id

    return _make_community


@pytest.fixture()
def make_thread(database: Database, revalidated: list[str]) -> Callable[..., Awaitable[int]]:
    """Return a coroutine factory that posts a top-level thread and returns its id."""

    async def _make_thread(
        author: str,
        text: str = "hello world",
        *,
        community_id: str | None = None,
        path: str = "/",
    ) -> int:
        return await thread_service.create_thread(
            text=text,
            author=author,
            community_id=community_id,
            path=path,
        )

    return _make_thread

