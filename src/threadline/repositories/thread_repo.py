"""Data access helpers for working with threads."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.base import ExecutableOption

from threadline.models import Community, Thread, User

from .paging import paginate

__all__ = ["ThreadRepository"]


class ThreadRepository:
    """Thin wrapper around database access for thread entities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with an async SQLAlchemy session."""
        self.session = session

    async def get_by_id(
        self,
        thread_id: int,
        *,
        options: Sequence[ExecutableOption] = (),
    ) -> Thread | None:
        """Return a thread by identifier."""
        result = await self.session.execute(
            select(Thread).where(Thread.id == thread_id).options(*options)
        )
        return result.scalars().first()

    async def create(
        self,
        *,
        text: str,
        author: User,
        community: Community | None = None,
    ) -> Thread:
        """Insert a top-level thread and return the persisted ORM instance.

        Args:
            text: Validated thread body.
            author: Authoring user; the thread joins their authored threads.
            community: Optional owning community.
        """
        thread = Thread(text=text, author=author, community=community)
        self.session.add(thread)
        await self.session.flush()
        return thread

    async def get_with_children(self, thread_id: int) -> Thread | None:
        """Return a thread with its direct replies loaded."""
        return await self.get_by_id(thread_id, options=[selectinload(Thread.children)])

    async def add_reply(self, *, parent: Thread, text: str, author: User) -> Thread:
        """Insert a reply and append it to ``parent``'s children.

        ``parent`` must have been loaded with its children, see
        :meth:`get_with_children`.
        """
        reply = Thread(text=text, author=author)
        parent.children.append(reply)
        self.session.add(reply)
        await self.session.flush()
        return reply

    async def list_top_level_page(
        self,
        *,
        page_number: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Thread], bool]:
        """Return a newest-first page of threads that have no parent."""
        return await paginate(
            self.session,
            select(Thread).where(Thread.parent_id.is_(None)),
            sort_column=Thread.created_at,
            page_number=page_number,
            page_size=page_size,
            sort_by="desc",
            options=[
                selectinload(Thread.author),
                selectinload(Thread.community),
                selectinload(Thread.children).selectinload(Thread.author),
            ],
        )

    async def get_detail(self, thread_id: int) -> Thread | None:
        """Return a thread with two levels of replies and their authors loaded."""
        return await self.get_by_id(
            thread_id,
            options=[
                selectinload(Thread.author),
                selectinload(Thread.community),
                selectinload(Thread.children).selectinload(Thread.author),
                selectinload(Thread.children).selectinload(Thread.community),
                selectinload(Thread.children)
                .selectinload(Thread.children)
                .selectinload(Thread.author),
            ],
        )
