"""Data access helpers for working with users."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.base import ExecutableOption

from threadline.core.errors import NotFoundError
from threadline.models import Thread, User

from .paging import SortOrder, paginate, search_filter

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with an async SQLAlchemy session."""
        self.session = session

    async def get_by_external_id(
        self,
        external_id: str,
        *,
        options: Sequence[ExecutableOption] = (),
    ) -> User | None:
        """Return a user by external identifier."""
        result = await self.session.execute(
            select(User).where(User.external_id == external_id).options(*options)
        )
        return result.scalars().first()

    async def require(
        self,
        external_id: str,
        *,
        options: Sequence[ExecutableOption] = (),
    ) -> User:
        """Return a user by external identifier or raise ``NotFoundError``."""
        user = await self.get_by_external_id(external_id, options=options)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def upsert_profile(
        self,
        *,
        external_id: str,
        username: str,
        name: str,
        bio: str | None,
        image: str | None,
    ) -> User:
        """Create the user if missing, otherwise overwrite the profile fields.

        The username is stored lower-cased and the user is always marked as
        onboarded.
        """
        user = await self.get_by_external_id(external_id)
        if user is None:
            user = User(external_id=external_id)
            self.session.add(user)

        user.username = username.lower()
        user.name = name
        user.bio = bio
        user.image = image
        user.onboarded = True
        await self.session.flush()
        return user

    async def get_profile(self, external_id: str) -> User:
        """Return a user with communities loaded, raising if absent."""
        return await self.require(external_id, options=[selectinload(User.communities)])

    async def list_page(
        self,
        *,
        exclude_external_id: str,
        search_string: str = "",
        page_number: int = 1,
        page_size: int = 20,
        sort_by: SortOrder = "desc",
    ) -> tuple[list[User], bool]:
        """Return a page of users other than ``exclude_external_id``.

        A non-blank ``search_string`` matches case-insensitively against the
        username or the display name.
        """
        stmt = select(User).where(User.external_id != exclude_external_id)
        criteria = search_filter([User.username, User.name], search_string)
        if criteria is not None:
            stmt = stmt.where(criteria)

        return await paginate(
            self.session,
            stmt,
            sort_column=User.created_at,
            page_number=page_number,
            page_size=page_size,
            sort_by=sort_by,
        )

    async def list_top_level_threads(self, user: User) -> list[Thread]:
        """Return the top-level threads authored by ``user``, oldest first.

        Each thread carries its author, community and replies with their authors.
        """
        result = await self.session.execute(
            select(Thread)
            .where(Thread.author_id == user.id, Thread.parent_id.is_(None))
            .options(
                selectinload(Thread.author),
                selectinload(Thread.community),
                selectinload(Thread.children).selectinload(Thread.author),
            )
            .order_by(Thread.created_at.asc(), Thread.id.asc())
        )
        return list(result.scalars())

    async def list_replies_to(self, user: User) -> list[Thread]:
        """Return replies to any of ``user``'s threads written by someone else.

        Results are ordered newest first with the reply author loaded.
        """
        own_thread_ids = select(Thread.id).where(Thread.author_id == user.id)
        result = await self.session.execute(
            select(Thread)
            .where(
                Thread.parent_id.in_(own_thread_ids),
                Thread.author_id != user.id,
            )
            .options(selectinload(Thread.author))
            .order_by(Thread.created_at.desc(), Thread.id.desc())
        )
        return list(result.scalars())
