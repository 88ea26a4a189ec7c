"""Data access helpers for working with communities."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.base import ExecutableOption

from threadline.core.errors import AlreadyMemberError, NotFoundError
from threadline.models import Community, CommunityMember, Thread, User

from .paging import SortOrder, paginate, search_filter

__all__ = ["CommunityRepository"]

logger = logging.getLogger(__name__)


class CommunityRepository:
    """Thin wrapper around database access for community entities."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with an async SQLAlchemy session."""
        self.session = session

    async def get_by_external_id(
        self,
        external_id: str,
        *,
        options: Sequence[ExecutableOption] = (),
    ) -> Community | None:
        """Return a community by external identifier."""
        result = await self.session.execute(
            select(Community).where(Community.external_id == external_id).options(*options)
        )
        return result.scalars().first()

    async def require(
        self,
        external_id: str,
        *,
        options: Sequence[ExecutableOption] = (),
    ) -> Community:
        """Return a community by external identifier or raise ``NotFoundError``."""
        community = await self.get_by_external_id(external_id, options=options)
        if community is None:
            raise NotFoundError("Community not found")
        return community

    async def create(
        self,
        *,
        external_id: str,
        name: str,
        username: str,
        image: str | None,
        bio: str | None,
        creator: User,
    ) -> Community:
        """Insert a community and enrol its creator as the first member."""
        community = Community(
            external_id=external_id,
            name=name,
            username=username,
            image=image,
            bio=bio,
            created_by=creator,
            members=[creator],
        )
        self.session.add(community)
        await self.session.flush()
        return community

    async def add_member(self, community: Community, user: User) -> None:
        """Add ``user`` to ``community``.

        Raises:
            AlreadyMemberError: If the user already belongs to the community.
        """
        if await self.is_member(community, user):
            raise AlreadyMemberError("User is already a member of the community")
        self.session.add(CommunityMember(community_id=community.id, user_id=user.id))
        await self.session.flush()

    async def is_member(self, community: Community, user: User) -> bool:
        """Return True if ``user`` belongs to ``community``."""
        membership = await self.session.get(CommunityMember, (community.id, user.id))
        return membership is not None

    async def remove_member(self, community: Community, user: User) -> int:
        """Remove ``user`` from ``community`` and return the number of rows removed."""
        result = await self.session.execute(
            delete(CommunityMember).where(
                CommunityMember.community_id == community.id,
                CommunityMember.user_id == user.id,
            )
        )
        return result.rowcount or 0

    async def update_info(
        self,
        external_id: str,
        *,
        name: str,
        username: str,
        image: str | None,
    ) -> Community:
        """Overwrite the name, handle and image of an existing community."""
        community = await self.require(external_id)
        community.name = name
        community.username = username
        community.image = image
        await self.session.flush()
        return community

    async def delete(self, community: Community) -> None:
        """Delete ``community``, its threads and every membership referencing it.

        Replies to the deleted threads are removed by the ``parent_id``
        cascade.
        """
        members = await self.session.execute(
            delete(CommunityMember).where(CommunityMember.community_id == community.id)
        )
        threads = await self.session.execute(
            delete(Thread).where(Thread.community_id == community.id)
        )
        await self.session.execute(delete(Community).where(Community.id == community.id))
        logger.info(
            "Deleted community %s (%d threads, %d memberships)",
            community.external_id,
            threads.rowcount or 0,
            members.rowcount or 0,
        )

    async def get_details(self, external_id: str) -> Community | None:
        """Return a community with its creator and members loaded."""
        return await self.get_by_external_id(
            external_id,
            options=[selectinload(Community.created_by), selectinload(Community.members)],
        )

    async def get_with_posts(self, external_id: str) -> Community | None:
        """Return a community with its top-level threads and their replies loaded."""
        return await self.get_by_external_id(
            external_id,
            options=[
                selectinload(Community.threads).selectinload(Thread.author),
                selectinload(Community.threads).selectinload(Thread.community),
                selectinload(Community.threads)
                .selectinload(Thread.children)
                .selectinload(Thread.author),
            ],
        )

    async def list_page(
        self,
        *,
        search_string: str = "",
        page_number: int = 1,
        page_size: int = 20,
        sort_by: SortOrder = "desc",
    ) -> tuple[list[Community], bool]:
        """Return a page of communities with members loaded.

        A non-blank ``search_string`` matches case-insensitively against the
        handle or the name.
        """
        stmt = select(Community)
        criteria = search_filter([Community.username, Community.name], search_string)
        if criteria is not None:
            stmt = stmt.where(criteria)

        return await paginate(
            self.session,
            stmt,
            sort_column=Community.created_at,
            page_number=page_number,
            page_size=page_size,
            sort_by=sort_by,
            options=[selectinload(Community.members)],
        )
