"""Service-level operations over communities and their membership."""
from __future__ import annotations

import logging

from threadline.core.errors import wrap_errors
from threadline.db.session import get_database
from threadline.repositories.community_repo import CommunityRepository
from threadline.repositories.paging import SortOrder
from threadline.repositories.user_repo import UserRepository
from threadline.schemas.community import (
    CommunityDetails,
    CommunityListItem,
    CommunityPage,
    CommunityPosts,
    CommunitySummary,
)

__all__ = [
    "add_member_to_community",
    "create_community",
    "delete_community",
    "fetch_communities",
    "fetch_community_details",
    "fetch_community_posts",
    "remove_user_from_community",
    "update_community_info",
]

logger = logging.getLogger(__name__)


@wrap_errors("Failed creating community")
async def create_community(
    *,
    id: str,
    name: str,
    username: str,
    image: str | None,
    bio: str | None,
    created_by_id: str,
) -> CommunitySummary:
    """Create a community owned by the user with external id ``created_by_id``.

    The creator is enrolled as the first member in the same transaction.

    Raises:
        NotFoundError: If the creator does not exist.
    """
    async with get_database().session() as session:
        creator = await UserRepository(session).require(created_by_id)
        community = await CommunityRepository(session).create(
            external_id=id,
            name=name,
            username=username,
            image=image,
            bio=bio,
            creator=creator,
        )
        return CommunitySummary.model_validate(community)


@wrap_errors("Failed add member to community")
async def add_member_to_community(community_id: str, member_id: str) -> CommunitySummary:
    """Add the user ``member_id`` to ``community_id``.

    Raises:
        NotFoundError: If either the community or the user does not exist.
        AlreadyMemberError: If the user already belongs to the community.
    """
    async with get_database().session() as session:
        communities = CommunityRepository(session)
        community = await communities.require(community_id)
        user = await UserRepository(session).require(member_id)
        await communities.add_member(community, user)
        return CommunitySummary.model_validate(community)


@wrap_errors("Failed remove user from community")
async def remove_user_from_community(user_id: str, community_id: str) -> dict[str, bool]:
    """Remove the user from the community; both sides are gone on return.

    Raises:
        NotFoundError: If either the user or the community does not exist.
    """
    async with get_database().session() as session:
        user = await UserRepository(session).require(user_id)
        communities = CommunityRepository(session)
        community = await communities.require(community_id)
        removed = await communities.remove_member(community, user)

    if not removed:
        logger.debug("User %s was not a member of %s", user_id, community_id)
    return {"success": True}


@wrap_errors("Failed to update community info")
async def update_community_info(
    *,
    community_id: str,
    name: str,
    username: str,
    image: str | None,
) -> CommunitySummary:
    """Update the community's name, handle and image.

    Raises:
        NotFoundError: If the community does not exist.
    """
    async with get_database().session() as session:
        community = await CommunityRepository(session).update_info(
            community_id,
            name=name,
            username=username,
            image=image,
        )
        return CommunitySummary.model_validate(community)


@wrap_errors("Failed to delete community")
async def delete_community(community_id: str) -> CommunitySummary | None:
    """Delete a community together with its threads and memberships.

    Returns:
        The deleted community, or ``None`` if nothing matched.
    """
    async with get_database().session() as session:
        communities = CommunityRepository(session)
        community = await communities.get_by_external_id(community_id)
        if community is None:
            return None
        deleted = CommunitySummary.model_validate(community)
        await communities.delete(community)
        return deleted


@wrap_errors("Failed to fetch community details")
async def fetch_community_details(id: str) -> CommunityDetails | None:
    """Return the community with its creator and members, or ``None``."""
    async with get_database().session() as session:
        community = await CommunityRepository(session).get_details(id)
        if community is None:
            return None
        return CommunityDetails.model_validate(community)


@wrap_errors("Failed to fetch community posts")
async def fetch_community_posts(id: str) -> CommunityPosts | None:
    """Return the community with its threads and reply previews, or ``None``."""
    async with get_database().session() as session:
        community = await CommunityRepository(session).get_with_posts(id)
        if community is None:
            return None
        return CommunityPosts.model_validate(community)


@wrap_errors("Failed to fetch communities")
async def fetch_communities(
    *,
    search_string: str = "",
    page_number: int = 1,
    page_size: int = 20,
    sort_by: SortOrder = "desc",
) -> CommunityPage:
    """Return a page of communities, optionally filtered by search."""
    async with get_database().session() as session:
        communities, is_next = await CommunityRepository(session).list_page(
            search_string=search_string,
            page_number=page_number,
            page_size=page_size,
            sort_by=sort_by,
        )
        return CommunityPage(
            communities=[CommunityListItem.model_validate(item) for item in communities],
            is_next=is_next,
        )
