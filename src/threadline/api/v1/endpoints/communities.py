"""Community-related endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Response, status

from threadline.core.settings import settings
from threadline.schemas.community import (
    CommunityCreate,
    CommunityDetails,
    CommunityPage,
    CommunityPosts,
    CommunitySummary,
    CommunityUpdate,
    MembershipRequest,
)
from threadline.services import communities as community_service

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=CommunityPage)
async def list_communities(
    search: str = Query("", description="Case-insensitive match on username or name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort: Literal["asc", "desc"] = "desc",
) -> CommunityPage:
    """List communities, optionally filtered by search."""
    return await community_service.fetch_communities(
        search_string=search,
        page_number=page,
        page_size=page_size,
        sort_by=sort,
    )


@router.post("/", response_model=CommunitySummary, status_code=status.HTTP_201_CREATED)
async def create_community(payload: CommunityCreate) -> CommunitySummary:
    """Create a new community."""
    return await community_service.create_community(
        id=payload.id,
        name=payload.name,
        username=payload.username,
        image=payload.image,
        bio=payload.bio,
        created_by_id=payload.created_by_id,
    )


@router.get("/{community_id}", response_model=CommunityDetails)
async def get_community(community_id: str) -> CommunityDetails:
    """Get a specific community with its creator and members."""
    community = await community_service.fetch_community_details(community_id)
    if community is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found",
        )
    return community


@router.patch("/{community_id}", response_model=CommunitySummary)
async def update_community(community_id: str, payload: CommunityUpdate) -> CommunitySummary:
    """Update a community's name, handle and image."""
    return await community_service.update_community_info(
        community_id=community_id,
        name=payload.name,
        username=payload.username,
        image=payload.image,
    )


@router.delete(
    "/{community_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_community(community_id: str) -> Response:
    """Delete a community with its threads and memberships."""
    deleted = await community_service.delete_community(community_id)
    if deleted is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{community_id}/threads", response_model=CommunityPosts)
async def get_community_threads(community_id: str) -> CommunityPosts:
    """Get the threads posted in a community."""
    community = await community_service.fetch_community_posts(community_id)
    if community is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found",
        )
    return community


@router.post(
    "/{community_id}/members",
    response_model=CommunitySummary,
    status_code=status.HTTP_201_CREATED,
)
async def join_community(community_id: str, payload: MembershipRequest) -> CommunitySummary:
    """Add a member to a community."""
    return await community_service.add_member_to_community(community_id, payload.user_id)


@router.delete(
    "/{community_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def leave_community(community_id: str, user_id: str) -> Response:
    """Remove a member from a community."""
    await community_service.remove_user_from_community(user_id, community_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
