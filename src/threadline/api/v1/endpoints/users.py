"""User profile endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query, Response, status

from threadline.core.settings import settings
from threadline.schemas.thread import ActivityItem
from threadline.schemas.user import ProfileUpdateRequest, UserPage, UserPosts, UserProfile
from threadline.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=UserPage)
async def list_users(
    user_id: str = Query(..., description="External id of the caller, excluded from results"),
    search: str = Query("", description="Case-insensitive match on username or name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort: Literal["asc", "desc"] = "desc",
) -> UserPage:
    """Search users other than the caller."""
    return await user_service.fetch_users(
        user_id=user_id,
        search_string=search,
        page_number=page,
        page_size=page_size,
        sort_by=sort,
    )


@router.get("/{user_id}", response_model=UserProfile)
async def get_user(user_id: str) -> UserProfile:
    """Get a specific user by external id."""
    return await user_service.fetch_user(user_id)


@router.put(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def update_user(user_id: str, payload: ProfileUpdateRequest) -> Response:
    """Create or update the user's profile and mark them onboarded."""
    await user_service.update_user(
        user_id=user_id,
        username=payload.username,
        name=payload.name,
        bio=payload.bio,
        image=payload.image,
        path=payload.path,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/threads", response_model=UserPosts)
async def get_user_threads(user_id: str) -> UserPosts:
    """Get the user's threads with reply previews."""
    return await user_service.fetch_user_posts(user_id)


@router.get("/{user_id}/activity", response_model=list[ActivityItem])
async def get_user_activity(user_id: str) -> list[ActivityItem]:
    """Get replies other users left on this user's threads."""
    return await user_service.get_activity(user_id)
