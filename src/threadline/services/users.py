"""Service-level operations over user profiles."""
from __future__ import annotations

from threadline.core.errors import wrap_errors
from threadline.core.settings import settings
from threadline.db.session import get_database
from threadline.repositories.paging import SortOrder
from threadline.repositories.user_repo import UserRepository
from threadline.schemas.common import UserCard
from threadline.schemas.thread import ActivityItem, ThreadCard
from threadline.schemas.user import UserPage, UserPosts, UserProfile
from threadline.services.revalidation import revalidate_path

__all__ = [
    "fetch_user",
    "fetch_user_posts",
    "fetch_users",
    "get_activity",
    "update_user",
]


@wrap_errors("Failed to create/update user")
async def update_user(
    *,
    user_id: str,
    username: str,
    name: str,
    bio: str | None,
    image: str | None,
    path: str,
) -> None:
    """Create or update the profile addressed by ``user_id``.

    Args:
        user_id: External id of the user.
        username: Handle; stored lower-cased.
        name: Display name.
        bio: Free-text biography.
        image: Avatar reference.
        path: Page the update came from. Only the profile edit page is
            revalidated afterwards.

    Notes:
        Onboarding always completes here; the user is marked onboarded even
        when the record already existed.
    """
    async with get_database().session() as session:
        await UserRepository(session).upsert_profile(
            external_id=user_id,
            username=username,
            name=name,
            bio=bio,
            image=image,
        )

    if path == settings.profile_edit_path:
        revalidate_path(path)


@wrap_errors("Failed to fetch user")
async def fetch_user(user_id: str) -> UserProfile:
    """Return the profile for ``user_id``.

    Raises:
        NotFoundError: If no user has that external id.
    """
    async with get_database().session() as session:
        user = await UserRepository(session).get_profile(user_id)
        return UserProfile.model_validate(user)


@wrap_errors("Failed to fetch users")
async def fetch_users(
    *,
    user_id: str,
    search_string: str = "",
    page_number: int = 1,
    page_size: int = 20,
    sort_by: SortOrder = "desc",
) -> UserPage:
    """Return a page of users other than the caller, optionally filtered by search."""
    async with get_database().session() as session:
        users, is_next = await UserRepository(session).list_page(
            exclude_external_id=user_id,
            search_string=search_string,
            page_number=page_number,
            page_size=page_size,
            sort_by=sort_by,
        )
        return UserPage(users=[UserCard.model_validate(user) for user in users], is_next=is_next)


@wrap_errors("Failed to fetch user posts")
async def fetch_user_posts(user_id: str) -> UserPosts:
    """Return the user with their top-level threads and reply previews."""
    async with get_database().session() as session:
        repo = UserRepository(session)
        user = await repo.require(user_id)
        threads = await repo.list_top_level_threads(user)
        return UserPosts(
            id=user.external_id,
            name=user.name,
            username=user.username,
            image=user.image,
            threads=[ThreadCard.model_validate(thread) for thread in threads],
        )


@wrap_errors("Failed to fetch activity")
async def get_activity(user_id: str) -> list[ActivityItem]:
    """Return replies other people left on the user's threads, newest first."""
    async with get_database().session() as session:
        repo = UserRepository(session)
        user = await repo.require(user_id)
        replies = await repo.list_replies_to(user)
        return [ActivityItem.model_validate(reply) for reply in replies]
