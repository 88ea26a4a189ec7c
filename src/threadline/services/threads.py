"""Service-level operations for creating and reading threads."""
from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from threadline.core.errors import NotFoundError, ValidationError, wrap_errors
from threadline.db.session import get_database
from threadline.repositories.community_repo import CommunityRepository
from threadline.repositories.thread_repo import ThreadRepository
from threadline.repositories.user_repo import UserRepository
from threadline.schemas.thread import (
    CommentCreate,
    ThreadCard,
    ThreadCreate,
    ThreadDetail,
    ThreadPage,
)
from threadline.services.revalidation import revalidate_path

__all__ = [
    "add_comment_to_thread",
    "create_thread",
    "fetch_posts",
    "fetch_thread_by_id",
]


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


@wrap_errors("Failed to create new thread")
async def create_thread(
    *,
    text: str,
    author: str,
    community_id: str | None,
    path: str,
) -> int:
    """Create a top-level thread and return its id.

    Args:
        text: Thread body, 3-600 characters once surrounding whitespace is
            stripped.
        author: External id of the author.
        community_id: External id of the owning community, or ``None`` for a
            personal thread.
        path: Page path to revalidate once the thread is stored.

    Raises:
        ValidationError: If the text is too short or too long.
        NotFoundError: If the author or the given community does not exist.
    """
    try:
        payload = ThreadCreate(text=text, author=author, community_id=community_id, path=path)
    except PydanticValidationError as exc:
        raise ValidationError(_first_error(exc)) from exc

    async with get_database().session() as session:
        user = await UserRepository(session).require(payload.author)
        community = None
        if payload.community_id:
            community = await CommunityRepository(session).require(payload.community_id)
        thread = await ThreadRepository(session).create(
            text=payload.text,
            author=user,
            community=community,
        )
        thread_id = thread.id

    revalidate_path(payload.path)
    return thread_id


@wrap_errors("Failed to fetch posts")
async def fetch_posts(page_number: int = 1, page_size: int = 20) -> ThreadPage:
    """Return a newest-first page of top-level threads."""
    async with get_database().session() as session:
        posts, is_next = await ThreadRepository(session).list_top_level_page(
            page_number=page_number,
            page_size=page_size,
        )
        return ThreadPage(posts=[ThreadCard.model_validate(post) for post in posts], is_next=is_next)


@wrap_errors("Error fetching thread")
async def fetch_thread_by_id(thread_id: int) -> ThreadDetail | None:
    """Return a thread with two levels of replies, or ``None`` if it does not exist."""
    async with get_database().session() as session:
        thread = await ThreadRepository(session).get_detail(thread_id)
        if thread is None:
            return None
        return ThreadDetail.model_validate(thread)


@wrap_errors("Error adding comment to thread")
async def add_comment_to_thread(
    *,
    thread_id: int,
    comment_text: str,
    user_id: str,
    path: str,
) -> int:
    """Reply to ``thread_id`` as ``user_id`` and return the reply's id.

    Raises:
        ValidationError: If the comment text is too short or too long.
        NotFoundError: If the parent thread or the author does not exist.
    """
    try:
        payload = CommentCreate(comment_text=comment_text, user_id=user_id, path=path)
    except PydanticValidationError as exc:
        raise ValidationError(_first_error(exc)) from exc

    async with get_database().session() as session:
        threads = ThreadRepository(session)
        parent = await threads.get_with_children(thread_id)
        if parent is None:
            raise NotFoundError("Thread not found")
        author = await UserRepository(session).require(payload.user_id)
        reply = await threads.add_reply(
            parent=parent,
            text=payload.comment_text,
            author=author,
        )
        reply_id = reply.id

    revalidate_path(payload.path)
    return reply_id
