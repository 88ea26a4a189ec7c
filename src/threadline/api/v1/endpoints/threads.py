"""Thread and reply endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from threadline.core.settings import settings
from threadline.schemas.thread import (
    CommentCreate,
    ThreadCreate,
    ThreadCreated,
    ThreadDetail,
    ThreadPage,
)
from threadline.services import threads as thread_service

router = APIRouter(prefix="/threads", tags=["threads"])


@router.get("/", response_model=ThreadPage)
async def list_threads(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> ThreadPage:
    """Return the newest top-level threads."""
    return await thread_service.fetch_posts(page, page_size)


@router.post("/", response_model=ThreadCreated, status_code=status.HTTP_201_CREATED)
async def create_thread(payload: ThreadCreate) -> ThreadCreated:
    """Create a new top-level thread."""
    thread_id = await thread_service.create_thread(
        text=payload.text,
        author=payload.author,
        community_id=payload.community_id,
        path=payload.path,
    )
    return ThreadCreated(id=thread_id)


@router.get("/{thread_id}", response_model=ThreadDetail)
async def get_thread(thread_id: int) -> ThreadDetail:
    """Get a thread with its nested replies."""
    thread = await thread_service.fetch_thread_by_id(thread_id)
    if thread is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Thread not found",
        )
    return thread


@router.post(
    "/{thread_id}/comments",
    response_model=ThreadCreated,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(thread_id: int, payload: CommentCreate) -> ThreadCreated:
    """Reply to a thread."""
    reply_id = await thread_service.add_comment_to_thread(
        thread_id=thread_id,
        comment_text=payload.comment_text,
        user_id=payload.user_id,
        path=payload.path,
    )
    return ThreadCreated(id=reply_id)
