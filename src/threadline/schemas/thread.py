"""Thread-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import CommunityRef, UserSummary

THREAD_TEXT_MIN_LENGTH = 3
THREAD_TEXT_MAX_LENGTH = 600


class ThreadCreate(BaseModel):
    """Schema for creating a new top-level thread."""

    text: str = Field(..., min_length=THREAD_TEXT_MIN_LENGTH, max_length=THREAD_TEXT_MAX_LENGTH)
    author: str = Field(..., description="External id of the author")
    community_id: str | None = Field(None, description="External id of the owning community")
    path: str = Field("/", description="Page path to revalidate after the write")

    model_config = ConfigDict(str_strip_whitespace=True)


class CommentCreate(BaseModel):
    """Schema for replying to an existing thread."""

    comment_text: str = Field(
        ...,
        min_length=THREAD_TEXT_MIN_LENGTH,
        max_length=THREAD_TEXT_MAX_LENGTH,
    )
    user_id: str = Field(..., description="External id of the reply author")
    path: str = Field("/", description="Page path to revalidate after the write")

    model_config = ConfigDict(str_strip_whitespace=True)


class ThreadCreated(BaseModel):
    """Identifier of a freshly inserted thread or reply."""

    id: int


class ReplyPreview(BaseModel):
    """Reply reduced to what a feed card needs: its id and author."""

    id: int
    author: UserSummary

    model_config = ConfigDict(from_attributes=True)


class ThreadCard(BaseModel):
    """Thread with its author, community and a preview of its replies."""

    id: int
    text: str
    parent_id: int | None
    created_at: datetime
    author: UserSummary
    community: CommunityRef | None = None
    children: list[ReplyPreview] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ReplyCard(BaseModel):
    """Reply with its text and author, without further nesting."""

    id: int
    text: str
    parent_id: int | None
    created_at: datetime
    author: UserSummary

    model_config = ConfigDict(from_attributes=True)


class ThreadReply(ThreadCard):
    """First-level reply in a thread detail, with its own replies in full."""

    children: list[ReplyCard] = Field(default_factory=list)


class ThreadDetail(ThreadCard):
    """Thread with two levels of replies expanded."""

    children: list[ThreadReply] = Field(default_factory=list)


class ActivityItem(ReplyCard):
    """Someone else's reply to one of the user's threads."""


class ThreadPage(BaseModel):
    """One page of the top-level feed."""

    posts: list[ThreadCard]
    is_next: bool
