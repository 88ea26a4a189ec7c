"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import CommunityRef, UserCard
from .thread import ThreadCard


class ProfileUpdateRequest(BaseModel):
    """Schema for creating or updating a user profile."""

    username: str = Field(..., min_length=1, max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    bio: str | None = Field(None, max_length=1000)
    image: str | None = None
    path: str = Field("/", description="Page path that triggered the update")


class UserProfile(BaseModel):
    """Full profile of a single user."""

    id: str = Field(..., validation_alias="external_id", description="External user id")
    username: str
    name: str
    bio: str | None
    image: str | None
    onboarded: bool
    created_at: datetime
    communities: list[CommunityRef] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class UserPosts(BaseModel):
    """A user together with the threads they authored."""

    id: str = Field(..., validation_alias="external_id", description="External user id")
    name: str
    username: str
    image: str | None
    threads: list[ThreadCard] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class UserPage(BaseModel):
    """One page of user search results."""

    users: list[UserCard]
    is_next: bool
