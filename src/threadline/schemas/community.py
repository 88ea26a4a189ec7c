"""Community-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import UserCard
from .thread import ThreadCard


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    id: str = Field(..., min_length=1, description="External community id")
    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    image: str | None = None
    bio: str | None = None
    created_by_id: str = Field(..., description="External id of the creating user")


class CommunityUpdate(BaseModel):
    """Schema for updating community metadata."""

    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    image: str | None = None


class MembershipRequest(BaseModel):
    """Schema identifying the user to add to a community."""

    user_id: str = Field(..., description="External id of the member")


class CommunitySummary(BaseModel):
    """Schema for community information returned to callers."""

    id: str = Field(..., validation_alias="external_id", description="External community id")
    name: str
    username: str
    image: str | None
    bio: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CommunityDetails(CommunitySummary):
    """Community with its creator and members expanded."""

    created_by: UserCard
    members: list[UserCard] = Field(default_factory=list)


class CommunityListItem(CommunitySummary):
    """Community search result with members expanded."""

    members: list[UserCard] = Field(default_factory=list)


class CommunityPosts(CommunitySummary):
    """Community with its top-level threads expanded."""

    threads: list[ThreadCard] = Field(default_factory=list)


class CommunityPage(BaseModel):
    """One page of community search results."""

    communities: list[CommunityListItem]
    is_next: bool
