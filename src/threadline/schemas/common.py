"""Projections shared across user, community and thread results."""

from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    """Minimal author projection attached to threads and replies."""

    id: str = Field(..., validation_alias="external_id", description="External user id")
    name: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class UserCard(UserSummary):
    """Author projection that also carries the handle, used for member lists."""

    username: str


class CommunityRef(BaseModel):
    """Compact reference to a community."""

    id: str = Field(..., validation_alias="external_id", description="External community id")
    name: str
    username: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
