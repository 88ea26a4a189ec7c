# src/threadline/models/community.py
"""SQLAlchemy models for communities and their membership."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .thread import Thread
    from .user import User


class Community(Base):
    """Community metadata used for grouping threads and members."""

    __tablename__ = "communities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Handle-like identifier, searchable alongside the name.
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    created_by: Mapped[User] = relationship("User", foreign_keys=[created_by_id])
    members: Mapped[list[User]] = relationship(
        "User",
        secondary="community_members",
        back_populates="communities",
        order_by="User.created_at",
    )
    threads: Mapped[list[Thread]] = relationship(
        "Thread",
        back_populates="community",
        order_by="Thread.created_at",
    )


class CommunityMember(Base):
    """Join table mapping users into communities.

    One row represents both sides of a membership, so a user's communities
    and a community's members cannot drift apart.
    """

    __tablename__ = "community_members"

    community_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("communities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
