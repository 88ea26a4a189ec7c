# src/threadline/models/user.py
"""SQLAlchemy model for user profiles."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .community import Community
    from .thread import Thread


class User(Base):
    """User profile addressed by an external identifier.

    The integer primary key is internal; callers always address users by
    ``external_id``.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    # Stored lower-cased.
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    onboarded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    threads: Mapped[list[Thread]] = relationship(
        "Thread",
        back_populates="author",
        order_by="Thread.created_at",
    )
    communities: Mapped[list[Community]] = relationship(
        "Community",
        secondary="community_members",
        back_populates="members",
        order_by="Community.created_at",
    )
