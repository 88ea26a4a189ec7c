# src/threadline/models/thread.py
"""SQLAlchemy model for threads and their replies."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from threadline.db.session import Base
from threadline.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .community import Community
    from .user import User


class Thread(Base):
    """A post or a reply.

    Top-level threads have ``parent_id = NULL`` and appear in the main feed;
    replies carry their parent's id and are only shown nested under it.
    """

    __tablename__ = "threads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    # Parent chain for replies; removing a thread removes its whole subtree.
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("threads.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    community_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("communities.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    author: Mapped[User] = relationship("User", back_populates="threads")
    community: Mapped[Community | None] = relationship("Community", back_populates="threads")
    parent: Mapped[Thread | None] = relationship(
        "Thread",
        remote_side=[id],
        back_populates="children",
    )
    children: Mapped[list[Thread]] = relationship(
        "Thread",
        back_populates="parent",
        order_by="Thread.created_at",
    )

    @property
    def is_top_level(self) -> bool:
        """Return True if this thread is not a reply."""
        return self.parent_id is None
