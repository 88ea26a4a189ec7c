# src/threadline/models/__init__.py
"""SQLAlchemy models for the Threadline application."""

from .community import Community, CommunityMember
from .thread import Thread
from .user import User

__all__ = [
    "Community", "CommunityMember",
    "Thread",
    "User",
]
