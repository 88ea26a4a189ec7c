"""Data access helpers for users, communities and threads."""

from .community_repo import CommunityRepository
from .thread_repo import ThreadRepository
from .user_repo import UserRepository

__all__ = ["CommunityRepository", "ThreadRepository", "UserRepository"]
