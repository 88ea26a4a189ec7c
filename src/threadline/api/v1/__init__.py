"""Version 1 API endpoints."""

from .endpoints import (
    communities_router,
    system_router,
    threads_router,
    users_router,
)

__all__ = [
    "communities_router",
    "system_router",
    "threads_router",
    "users_router",
]
