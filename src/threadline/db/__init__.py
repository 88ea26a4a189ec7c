"""Database configuration and utilities."""

from .session import (
    Base,
    Database,
    ensure_connected,
    get_database,
    get_session,
    set_database,
)

__all__ = [
    "Base",
    "Database",
    "ensure_connected",
    "get_database",
    "get_session",
    "set_database",
]
