# src/threadline/services/__init__.py
"""Operations invoked by request handlers: one unit of work per call."""

from . import communities, threads, users
from .revalidation import Revalidator, get_revalidator, revalidate_path

__all__ = [
    "communities",
    "threads",
    "users",
    "Revalidator",
    "get_revalidator",
    "revalidate_path",
]
