"""Error taxonomy shared by the repository and service layers.

Every service operation reports failures as a :class:`RepositoryError` whose
message starts with a fixed, human-readable prefix naming the operation,
followed by the underlying message. The concrete subclass is preserved when
wrapping so callers can still tell a missing record from a conflict or an
unavailable store.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class RepositoryError(RuntimeError):
    """Base exception raised for data-access failures."""


class NotFoundError(RepositoryError):
    """Raised when a referenced user, community or thread does not exist."""


class ConflictError(RepositoryError):
    """Raised when an operation conflicts with the current stored state."""


class AlreadyMemberError(ConflictError):
    """Raised when adding a user who already belongs to the community."""


class ValidationError(RepositoryError):
    """Raised when caller-supplied fields fail validation."""


class StoreError(RepositoryError):
    """Raised when the underlying store rejects or fails a query."""


class StoreUnavailableError(StoreError):
    """Raised when the store is not configured or cannot be reached."""


def wrap_errors(prefix: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Wrap any failure of an async operation with a fixed message prefix.

    Args:
        prefix: Human-readable description of the operation, for example
            ``"Failed to fetch user"``.

    Returns:
        A decorator producing a coroutine function that re-raises failures as
        ``<same RepositoryError subclass>("<prefix>: <original message>")``.
        Driver errors become :class:`StoreError`; anything else becomes a plain
        :class:`RepositoryError`. The original exception is always chained.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except RepositoryError as exc:
                raise type(exc)(f"{prefix}: {exc}") from exc
            except SQLAlchemyError as exc:
                logger.error("%s: store error: %s", prefix, exc)
                raise StoreError(f"{prefix}: {exc}") from exc
            except Exception as exc:
                logger.exception("%s: unexpected error", prefix)
                raise RepositoryError(f"{prefix}: {exc}") from exc

        return wrapper

    return decorator
