"""Translate repository errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from threadline.core.errors import (
    ConflictError,
    NotFoundError,
    RepositoryError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[RepositoryError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_CONTENT),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: RepositoryError) -> int:
    """Return the HTTP status code matching ``exc``."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def repository_error_handler(_request: Request, exc: RepositoryError) -> JSONResponse:
    """Render a RepositoryError as a JSON error body."""
    status_code = status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s", exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Install the repository error handler on ``app``."""
    app.add_exception_handler(RepositoryError, repository_error_handler)
