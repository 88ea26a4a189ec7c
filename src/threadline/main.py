# src/threadline/main.py
"""Main entry point for the Threadline API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from threadline.api.errors import register_error_handlers
from threadline.api.v1 import (
    communities_router,
    system_router,
    threads_router,
    users_router,
)
from threadline.core.errors import StoreUnavailableError
from threadline.core.settings import settings
from threadline.db.session import get_database
from threadline.services.revalidation import get_revalidator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Connect the process database on startup and dispose it on shutdown."""
    database = get_database()
    try:
        await database.ensure_connected()
    except StoreUnavailableError as exc:
        # Requests report the outage individually; the app still starts.
        logger.warning("Starting without a database connection: %s", exc)
    try:
        yield
    finally:
        await get_revalidator().drain()
        await database.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Threadline API",
        description="Users, communities and threaded discussions",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(GZipMiddleware)

    register_error_handlers(app)

    app.include_router(users_router, prefix="/api/v1")
    app.include_router(communities_router, prefix="/api/v1")
    app.include_router(threads_router, prefix="/api/v1")
    app.include_router(system_router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run("threadline.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
