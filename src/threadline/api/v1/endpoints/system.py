"""Operational endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.settings import settings
from threadline.db.session import get_session

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health")
async def health(session: AsyncSession = Depends(get_session)) -> dict[str, Any]:
    """Report service health; a store that cannot be reached yields a 503."""
    await session.execute(text("SELECT 1"))
    return {
        "status": "ok",
        "database": "connected",
        "app": settings.app_name,
        "version": settings.app_version,
    }
