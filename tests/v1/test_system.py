# tests/v1/test_system.py
"""Tests for operational endpoints."""

import httpx
import pytest
from fastapi import status

from threadline.db.session import Database, set_database


@pytest.mark.asyncio
async def test_health_reports_connected_database(client) -> None:
    response = await client.get("/api/v1/system/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"


@pytest.mark.asyncio
async def test_health_without_database_is_503(app) -> None:
    previous = set_database(Database(""))
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/v1/system/health")
    finally:
        set_database(previous)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert "not configured" in response.json()["detail"]


@pytest.mark.asyncio
async def test_root(client) -> None:
    response = await client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["docs"] == "/docs"
