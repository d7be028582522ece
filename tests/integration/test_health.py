"""Integration tests: Health and root endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["environment"] == "test"
    assert "X-Request-ID" in resp.headers


@pytest.mark.asyncio
async def test_root(async_client: AsyncClient):
    resp = await async_client.get("/")
    assert resp.status_code == 200
    assert resp.json()["docs"] == "/docs"
