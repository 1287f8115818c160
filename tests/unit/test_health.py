"""
Unit tests for health and info endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(async_client: AsyncClient) -> None:
    """Test basic health check endpoint."""
    response = await async_client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "playwright-converter-evaluation"
    assert data["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_liveness_check(async_client: AsyncClient) -> None:
    """Test liveness check endpoint."""
    response = await async_client.get("/api/health/live")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "alive"


@pytest.mark.asyncio
async def test_root_endpoint(async_client: AsyncClient) -> None:
    """Test root endpoint."""
    response = await async_client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert "name" in data
    assert "version" in data


@pytest.mark.asyncio
async def test_api_info_lists_evaluate(async_client: AsyncClient) -> None:
    response = await async_client.get("/api")
    assert response.status_code == 200
    assert response.json()["endpoints"]["evaluate"] == "/api/evaluate"
