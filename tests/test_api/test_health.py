"""
Tests for health, readiness and metrics endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint returns healthy status."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["timestamp"].endswith("Z")


@pytest.mark.asyncio
async def test_health_check_ignores_backend_state(failing_client: AsyncClient):
    """Liveness does not consult the storage backend."""
    response = await failing_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_readiness_when_backend_reachable(client: AsyncClient):
    response = await client.get("/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_readiness_when_backend_down(failing_client: AsyncClient):
    """A failing readiness probe yields 503 with the thrown message."""
    response = await failing_client.get("/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not ready"
    assert data["error"] == "connection refused"


@pytest.mark.asyncio
async def test_readiness_with_unexpected_error(client: AsyncClient, memory_storage, monkeypatch):
    """Any exception from the probe means not ready."""

    async def broken_probe():
        raise RuntimeError("socket closed")

    monkeypatch.setattr(memory_storage, "check_ready", broken_probe)

    response = await client.get("/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "not ready", "error": "socket closed"}


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient):
    """Test Prometheus exposition is served as text."""
    await client.get("/health")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    body = response.text
    assert "http_request_duration_seconds" in body
    assert "http_requests_total" in body
    assert "file_uploads_total" in body
    assert "file_upload_size_bytes" in body


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test root endpoint returns service info."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "version" in data
    assert "backend" in data
