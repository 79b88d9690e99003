"""
Pytest configuration and fixtures for upload gateway tests.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import StorageException, StorageUnavailableException
from upload_gateway.main import app
from upload_gateway.services.metrics import registry
from upload_gateway.storage import MemoryStorageBackend, get_storage


class FailingStorageBackend(MemoryStorageBackend):
    """Memory backend whose every operation fails like an unreachable service."""

    name = "failing"

    def __init__(self, message: str = "connection refused"):
        super().__init__(container_name="broken-bucket")
        self.message = message

    async def check_ready(self) -> None:
        raise StorageUnavailableException(message=self.message)

    async def put(self, key, body, content_type, metadata) -> None:
        raise StorageException(message=self.message)

    async def list(self, max_results):
        raise StorageException(message=self.message)

    async def exists(self, key) -> bool:
        raise StorageException(message=self.message)

    async def delete(self, key) -> None:
        raise StorageException(message=self.message)


class UnsignableStorageBackend(MemoryStorageBackend):
    """Memory backend that stores objects but cannot sign URLs."""

    async def signed_url(self, key, ttl_seconds) -> str:
        raise StorageException(message="signing key unavailable")


@pytest.fixture
def memory_storage() -> MemoryStorageBackend:
    """Create an empty in-memory storage backend."""
    return MemoryStorageBackend(container_name="test-bucket")


@pytest.fixture
def failing_storage() -> FailingStorageBackend:
    return FailingStorageBackend()


@pytest.fixture
def unsignable_storage() -> UnsignableStorageBackend:
    return UnsignableStorageBackend(container_name="test-bucket")


async def _client_for(storage) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(memory_storage) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client backed by in-memory storage."""
    async for client in _client_for(memory_storage):
        yield client


@pytest_asyncio.fixture(scope="function")
async def failing_client(failing_storage) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client whose storage backend is down."""
    async for client in _client_for(failing_storage):
        yield client


@pytest_asyncio.fixture(scope="function")
async def unsignable_client(unsignable_storage) -> AsyncGenerator[AsyncClient, None]:
    async for client in _client_for(unsignable_storage):
        yield client


@pytest.fixture
def small_upload_limit(monkeypatch):
    """Lower MAX_UPLOAD_SIZE to 8 bytes for the middleware and the upload endpoint."""
    monkeypatch.setattr(get_settings(), "MAX_UPLOAD_SIZE", 8)
    return 8


@pytest.fixture
def metric_value():
    """Read a sample from the gateway's Prometheus registry (0 when absent)."""

    def _read(name: str, labels: dict[str, str] | None = None) -> float:
        return registry.get_sample_value(name, labels or {}) or 0.0

    return _read


@pytest.fixture
def hello_file() -> dict:
    """Multipart payload for b'hello' sent as hello.txt."""
    return {"file": ("hello.txt", b"hello", "text/plain")}
