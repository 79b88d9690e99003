"""
Storage backend factory.
Provides configuration-driven backend selection.
"""

import logging
from functools import lru_cache

from upload_gateway.config import get_settings
from upload_gateway.storage.azure import AzureStorageBackend
from upload_gateway.storage.base import StorageBackend
from upload_gateway.storage.gcs import GCSStorageBackend
from upload_gateway.storage.local import LocalStorageBackend
from upload_gateway.storage.memory import MemoryStorageBackend
from upload_gateway.storage.s3 import S3StorageBackend

logger = logging.getLogger(__name__)

BACKENDS: dict[str, type[StorageBackend]] = {
    "memory": MemoryStorageBackend,
    "local": LocalStorageBackend,
    "s3": S3StorageBackend,
    "gcs": GCSStorageBackend,
    "azure": AzureStorageBackend,
}


def create_storage_backend(backend: str) -> StorageBackend:
    """
    Build a storage backend by name.

    Raises:
        ValueError: If unknown storage backend is requested
    """
    try:
        backend_cls = BACKENDS[backend.lower()]
    except KeyError:
        raise ValueError(f"Unknown storage backend: {backend}")

    storage = backend_cls()
    logger.info(f"Storage backend '{storage.name}' using container '{storage.container_name}'")
    return storage


@lru_cache
def get_storage_backend() -> StorageBackend:
    """
    Get the configured storage backend.

    Uses LRU cache to ensure only one instance is created.
    Backend selection is based on STORAGE_BACKEND setting.
    """
    return create_storage_backend(get_settings().STORAGE_BACKEND)


def get_storage() -> StorageBackend:
    """
    Dependency function for FastAPI.

    Usage:
        @router.get("/files")
        async def list_files(storage: StorageBackend = Depends(get_storage)):
            ...
    """
    return get_storage_backend()
