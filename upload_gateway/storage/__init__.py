"""
Storage abstraction layer for the upload gateway.
Supports multiple backends: in-memory, local filesystem, S3/MinIO, GCS, Azure Blob.
"""

from upload_gateway.storage.base import (
    DEFAULT_CONTENT_TYPE,
    ObjectSummary,
    StorageBackend,
    StoredObject,
    generate_object_key,
)
from upload_gateway.storage.memory import MemoryStorageBackend
from upload_gateway.storage.local import LocalStorageBackend
from upload_gateway.storage.s3 import S3StorageBackend
from upload_gateway.storage.gcs import GCSStorageBackend
from upload_gateway.storage.azure import AzureStorageBackend
from upload_gateway.storage.factory import (
    create_storage_backend,
    get_storage_backend,
    get_storage,
)

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "ObjectSummary",
    "StorageBackend",
    "StoredObject",
    "generate_object_key",
    "MemoryStorageBackend",
    "LocalStorageBackend",
    "S3StorageBackend",
    "GCSStorageBackend",
    "AzureStorageBackend",
    "create_storage_backend",
    "get_storage_backend",
    "get_storage",
]
