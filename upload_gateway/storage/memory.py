"""
In-memory storage backend.
Reference implementation of the storage contract, used for tests and demos.
"""

import time
from datetime import datetime, timezone
from urllib.parse import quote

from upload_gateway.config import get_settings
from upload_gateway.storage.base import ObjectSummary, StorageBackend, StoredObject

settings = get_settings()


class MemoryStorageBackend(StorageBackend):
    """
    Process-local storage held in a dict.

    Listing is lexicographic by key. Contents are lost on restart.
    """

    name = "memory"

    def __init__(self, container_name: str | None = None):
        self.container_name = container_name or settings.MEMORY_CONTAINER_NAME
        self._objects: dict[str, StoredObject] = {}

    async def check_ready(self) -> None:
        return None

    async def put(
        self,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        self._objects[key] = StoredObject(
            key=key,
            body=bytes(body),
            content_type=content_type,
            last_modified=datetime.now(timezone.utc),
            metadata=dict(metadata),
        )

    async def list(self, max_results: int) -> list[ObjectSummary]:
        return [
            ObjectSummary(key=obj.key, size=obj.size, last_modified=obj.last_modified)
            for _, obj in sorted(self._objects.items())[:max_results]
        ]

    async def exists(self, key: str) -> bool:
        return key in self._objects

    async def signed_url(self, key: str, ttl_seconds: int) -> str:
        expires = int(time.time()) + ttl_seconds
        return f"{self.object_url(key)}?expires={expires}"

    async def delete(self, key: str) -> None:
        self._objects.pop(key, None)

    def object_url(self, key: str) -> str:
        return f"memory://{self.container_name}/{quote(key)}"
