"""
Abstract storage backend interface.
Defines the contract for all storage implementations.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from starlette.concurrency import run_in_threadpool

from upload_gateway.core.exceptions import StorageException


DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ObjectSummary:
    """A single entry of a container listing."""

    key: str
    size: int
    last_modified: datetime


@dataclass(frozen=True)
class StoredObject:
    """An object held by a container. Immutable once written."""

    key: str
    body: bytes
    content_type: str
    last_modified: datetime
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.body)


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage implementations (memory, local, S3, GCS, Azure) must
    implement these methods so the HTTP layer, metrics and readiness
    logic stay provider-agnostic.

    Blocking SDK calls go through ``_run`` which executes them in the
    thread pool and bounds them by ``timeout`` seconds.
    """

    name: str = "abstract"
    container_name: str = ""
    timeout: float | None = None

    async def _run(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a blocking call off the event loop, bounded by ``timeout``."""
        call = run_in_threadpool(func, *args, **kwargs)
        if not self.timeout:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError:
            raise StorageException(
                message=f"Storage call timed out after {self.timeout:g}s",
                details={"backend": self.name, "container": self.container_name},
            )

    @abstractmethod
    async def check_ready(self) -> None:
        """
        Probe that the container is reachable.

        Raises:
            StorageUnavailableException: If the container cannot be reached
        """
        pass

    @abstractmethod
    async def put(
        self,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """
        Write an object, silently replacing any existing object under ``key``.

        Args:
            key: Object key inside the container
            body: Complete object content
            content_type: MIME type stored with the object
            metadata: User metadata (e.g. originalName, uploadedAt)

        Raises:
            StorageException: If the write fails
        """
        pass

    @abstractmethod
    async def list(self, max_results: int) -> list[ObjectSummary]:
        """
        List up to ``max_results`` objects (single page, backend order).

        An empty container yields an empty list.

        Raises:
            StorageException: If the listing fails
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if an object exists.

        Raises:
            StorageException: If the check itself fails
        """
        pass

    @abstractmethod
    async def signed_url(self, key: str, ttl_seconds: int) -> str:
        """
        Produce a time-limited read URL for ``key``.

        Existence is checked by the caller; this only generates the URL.

        Raises:
            StorageException: If URL generation fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete an object. Deleting a missing key is not an error.

        Raises:
            StorageException: If deletion fails for other reasons
        """
        pass

    @abstractmethod
    def object_url(self, key: str) -> str:
        """Canonical (non-signed) locator of an object."""
        pass


def generate_object_key(original_name: str, now: float | None = None) -> str:
    """
    Build the stored key for an upload: ``{unix_millis}-{file_name}``.

    Directory components of the client-supplied name are dropped so the
    key is always a single path segment. Two uploads of the same name in
    the same millisecond map to the same key and the later one wins.
    """
    millis = int((time.time() if now is None else now) * 1000)
    file_name = original_name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    return f"{millis}-{file_name or 'upload'}"
