"""
Local filesystem storage backend.
Stores files on the local filesystem for development and simple deployments.
"""

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

import aiofiles
import aiofiles.os

from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import StorageException, StorageUnavailableException
from upload_gateway.storage.base import ObjectSummary, StorageBackend

settings = get_settings()

METADATA_DIR = ".metadata"


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage implementation.

    Objects are stored as flat files under the configured LOCAL_STORAGE_PATH
    directory; content type and user metadata live in a JSON sidecar under
    ``.metadata/``. Suitable for development only.
    """

    name = "local"

    def __init__(self, base_path: str | None = None):
        """
        Initialize local storage backend.

        Args:
            base_path: Base directory for storage. Defaults to settings.LOCAL_STORAGE_PATH
        """
        self.base_path = Path(base_path or settings.LOCAL_STORAGE_PATH)
        self.container_name = str(self.base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path | None:
        """Get filesystem path for a key, or None if the key is not a plain file name."""
        if not key or key.startswith(".") or "/" in key or "\\" in key:
            return None
        return self.base_path / key

    def _get_metadata_path(self, key: str) -> Path:
        return self.base_path / METADATA_DIR / f"{key}.json"

    async def check_ready(self) -> None:
        if not await aiofiles.os.path.isdir(self.base_path):
            raise StorageUnavailableException(
                message=f"Storage directory not found: {self.base_path}",
            )

    async def put(
        self,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        full_path = self._get_full_path(key)
        if full_path is None:
            raise StorageException(
                message=f"Invalid object key: {key}",
                details={"key": key},
            )

        try:
            meta_path = self._get_metadata_path(key)
            await aiofiles.os.makedirs(meta_path.parent, exist_ok=True)

            async with aiofiles.open(full_path, "wb") as f:
                await f.write(body)
            async with aiofiles.open(meta_path, "w") as f:
                await f.write(json.dumps({"contentType": content_type, "metadata": metadata}))

        except OSError as e:
            raise StorageException(
                message=f"Failed to write file: {str(e)}",
                details={"key": key},
            )

    async def list(self, max_results: int) -> list[ObjectSummary]:
        try:
            entries = []
            for name in sorted(await aiofiles.os.listdir(self.base_path)):
                if len(entries) >= max_results:
                    break
                path = self.base_path / name
                if name.startswith(".") or not await aiofiles.os.path.isfile(path):
                    continue
                stat = await aiofiles.os.stat(path)
                entries.append(
                    ObjectSummary(
                        key=path.name,
                        size=stat.st_size,
                        last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    )
                )
            return entries

        except OSError as e:
            raise StorageException(
                message=f"Failed to list files: {str(e)}",
                details={"path": str(self.base_path)},
            )

    async def exists(self, key: str) -> bool:
        full_path = self._get_full_path(key)
        return full_path is not None and await aiofiles.os.path.isfile(full_path)

    async def signed_url(self, key: str, ttl_seconds: int) -> str:
        # Local files have no signing authority; the expiry is advisory.
        expires = int(time.time()) + ttl_seconds
        return f"{self.object_url(key)}?expires={expires}"

    async def delete(self, key: str) -> None:
        full_path = self._get_full_path(key)
        if full_path is None:
            return

        try:
            if await aiofiles.os.path.exists(full_path):
                await aiofiles.os.remove(full_path)
            meta_path = self._get_metadata_path(key)
            if await aiofiles.os.path.exists(meta_path):
                await aiofiles.os.remove(meta_path)

        except OSError as e:
            raise StorageException(
                message=f"Failed to delete file: {str(e)}",
                details={"key": key},
            )

    def object_url(self, key: str) -> str:
        return f"/storage/{quote(key)}"

