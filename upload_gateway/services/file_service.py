"""
File service - Business logic for the upload/list/get/delete lifecycle.
Handles key naming, backend calls, upload metrics and response shaping.
"""

import logging

from upload_gateway.core.exceptions import FileNotFoundException, StorageException
from upload_gateway.core.responses import utc_timestamp
from upload_gateway.schemas.file import (
    FileEntry,
    FileListResponse,
    MessageResponse,
    SignedUrlResponse,
    UploadResponse,
)
from upload_gateway.services import metrics
from upload_gateway.storage.base import (
    DEFAULT_CONTENT_TYPE,
    StorageBackend,
    generate_object_key,
)

logger = logging.getLogger(__name__)


def _operation_failed(error: str, exc: StorageException) -> StorageException:
    """Re-label a backend failure with the operation that hit it."""
    return StorageException(message=exc.message, error=error, details=exc.details)


class FileService:
    """Service class for stored-file operations. Each call makes one backend attempt."""

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    async def upload(
        self,
        original_name: str,
        body: bytes,
        content_type: str | None = None,
    ) -> UploadResponse:
        """
        Store an uploaded file under a generated key.

        Args:
            original_name: File name as sent by the client
            body: Complete file content
            content_type: Declared MIME type of the file part

        Returns:
            UploadResponse with the assigned key, exact size and object URL

        Raises:
            StorageException: If the backend write fails
        """
        key = generate_object_key(original_name)
        size = len(body)
        metadata = {
            "originalName": original_name,
            "uploadedAt": utc_timestamp(),
        }

        try:
            await self.storage.put(key, body, content_type or DEFAULT_CONTENT_TYPE, metadata)
        except StorageException as e:
            metrics.record_upload_error()
            logger.error(f"Upload of '{key}' failed: {e.message}")
            raise _operation_failed("Failed to upload file", e)
        except Exception:
            metrics.record_upload_error()
            raise

        metrics.record_upload_success(size)
        logger.info(f"Uploaded '{key}' ({size} bytes) to {self.storage.name}")

        return UploadResponse(
            file_name=key,
            size=size,
            url=self.storage.object_url(key),
        )

    async def list_files(self, max_results: int) -> FileListResponse:
        """
        List stored files (single page, no pagination token).

        Raises:
            StorageException: If the backend listing fails
        """
        try:
            summaries = await self.storage.list(max_results)
        except StorageException as e:
            logger.error(f"Listing failed: {e.message}")
            raise _operation_failed("Failed to list files", e)

        files = [
            FileEntry(
                key=summary.key,
                size=summary.size,
                last_modified=summary.last_modified,
                url=self.storage.object_url(summary.key),
            )
            for summary in summaries
        ]
        return FileListResponse(files=files, count=len(files))

    async def get_download_url(self, key: str, ttl_seconds: int) -> SignedUrlResponse:
        """
        Produce a signed read URL for an existing object.

        Raises:
            FileNotFoundException: If the object does not exist
            StorageException: If the existence check or signing fails
        """
        try:
            if not await self.storage.exists(key):
                raise FileNotFoundException(key)
            url = await self.storage.signed_url(key, ttl_seconds)
        except StorageException as e:
            logger.error(f"Signed URL for '{key}' failed: {e.message}")
            raise _operation_failed("Failed to get file", e)

        return SignedUrlResponse(url=url)

    async def delete(self, key: str) -> MessageResponse:
        """
        Delete an object. Missing keys are not an error.

        Raises:
            StorageException: If the backend delete fails
        """
        try:
            await self.storage.delete(key)
        except StorageException as e:
            logger.error(f"Delete of '{key}' failed: {e.message}")
            raise _operation_failed("Failed to delete file", e)

        logger.info(f"Deleted '{key}' from {self.storage.name}")
        return MessageResponse(message="File deleted successfully")
