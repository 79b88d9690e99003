"""
Google Cloud Storage backend.
Supports GCS buckets for GCP-based deployments.
"""

from datetime import timedelta
from urllib.parse import quote

from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import StorageException, StorageUnavailableException
from upload_gateway.storage.base import ObjectSummary, StorageBackend

settings = get_settings()

GCS_ERRORS = (GoogleAPICallError, GoogleAuthError)


class GCSStorageBackend(StorageBackend):
    """
    Google Cloud Storage implementation.

    Configured via GCS_BUCKET / GCP_PROJECT environment variables;
    credentials come from Application Default Credentials.
    """

    name = "gcs"

    def __init__(
        self,
        bucket_name: str | None = None,
        project: str | None = None,
        client: storage.Client | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize GCS storage backend.

        Args:
            bucket_name: GCS bucket name
            project: GCP project ID
            client: Pre-built storage client (tests)
            timeout: Upper bound in seconds for a single GCS call
        """
        self.bucket_name = bucket_name or settings.GCS_BUCKET
        self.container_name = self.bucket_name
        self.project = project or settings.GCP_PROJECT
        self.timeout = timeout if timeout is not None else settings.STORAGE_TIMEOUT_SECONDS

        if client is None:
            try:
                client = storage.Client(project=self.project)
            except GoogleAuthError as e:
                raise StorageException(
                    message=f"Failed to initialise GCS client: {str(e)}",
                    details={"bucket": self.bucket_name},
                )
        self.client = client
        self.bucket = self.client.bucket(self.bucket_name)

    async def check_ready(self) -> None:
        try:
            found = await self._run(self.bucket.exists)
        except (*GCS_ERRORS, StorageException) as e:
            raise StorageUnavailableException(
                message=str(e),
                details={"bucket": self.bucket_name},
            )
        if not found:
            raise StorageUnavailableException(
                message=f"Bucket {self.bucket_name} does not exist",
                details={"bucket": self.bucket_name},
            )

    async def put(
        self,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        blob = self.bucket.blob(key)
        blob.metadata = metadata
        try:
            await self._run(blob.upload_from_string, body, content_type=content_type)
        except GCS_ERRORS as e:
            raise StorageException(
                message=f"Failed to upload object to GCS: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def list(self, max_results: int) -> list[ObjectSummary]:
        def _list_page() -> list[ObjectSummary]:
            blobs = self.client.list_blobs(self.bucket_name, max_results=max_results)
            return [
                ObjectSummary(key=blob.name, size=blob.size or 0, last_modified=blob.updated)
                for blob in blobs
            ]

        try:
            return await self._run(_list_page)
        except GCS_ERRORS as e:
            raise StorageException(
                message=f"Failed to list objects in GCS: {str(e)}",
                details={"bucket": self.bucket_name},
            )

    async def exists(self, key: str) -> bool:
        try:
            return await self._run(self.bucket.blob(key).exists)
        except GCS_ERRORS as e:
            raise StorageException(
                message=f"Failed to check object existence: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def signed_url(self, key: str, ttl_seconds: int) -> str:
        blob = self.bucket.blob(key)
        try:
            return await self._run(
                blob.generate_signed_url,
                version="v4",
                expiration=timedelta(seconds=ttl_seconds),
                method="GET",
            )
        # Credentials without a private key raise AttributeError when signing.
        except (*GCS_ERRORS, AttributeError) as e:
            raise StorageException(
                message=f"Failed to generate signed URL: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def delete(self, key: str) -> None:
        try:
            await self._run(self.bucket.blob(key).delete)
        except NotFound:
            return None
        except GCS_ERRORS as e:
            raise StorageException(
                message=f"Failed to delete object from GCS: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    def object_url(self, key: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket_name}/{quote(key)}"
