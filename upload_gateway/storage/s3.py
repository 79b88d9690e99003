"""
S3-compatible storage backend.
Supports AWS S3 and S3-compatible services like MinIO.
"""

from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import StorageException, StorageUnavailableException
from upload_gateway.storage.base import ObjectSummary, StorageBackend

settings = get_settings()

S3_ERRORS = (ClientError, BotoCoreError)
NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: Exception) -> str | None:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class S3StorageBackend(StorageBackend):
    """
    S3-compatible object storage implementation.

    Configured via S3_* / AWS_REGION environment variables. Credentials
    fall back to boto3's default chain when no keys are given. The bucket
    is expected to exist; it is never created here.
    """

    name = "s3"

    def __init__(
        self,
        bucket_name: str | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client=None,
        timeout: float | None = None,
    ):
        """
        Initialize S3 storage backend.

        Args:
            bucket_name: S3 bucket name
            region: AWS region
            endpoint_url: S3 endpoint URL (for MinIO, custom S3-compatible services)
            access_key: AWS access key ID
            secret_key: AWS secret access key
            client: Pre-built boto3 S3 client (tests)
            timeout: Upper bound in seconds for a single S3 call
        """
        self.bucket_name = bucket_name or settings.S3_BUCKET
        self.container_name = self.bucket_name
        self.region = region or settings.AWS_REGION
        self.endpoint_url = endpoint_url or settings.S3_ENDPOINT_URL
        self.timeout = timeout if timeout is not None else settings.STORAGE_TIMEOUT_SECONDS

        if client is None:
            # One attempt per request; retrying is the caller's decision.
            config = Config(
                signature_version="s3v4",
                retries={"max_attempts": 1, "mode": "standard"},
            )
            client = boto3.client(
                "s3",
                endpoint_url=self.endpoint_url,
                aws_access_key_id=access_key or settings.S3_ACCESS_KEY,
                aws_secret_access_key=secret_key or settings.S3_SECRET_KEY,
                region_name=self.region,
                config=config,
            )
        self.client = client

    async def check_ready(self) -> None:
        try:
            await self._run(self.client.head_bucket, Bucket=self.bucket_name)
        except (*S3_ERRORS, StorageException) as e:
            raise StorageUnavailableException(
                message=str(e),
                details={"bucket": self.bucket_name},
            )

    async def put(
        self,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        try:
            await self._run(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=body,
                ContentType=content_type,
                Metadata=metadata,
            )
        except S3_ERRORS as e:
            raise StorageException(
                message=f"Failed to upload object to S3: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def list(self, max_results: int) -> list[ObjectSummary]:
        try:
            response = await self._run(
                self.client.list_objects_v2,
                Bucket=self.bucket_name,
                MaxKeys=max_results,
            )
        except S3_ERRORS as e:
            raise StorageException(
                message=f"Failed to list objects in S3: {str(e)}",
                details={"bucket": self.bucket_name},
            )

        return [
            ObjectSummary(
                key=item["Key"],
                size=item["Size"],
                last_modified=item["LastModified"],
            )
            for item in response.get("Contents", [])
        ]

    async def exists(self, key: str) -> bool:
        try:
            await self._run(self.client.head_object, Bucket=self.bucket_name, Key=key)
            return True
        except S3_ERRORS as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return False
            raise StorageException(
                message=f"Failed to check object existence: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def signed_url(self, key: str, ttl_seconds: int) -> str:
        try:
            return await self._run(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except S3_ERRORS as e:
            raise StorageException(
                message=f"Failed to generate presigned URL: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    async def delete(self, key: str) -> None:
        # S3 DeleteObject succeeds for missing keys.
        try:
            await self._run(self.client.delete_object, Bucket=self.bucket_name, Key=key)
        except S3_ERRORS as e:
            raise StorageException(
                message=f"Failed to delete object from S3: {str(e)}",
                details={"key": key, "bucket": self.bucket_name},
            )

    def object_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{quote(key)}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{quote(key)}"
