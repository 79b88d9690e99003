"""
Azure Blob Storage backend.
Supports Azure Blob Storage for Azure-based deployments.
"""

from datetime import datetime, timedelta, timezone
from itertools import islice

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import (
    BlobSasPermissions,
    BlobServiceClient,
    ContentSettings,
    generate_blob_sas,
)

from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import StorageException, StorageUnavailableException
from upload_gateway.storage.base import ObjectSummary, StorageBackend

settings = get_settings()


class AzureStorageBackend(StorageBackend):
    """
    Azure Blob Storage implementation.

    Configured via AZURE_STORAGE_CONNECTION_STRING, or STORAGE_ACCOUNT plus
    AZURE_STORAGE_ACCOUNT_KEY. The account key is needed to sign SAS URLs.
    """

    name = "azure"

    def __init__(
        self,
        connection_string: str | None = None,
        account_name: str | None = None,
        account_key: str | None = None,
        container_name: str | None = None,
        service_client: BlobServiceClient | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize Azure Blob storage backend.

        Args:
            connection_string: Azure Storage connection string
            account_name: Storage account name (used without a connection string)
            account_key: Storage account key
            container_name: Blob container name
            service_client: Pre-built BlobServiceClient (tests)
            timeout: Upper bound in seconds for a single Azure call
        """
        self.container_name = container_name or settings.STORAGE_CONTAINER
        self.timeout = timeout if timeout is not None else settings.STORAGE_TIMEOUT_SECONDS
        connection_string = connection_string or settings.AZURE_STORAGE_CONNECTION_STRING
        account_name = account_name or settings.STORAGE_ACCOUNT
        self.account_key = account_key or settings.AZURE_STORAGE_ACCOUNT_KEY

        if service_client is None:
            if connection_string:
                service_client = BlobServiceClient.from_connection_string(connection_string)
            elif account_name and self.account_key:
                service_client = BlobServiceClient(
                    account_url=f"https://{account_name}.blob.core.windows.net",
                    credential=self.account_key,
                )
            else:
                raise StorageException(
                    message="Azure storage not configured",
                    details={
                        "required": "AZURE_STORAGE_CONNECTION_STRING or "
                        "STORAGE_ACCOUNT + AZURE_STORAGE_ACCOUNT_KEY",
                    },
                )
        self.blob_service_client = service_client
        self.container_client = service_client.get_container_client(self.container_name)

        if not self.account_key:
            self.account_key = getattr(service_client.credential, "account_key", None)

    def _get_blob_client(self, key: str):
        """Get blob client for a key."""
        return self.container_client.get_blob_client(key)

    async def check_ready(self) -> None:
        try:
            await self._run(self.container_client.get_container_properties)
        except (AzureError, StorageException) as e:
            raise StorageUnavailableException(
                message=str(e),
                details={"container": self.container_name},
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
                self._get_blob_client(key).upload_blob,
                body,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
                metadata=metadata,
            )
        except AzureError as e:
            raise StorageException(
                message=f"Failed to upload blob to Azure: {str(e)}",
                details={"key": key, "container": self.container_name},
            )

    async def list(self, max_results: int) -> list[ObjectSummary]:
        def _list_page() -> list[ObjectSummary]:
            blobs = self.container_client.list_blobs(results_per_page=max_results)
            return [
                ObjectSummary(key=blob.name, size=blob.size, last_modified=blob.last_modified)
                for blob in islice(blobs, max_results)
            ]

        try:
            return await self._run(_list_page)
        except AzureError as e:
            raise StorageException(
                message=f"Failed to list blobs in Azure: {str(e)}",
                details={"container": self.container_name},
            )

    async def exists(self, key: str) -> bool:
        try:
            return await self._run(self._get_blob_client(key).exists)
        except AzureError as e:
            raise StorageException(
                message=f"Failed to check blob existence: {str(e)}",
                details={"key": key, "container": self.container_name},
            )

    async def signed_url(self, key: str, ttl_seconds: int) -> str:
        if not self.account_key:
            raise StorageException(
                message="Account key required to sign SAS URLs",
                details={"key": key, "container": self.container_name},
            )

        try:
            sas_token = generate_blob_sas(
                account_name=self.blob_service_client.account_name,
                container_name=self.container_name,
                blob_name=key,
                account_key=self.account_key,
                permission=BlobSasPermissions(read=True),
                expiry=datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
            )
        except (AzureError, ValueError) as e:
            raise StorageException(
                message=f"Failed to generate SAS URL: {str(e)}",
                details={"key": key, "container": self.container_name},
            )
        return f"{self.object_url(key)}?{sas_token}"

    async def delete(self, key: str) -> None:
        try:
            await self._run(self._get_blob_client(key).delete_blob)
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise StorageException(
                message=f"Failed to delete blob from Azure: {str(e)}",
                details={"key": key, "container": self.container_name},
            )

    def object_url(self, key: str) -> str:
        return self._get_blob_client(key).url
