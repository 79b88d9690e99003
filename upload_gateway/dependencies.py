"""
FastAPI dependency injection functions.
Provides common dependencies used across endpoints.
"""

from typing import Annotated

from fastapi import Depends

from upload_gateway.config import Settings, get_settings
from upload_gateway.services.file_service import FileService
from upload_gateway.storage import StorageBackend, get_storage


def get_file_service(storage: StorageBackend = Depends(get_storage)) -> FileService:
    return FileService(storage)


# Type aliases for cleaner endpoint signatures
Storage = Annotated[StorageBackend, Depends(get_storage)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Files = Annotated[FileService, Depends(get_file_service)]
