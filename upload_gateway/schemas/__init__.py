"""Pydantic schemas for request/response validation."""

from upload_gateway.schemas.error import ErrorResponse
from upload_gateway.schemas.file import (
    FileEntry,
    FileListResponse,
    MessageResponse,
    SignedUrlResponse,
    UploadResponse,
)
from upload_gateway.schemas.health import (
    HealthResponse,
    NotReadyResponse,
    ReadinessResponse,
)

__all__ = [
    "ErrorResponse",
    "FileEntry",
    "FileListResponse",
    "MessageResponse",
    "SignedUrlResponse",
    "UploadResponse",
    "HealthResponse",
    "NotReadyResponse",
    "ReadinessResponse",
]
