"""Core utilities and exceptions for the upload gateway."""

from upload_gateway.core.exceptions import (
    GatewayException,
    FileNotFoundException,
    ValidationException,
    PayloadTooLargeException,
    StorageException,
    StorageUnavailableException,
)

__all__ = [
    "GatewayException",
    "FileNotFoundException",
    "ValidationException",
    "PayloadTooLargeException",
    "StorageException",
    "StorageUnavailableException",
]
