"""
Custom exceptions for the upload gateway.

Every error response body carries ``error`` and ``message``; the status
code is chosen by the exception class.
"""

from typing import Any


class GatewayException(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.error = error
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response dictionary."""
        response = {
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ValidationException(GatewayException):
    """400 - Malformed or missing upload input."""

    def __init__(
        self,
        message: str,
        error: str = "validation_failed",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            error=error,
            message=message,
            status_code=400,
            details=details,
        )


class FileNotFoundException(GatewayException):
    """404 - Object absent from the container."""

    def __init__(self, key: str):
        super().__init__(
            error="File not found",
            message=f"No object stored under key '{key}'",
            status_code=404,
        )


class PayloadTooLargeException(GatewayException):
    """413 - Upload size exceeds limit."""

    def __init__(self, max_size: int):
        max_size_mb = max_size / (1024 * 1024)
        super().__init__(
            error="payload_too_large",
            message=f"Maximum upload size exceeded ({max_size_mb:.0f}MB limit)",
            status_code=413,
        )


class StorageException(GatewayException):
    """500 - Storage backend error."""

    def __init__(
        self,
        message: str,
        error: str = "storage_error",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            error=error,
            message=message,
            status_code=500,
            details=details,
        )


class StorageUnavailableException(GatewayException):
    """503 - Storage backend unreachable. Raised by readiness checks only."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            error="storage_unavailable",
            message=message,
            status_code=503,
            details=details,
        )
