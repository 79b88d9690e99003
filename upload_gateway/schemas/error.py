"""
Pydantic schemas for error responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Examples:
        400: {"error": "No file uploaded", "message": "..."}
        404: {"error": "File not found", "message": "..."}
        413: {"error": "payload_too_large", "message": "maximum size exceeded"}
        500: {"error": "Failed to upload file", "message": "<backend error>"}
    """

    error: str = Field(
        ...,
        description="Error code string",
        examples=["No file uploaded", "File not found", "Failed to upload file"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Optional additional error details",
    )
