"""
Pydantic schemas for file endpoint responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Result of a successful upload."""

    message: str = "File uploaded successfully"
    file_name: str = Field(
        alias="fileName",
        description="Key assigned to the stored object",
        examples=["1714564800000-report.pdf"],
    )
    size: int = Field(ge=0, description="Exact number of bytes written")
    url: str = Field(description="Canonical (non-signed) object locator")

    model_config = ConfigDict(populate_by_name=True)


class FileEntry(BaseModel):
    """A single stored object in a listing."""

    key: str
    size: int
    last_modified: datetime = Field(alias="lastModified")
    url: str

    model_config = ConfigDict(populate_by_name=True)


class FileListResponse(BaseModel):
    """Single page of stored objects (at most 100, no pagination token)."""

    files: list[FileEntry]
    count: int


class SignedUrlResponse(BaseModel):
    """Time-limited read URL for an object."""

    url: str


class MessageResponse(BaseModel):
    message: str
