"""
File endpoints: upload, list, signed download URL, delete.
"""

from fastapi import APIRouter, File, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from upload_gateway.core.exceptions import PayloadTooLargeException, ValidationException
from upload_gateway.dependencies import AppSettings, Files
from upload_gateway.schemas.error import ErrorResponse
from upload_gateway.schemas.file import (
    FileListResponse,
    MessageResponse,
    SignedUrlResponse,
    UploadResponse,
)

router = APIRouter(prefix="/api")


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_file(
    files: Files,
    settings: AppSettings,
    # A plain text field named "file" counts as no file
    file: UploadFile | str | None = File(default=None, description="The file to store"),
):
    """
    Upload a single file (multipart field ``file``).

    The stored key is assigned by the gateway as ``{unix_millis}-{file name}``.
    Files larger than MAX_UPLOAD_SIZE are rejected with 413.
    """
    if not isinstance(file, StarletteUploadFile):
        raise ValidationException(
            message="Multipart field 'file' is required",
            error="No file uploaded",
        )

    if file.size is not None and file.size > settings.MAX_UPLOAD_SIZE:
        raise PayloadTooLargeException(settings.MAX_UPLOAD_SIZE)

    body = await file.read()
    if len(body) > settings.MAX_UPLOAD_SIZE:
        raise PayloadTooLargeException(settings.MAX_UPLOAD_SIZE)

    return await files.upload(
        original_name=file.filename or "upload",
        body=body,
        content_type=file.content_type,
    )


@router.get(
    "/files",
    response_model=FileListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_files(files: Files, settings: AppSettings):
    """
    List stored files.

    Returns a single page of at most LIST_MAX_RESULTS entries; no
    pagination token is exposed.
    """
    return await files.list_files(settings.LIST_MAX_RESULTS)


@router.get(
    "/files/{key}",
    response_model=SignedUrlResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_file(key: str, files: Files, settings: AppSettings):
    """Return a signed read URL for a stored file."""
    return await files.get_download_url(key, settings.SIGNED_URL_TTL_SECONDS)


@router.delete(
    "/files/{key}",
    response_model=MessageResponse,
    responses={500: {"model": ErrorResponse}},
)
async def delete_file(key: str, files: Files):
    """Delete a stored file. Deleting a missing file succeeds."""
    return await files.delete(key)
