"""
Business logic services for the upload gateway.
Services handle core operations separate from API endpoints.
"""

from upload_gateway.services.file_service import FileService

__all__ = [
    "FileService",
]
