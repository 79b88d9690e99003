"""
File Upload Gateway

A thin HTTP API for uploading, listing, fetching and deleting files in
S3, GCS or Azure Blob storage.
"""

__version__ = "1.0.0"
