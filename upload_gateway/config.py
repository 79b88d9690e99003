"""
Configuration management for the upload gateway.
Uses pydantic-settings for environment-based configuration.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    PROJECT_NAME: str = "File Upload Gateway"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DEBUG: bool = False

    # Storage Backend Selection
    STORAGE_BACKEND: Literal["memory", "local", "s3", "gcs", "azure"] = "memory"

    # Upload / listing limits
    MAX_UPLOAD_SIZE: int = 100 * 1024 * 1024  # 100MB
    LIST_MAX_RESULTS: int = 100
    SIGNED_URL_TTL_SECONDS: int = 3600  # 1 hour

    # Upper bound for a single backend call
    STORAGE_TIMEOUT_SECONDS: float = 30.0

    # In-memory Storage Settings
    MEMORY_CONTAINER_NAME: str = "file-upload-lab"

    # Local Storage Settings
    LOCAL_STORAGE_PATH: str = "./storage"

    # S3/MinIO Settings
    S3_BUCKET: str = "file-upload-lab"
    AWS_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None

    # Google Cloud Storage Settings
    GCS_BUCKET: str = "file-upload-lab"
    GCP_PROJECT: str | None = None
    GCP_REGION: str = "us-central1"

    # Azure Blob Settings
    STORAGE_ACCOUNT: str | None = None
    STORAGE_CONTAINER: str = "file-upload"
    AZURE_STORAGE_CONNECTION_STRING: str | None = None
    AZURE_STORAGE_ACCOUNT_KEY: str | None = None
    AZURE_REGION: str = "eastus"

    # Logging
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
