"""
File Upload Gateway - Main Application Entry Point.

Uniform upload/list/get/delete HTTP API over a configurable
object-storage backend, with health probes and Prometheus metrics.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from upload_gateway import __version__
from upload_gateway.api.router import api_router, labelled_routes
from upload_gateway.config import get_settings
from upload_gateway.core.exceptions import GatewayException
from upload_gateway.core.middleware import RequestSizeLimitMiddleware
from upload_gateway.core.responses import create_error_response
from upload_gateway.services.metrics import MetricsMiddleware
from upload_gateway.storage import get_storage_backend

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Builds the storage backend at startup so misconfiguration fails fast.
    """
    logger.info(f"Starting {settings.PROJECT_NAME} on port {settings.PORT}")
    storage = get_storage_backend()
    logger.info(f"Storage backend: {storage.name}")
    logger.info(f"Container: {storage.container_name}")

    yield

    logger.info(f"Shutting down {settings.PROJECT_NAME}")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
## File Upload Gateway

Upload, list, fetch and delete files in an object-storage container.

### Backends
- S3 / MinIO
- Google Cloud Storage
- Azure Blob Storage
- Local filesystem and in-memory (development)
    """,
    version=__version__,
    openapi_tags=[
        {"name": "files", "description": "File storage operations"},
        {"name": "health", "description": "Liveness, readiness and metrics"},
    ],
    lifespan=lifespan,
)

# CORS middleware for cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Limit follows MAX_UPLOAD_SIZE
app.add_middleware(RequestSizeLimitMiddleware)

# Added last so it wraps everything else and sees every response
app.add_middleware(MetricsMiddleware, routes=labelled_routes)


@app.exception_handler(GatewayException)
async def gateway_exception_handler(request: Request, exc: GatewayException) -> JSONResponse:
    """Render gateway exceptions as {error, message[, details]}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed requests are client errors (400)."""
    errors = exc.errors()
    message = errors[0].get("msg", "Request validation failed") if errors else "Request validation failed"
    return create_error_response(
        error="validation_failed",
        message=message,
        status_code=400,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all exception handler for unexpected errors.
    Logs the full error and returns the message.
    """
    logger.exception(f"Unexpected error: {exc}")
    return create_error_response(
        error="internal_error",
        message=str(exc) or "An unexpected error occurred",
        status_code=500,
    )


app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root():
    """Service information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": __version__,
        "backend": settings.STORAGE_BACKEND,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "upload_gateway.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
