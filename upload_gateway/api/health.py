"""
Health, readiness and metrics endpoints.
No authentication; intended for orchestrators and Prometheus.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from upload_gateway.core.exceptions import StorageUnavailableException
from upload_gateway.core.responses import utc_timestamp
from upload_gateway.dependencies import Storage
from upload_gateway.schemas.health import HealthResponse, NotReadyResponse, ReadinessResponse
from upload_gateway.services.metrics import render_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness check. Always healthy once the process is serving;
    the storage backend is not consulted.
    """
    return HealthResponse(status="healthy", timestamp=utc_timestamp())


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": NotReadyResponse}},
)
async def readiness_check(storage: Storage):
    """
    Readiness check. Probes the storage container once; retrying is
    left to the orchestrator.
    """
    try:
        await storage.check_ready()
    except StorageUnavailableException as e:
        error = e.message
    except Exception as e:
        logger.exception("Unexpected readiness probe failure")
        error = str(e)
    else:
        return ReadinessResponse(status="ready", timestamp=utc_timestamp())

    logger.warning(f"Readiness check failed: {error}")
    return JSONResponse(
        status_code=503,
        content=NotReadyResponse(status="not ready", error=error).model_dump(),
    )


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus text exposition format endpoint."""
    content, content_type = render_metrics()
    return Response(content=content, media_type=content_type)
