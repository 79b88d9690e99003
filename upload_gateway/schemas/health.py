"""
Pydantic schemas for liveness and readiness probes.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: str


class ReadinessResponse(BaseModel):
    status: str = "ready"
    timestamp: str


class NotReadyResponse(BaseModel):
    status: str = "not ready"
    error: str
