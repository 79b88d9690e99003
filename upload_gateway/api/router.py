"""
API Router - Aggregates all endpoints.
Probes live at the root, file operations under /api.
"""

from fastapi import APIRouter

from upload_gateway.api import files, health

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, tags=["health"])
api_router.include_router(files.router, tags=["files"])

# Leaf routes with their full path templates, used to label requests the
# router never dispatched (e.g. rejected by middleware)
labelled_routes = [*health.router.routes, *files.router.routes]
