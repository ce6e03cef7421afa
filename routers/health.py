# routers/health.py

import httpx
from fastapi import APIRouter, Depends

from core.backend_client import ping_backend
from core.config import settings
from dependencies.auth import get_backend_client

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/app
# Simple liveness check
# -----------------------------------------------------
@router.get("/app", summary="App health check")
async def health_app():
    """
    Lightweight health check for uptime monitors.
    """
    return {
        "service": settings.PROJECT_NAME,
        "status": "ok",
    }


# -----------------------------------------------------
# GET /health/backend
# Checks the REST backend answers at all
# No auth required
# -----------------------------------------------------
@router.get("/backend", summary="Backend reachability check")
async def health_backend(client: httpx.AsyncClient = Depends(get_backend_client)):
    status = await ping_backend(client)
    return {
        "service": status.get("service", "Backend"),
        "status": status.get("status", "unknown"),
        "details": status,
    }
