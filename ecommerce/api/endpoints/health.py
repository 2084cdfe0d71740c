"""
Health check endpoints.

Liveness for load balancers and readiness covering the database and the
cache store.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...constants import APP_VERSION

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(request: Request) -> Dict[str, Any]:
    """Basic health check endpoint."""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.OTEL_SERVICE_NAME,
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    The cache is reported but does not gate readiness; the application
    serves correct results without it.
    """
    state = request.app.state
    database_ok = await state.database.health_check()
    cache_ok = await state.cache_manager.health_check()

    body = {
        "status": "ready" if database_ok else "not_ready",
        "checks": {
            "database": "healthy" if database_ok else "unhealthy",
            "cache": "healthy" if cache_ok else "degraded",
        },
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)
