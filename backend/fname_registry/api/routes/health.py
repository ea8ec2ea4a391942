"""Health & Readiness Probes - liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import fname_registry.infrastructure.database as database
from fname_registry.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.service_name,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe - includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
