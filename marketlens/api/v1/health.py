"""
Health check endpoints
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from marketlens.api.deps import AsyncSessionDep
from marketlens.core.config import settings
from marketlens.core.database import check_database_health
from marketlens.schemas.common import HealthCheckResponse


router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(session: AsyncSessionDep) -> HealthCheckResponse:
    """Basic health check"""
    database = await check_database_health(session)

    return HealthCheckResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.VERSION,
        database="connected" if database["status"] == "healthy" else "disconnected",
    )


@router.get("/health/ready", response_model=Dict[str, Any])
async def readiness_probe(session: AsyncSessionDep) -> Dict[str, Any]:
    """
    Readiness probe - checks the database
    """
    database = await check_database_health(session)
    healthy = database["status"] == "healthy"

    return {
        "status": "ok" if healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {"database": healthy},
    }
