"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from storefront.config import Settings
from storefront.database.connection import Database
from storefront.serving.api.deps import get_app_settings, get_database

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """Application status and database connectivity."""
    db_health = await database.health()

    return HealthResponse(
        status="healthy" if db_health.get("status") == "healthy" else "degraded",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks={"database": db_health},
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """Returns 200 while the process is running."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(
    response: Response,
    database: Database = Depends(get_database),
) -> Dict[str, str]:
    """Returns 503 until the database is reachable."""
    db_health = await database.health()

    if db_health.get("status") != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "database_unavailable"}

    return {"status": "ready"}
