"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from studio.config import Settings
from studio.database.connection import Database, get_database

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    message: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/health", response_model=HealthResponse)
async def health_check(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Comprehensive health check endpoint.

    Checks:
    - Application status
    - Database connectivity
    """
    checks = {}
    overall_status = "OK"
    message = "Photography studio API is running"

    db_health = await database.check_health()
    checks["database"] = db_health
    if db_health.get("status") != "healthy":
        overall_status = "degraded"
        message = "Database is unavailable"

    return HealthResponse(
        status=overall_status,
        message=message,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(
    response: Response,
    database: Database = Depends(get_database),
) -> Dict[str, str]:
    """
    Kubernetes readiness probe endpoint.

    Returns 503 while the database cannot be reached.
    """
    db_health = await database.check_health()

    if db_health.get("status") != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "database_unavailable"}

    return {"status": "ready"}
