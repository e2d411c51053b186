from fastapi import APIRouter, status
from pydantic import BaseModel
from datetime import datetime, timezone
from app.config.settings import settings
from app.core import database

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str


@router.get("", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="1.0.0",
        environment=settings.environment
    )


@router.get("/readiness")
async def readiness_check():
    """Readiness check: storage reachable and Gemini configured"""
    if settings.storage_backend.lower() == "memory":
        storage_status = "ok"
    else:
        storage_status = "ok" if database.database_available() else "unavailable"

    checks = {
        "storage_backend": settings.storage_backend,
        "storage": storage_status,
        "gemini": "ok" if settings.gemini_api_key else "not_configured",
    }

    return {
        "status": "ready" if checks["storage"] == "ok" and checks["gemini"] == "ok" else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc)
    }
