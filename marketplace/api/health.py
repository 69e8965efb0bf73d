"""
Liveness endpoints. Both answer even when MongoDB is down.
"""
from fastapi import APIRouter, Depends

from ..config.database import DatabaseManager, get_database_manager
from ..config.settings import get_settings
from ..models.base import utcnow
from ..schemas.common import HealthCheckResponse, RootResponse

settings = get_settings()

router = APIRouter()


@router.get("/", response_model=RootResponse, tags=["Root"])
async def root():
    """Root endpoint - Always accessible"""
    return RootResponse(
        message=f"Welcome to {settings.app_name}",
        version=settings.app_version,
        docs="/docs",
        health=f"{settings.api_prefix}/health",
        status="running",
        timestamp=utcnow().isoformat(),
    )


@router.get(f"{settings.api_prefix}/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check(manager: DatabaseManager = Depends(get_database_manager)):
    """Health check endpoint - Always accessible"""
    try:
        if manager.is_connected():
            await manager.get_database().command("ping")
            db_status = "connected"
        else:
            db_status = "disconnected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return HealthCheckResponse(
        status="OK",
        message="Tribal Marketplace API is running",
        database=db_status,
        timestamp=utcnow().isoformat(),
        version=settings.app_version,
    )
