"""Health check endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from topicsync.api.deps import get_app_settings
from topicsync.api.schemas import HealthResponse
from topicsync.core.config import Settings
from topicsync.database.session import get_async_session

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(
    settings: Settings = Depends(get_app_settings),
    session: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """Readiness probe; checks the metadata store is reachable."""
    await session.execute(text("SELECT 1"))
    return HealthResponse(status="ready", version=settings.app_version)


@router.get("/live", response_model=HealthResponse)
async def liveness_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="alive", version=settings.app_version)
