"""Health check endpoints."""

from fastapi import APIRouter, Request

from sweeper.config import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(request: Request) -> dict[str, str | bool]:
    """Readiness probe.

    Reports whether the moderation service is wired and whether it can reach
    YouTube. A missing API key leaves the app ready for everything except
    the moderation endpoints, which answer 503.
    """
    settings = get_settings()
    service_ready = getattr(request.app.state, "moderation_service", None) is not None
    return {
        "status": "ready",
        "environment": settings.environment,
        "debug": settings.debug,
        "moderation_service": service_ready,
        "youtube_configured": settings.youtube_configured,
    }


@router.get("")
async def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
