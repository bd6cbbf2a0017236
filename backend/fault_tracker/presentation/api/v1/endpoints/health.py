"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter

from fault_tracker.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the current application health status and storage backend."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "repository_backend": settings.repository_backend,
    }
