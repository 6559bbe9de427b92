"""Health check route."""

from datetime import datetime, timezone

from fastapi import APIRouter

from amper_tracker.core.config import settings

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    """Report that the API process is up."""
    return {
        "success": True,
        "message": "Amper Tracker API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
    }
