"""Health check route."""

from datetime import UTC, datetime

from fastapi import APIRouter

from capture_hub import __version__

router = APIRouter(tags=["checkup"])


@router.get("/api/checkup")
async def checkup() -> dict:
    """Report that the service is up."""
    return {
        "status": "ok",
        "service": "capture-hub",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }
