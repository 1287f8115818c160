"""
Health endpoints polled by the desktop app.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from evaluation_api.core.constants import SERVICE_NAME

router = APIRouter()


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a trailing ``Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health")
async def health_check() -> dict[str, str]:
    """The app enables AI evaluation only after this answers ``ok``."""
    return {"status": "ok", "service": SERVICE_NAME, "timestamp": utc_timestamp()}


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
