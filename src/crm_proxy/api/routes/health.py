"""Health check endpoint.

Liveness only: reports that the process is serving requests. HubSpot is
never called from here.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check with the current UTC time."""
    now = datetime.now(timezone.utc)
    return {
        "status": "Server is running",
        "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }
