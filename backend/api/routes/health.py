"""
Health check endpoint.

A plain liveness probe for monitoring.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()

_started_at = time.monotonic()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    uptime: float
    environment: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    settings = get_settings()
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - _started_at, 3),
        environment=settings.environment,
        version=settings.app_version,
    )
