"""Health check routes."""

import time
from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from joingate.config import Settings

router = APIRouter(tags=["health"], route_class=DishkaRoute)

_STARTED_AT = time.monotonic()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    uptime: float  # Seconds since the process started
    version: str
    git_sha: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: FromDishka[Settings]) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status indicating the service is running
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - _STARTED_AT, 3),
        version="0.1.0",
        git_sha=settings.git_sha,
    )
