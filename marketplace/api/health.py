"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from marketplace.infrastructure.cache import CacheError
from marketplace.infrastructure.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="marketplace-catalog",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, str]:
    """Check if service is ready to accept requests.

    The cache is optional for correctness, so an unreachable cache is
    reported as degraded rather than not ready.

    Returns:
        Readiness status.
    """
    cache = getattr(request.app.state, "cache", None)
    if cache is None:
        return {"status": "ready", "cache": "disabled"}
    try:
        await cache.exists("health:probe")
    except CacheError:
        return {"status": "ready", "cache": "degraded"}
    return {"status": "ready", "cache": "ok"}
