"""
Health check endpoints - used by load balancers and Docker healthcheck.

- GET /health       - basic liveness (always 200 if app running)
- GET /health/ready - readiness check (Redis queue transport)
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from event_proxy import __version__

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check - returns 200 if the app is running."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check - verifies the queue transport is reachable."""
    checks = {"redis": False}

    try:
        from event_proxy.services.queue import RedisQueuePublisher
        checks["redis"] = await RedisQueuePublisher().ping()
    except Exception as e:
        logger.warning("Redis health check failed: %s", str(e))

    all_healthy = all(checks.values())
    return {
        "status": "ready" if all_healthy else "degraded",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
