"""Liveness and readiness endpoints.

Mounted on both the producer API and the consumer worker.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe; always healthy while the process serves requests."""
    return {"status": "healthy"}


@router.get("/ready", response_model=None)
async def readiness_check(request: Request) -> dict[str, str] | JSONResponse:
    """Readiness probe; ready only when Redis answers PING."""
    redis_client = getattr(request.app.state, "redis_client", None)
    try:
        if redis_client is not None and await redis_client.ping():
            return {"status": "ready"}
    except (aioredis.RedisError, ConnectionError, OSError):
        logger.warning("Redis readiness check failed")

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not ready", "reason": "redis unavailable"},
    )
