"""TaskFlow producer API entry point.

Configures the FastAPI app with:
- CORS, request-id and request-metrics middleware
- Lifespan events for the Redis connection
- Task submission/status, health/readiness and metrics routes
- JSON error handlers (request validation errors are client errors: 400)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskflow.api.middleware import MetricsMiddleware, RequestIDMiddleware
from taskflow.api.routes import health, metrics, tasks
from taskflow.api.version import API_VERSION
from taskflow.core.config import Settings, get_settings
from taskflow.core.metrics import ApiMetrics
from taskflow.core.redis import create_redis_client, verify_redis_connectivity
from taskflow.core.tasks.queue import TaskQueue
from taskflow.core.tasks.service import TaskService
from taskflow.core.tasks.store import TaskStore

logger = logging.getLogger(__name__)


def attach_store(app: FastAPI, redis_client: Any) -> TaskService:
    """Bind a Redis client and the TaskService built on it to ``app.state``."""
    service = TaskService(
        TaskStore(redis_client),
        TaskQueue(redis_client),
        metrics=app.state.metrics,
    )
    app.state.redis_client = redis_client
    app.state.task_service = service
    return service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the Redis connection on startup and close it on shutdown.

    An unreachable Redis does not prevent startup; ``/ready`` reports
    503 until it comes back.
    """
    settings: Settings = app.state.settings

    redis_client = create_redis_client(settings)
    attach_store(app, redis_client)
    if await verify_redis_connectivity(redis_client):
        logger.info("Redis connection verified")
    else:
        logger.warning("Redis is not reachable; starting in degraded mode")

    yield

    await redis_client.aclose()
    logger.info("Redis connection closed")


def _validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        if error.get("type") == "json_invalid" or tuple(error.get("loc", ())) == ("body",):
            return "Invalid request body"
        # A null payload counts as absent; any other non-string value is a malformed body.
        if error.get("type") == "string_type" and error.get("input") is not None:
            return "Invalid request body"
    return "Payload is required"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the producer FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Accepts work items, persists them and enqueues them for the worker",
        version=API_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = ApiMetrics()

    # Note: middleware is applied in reverse order (last added = first executed).
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(health.router)
    app.include_router(tasks.router)
    app.include_router(metrics.router)

    # -- Error Handlers ---
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        message = _validation_message(exc)
        logger.info("Rejected request [%s]: %s", request_id, message)
        return JSONResponse(status_code=400, content={"detail": message})

    @app.exception_handler(Exception)  # Intentionally broad: top-level global error handler
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.exception("Unhandled error [%s]: %s", request_id, exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "request_id": request_id},
        )

    return app


def run() -> None:
    """Console entry point: serve the producer API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("API service starting on port %d", settings.api_port)
    uvicorn.run(create_app(settings), host=settings.bind_host, port=settings.api_port)


if __name__ == "__main__":
    run()
