"""TaskFlow consumer worker entry point.

Runs the consumer loop as a background task inside a small FastAPI app
that serves ``/health``, ``/ready`` and ``/metrics`` on the worker port.
There is no task-submission surface here.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from taskflow.api.routes import health, metrics
from taskflow.api.version import API_VERSION
from taskflow.core.config import Settings, get_settings
from taskflow.core.metrics import WorkerMetrics
from taskflow.core.redis import create_redis_client, verify_redis_connectivity
from taskflow.core.tasks.consumer import TaskConsumer
from taskflow.core.tasks.processing import PayloadLengthProcessor, TaskProcessor
from taskflow.core.tasks.queue import TaskQueue
from taskflow.core.tasks.store import TaskStore

logger = logging.getLogger(__name__)


def attach_consumer(
    app: FastAPI,
    redis_client: Any,
    processor: TaskProcessor | None = None,
) -> TaskConsumer:
    """Bind a Redis client and a TaskConsumer built on it to ``app.state``."""
    consumer = TaskConsumer(
        TaskStore(redis_client),
        TaskQueue(redis_client),
        processor or PayloadLengthProcessor(),
        metrics=app.state.metrics,
    )
    app.state.redis_client = redis_client
    app.state.consumer = consumer
    return consumer


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the consumer loop on startup; stop it on shutdown.

    Shutdown cancels the loop without draining: a task caught
    mid-processing keeps its ``processing`` status.
    """
    settings: Settings = app.state.settings

    redis_client = create_redis_client(settings)
    consumer = attach_consumer(app, redis_client)
    if await verify_redis_connectivity(redis_client):
        logger.info("Redis connection verified")
    else:
        logger.warning("Redis is not reachable; starting in degraded mode")

    shutdown_event = asyncio.Event()
    app.state.consumer_shutdown = shutdown_event
    consumer_task = asyncio.create_task(consumer.run(shutdown_event))
    app.state.consumer_task = consumer_task

    yield

    shutdown_event.set()
    consumer_task.cancel()
    await asyncio.gather(consumer_task, return_exceptions=True)

    await redis_client.aclose()
    logger.info("Worker connections closed")


def create_worker_app(settings: Settings | None = None) -> FastAPI:
    """Create the worker's health and metrics application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=f"{settings.app_name} worker",
        version=API_VERSION,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = WorkerMetrics()

    app.include_router(health.router)
    app.include_router(metrics.router)
    return app


def run() -> None:
    """Console entry point: serve the worker with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Worker metrics server starting on port %d", settings.worker_port)
    uvicorn.run(create_worker_app(settings), host=settings.bind_host, port=settings.worker_port)


if __name__ == "__main__":
    run()
