"""Fixed-interval consumer loop.

Each tick pops at most one task id from the queue, walks the task
through ``processing`` to a terminal status, and records the outcome.
The processing step is awaited inline, so no other task is dequeued
until it finishes: throughput is one task per tick interval plus
processing time.

Failure policy: nothing is retried and nothing is re-queued. A popped id
whose record is missing or corrupt is dropped after being logged and
counted. Store errors skip the rest of the tick.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

import redis.asyncio as aioredis

from taskflow.core.metrics import WorkerMetrics
from taskflow.core.tasks.errors import (
    CorruptTaskError,
    InvalidTransitionError,
    TaskNotFoundError,
)
from taskflow.core.tasks.models import Task, TaskStatus, utcnow
from taskflow.core.tasks.processing import TaskProcessor
from taskflow.core.tasks.queue import TaskQueue
from taskflow.core.tasks.store import TaskStore

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 2.0

_STORE_ERRORS = (aioredis.RedisError, ConnectionError, OSError)


class TaskConsumer:
    """Single-worker consumer that drives tasks through their lifecycle.

    Args:
        store: Task record store.
        queue: Pending-task queue.
        processor: Processing step applied to each task.
        metrics: Worker metrics to update.
        tick_interval: Seconds between ticks.
        clock: Source of ``updated_at`` timestamps.
        timer: Monotonic timer used for the latency histogram.
    """

    def __init__(
        self,
        store: TaskStore,
        queue: TaskQueue,
        processor: TaskProcessor,
        metrics: WorkerMetrics | None = None,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = utcnow,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._queue = queue
        self._processor = processor
        self._metrics = metrics or WorkerMetrics()
        self._tick_interval = tick_interval
        self._clock = clock
        self._timer = timer

    @property
    def metrics(self) -> WorkerMetrics:
        return self._metrics

    async def process_next(self) -> Task | None:
        """Run one tick.

        Returns:
            The task in its terminal state if one was processed, otherwise
            None (empty queue, dropped entry, or store error).
        """
        try:
            return await self._tick()
        except _STORE_ERRORS:
            logger.exception("Store unavailable, skipping tick")
            self._metrics.store_errors.inc()
            return None

    async def _tick(self) -> Task | None:
        try:
            self._metrics.queue_length.set(await self._queue.length())
        except _STORE_ERRORS as exc:
            logger.warning("Failed to read queue length: %s", exc)

        task_id = await self._queue.pop()
        if task_id is None:
            return None

        logger.info("Processing task: %s", task_id)
        start = self._timer()

        try:
            task = await self._store.load(task_id)
        except (TaskNotFoundError, CorruptTaskError) as exc:
            logger.error("Dropping task %s: %s", task_id, exc)
            self._metrics.tasks_failed.inc()
            return None
        except _STORE_ERRORS:
            self._metrics.tasks_failed.inc()
            raise

        try:
            task.transition(TaskStatus.PROCESSING, now=self._clock())
        except InvalidTransitionError as exc:
            # Duplicate queue entry for a task that already left pending.
            logger.error("Dropping task %s: %s", task_id, exc)
            self._metrics.tasks_failed.inc()
            return None
        await self._store.save(task)

        try:
            await self._processor.process(task)
        except Exception as exc:  # Intentionally broad: processing step is pluggable
            logger.warning("Task %s failed: %s", task.id, exc)
            outcome = TaskStatus.FAILED
        else:
            outcome = TaskStatus.COMPLETED

        task.transition(outcome, now=self._clock())
        await self._store.save(task)

        if outcome == TaskStatus.COMPLETED:
            logger.info("Task %s completed", task.id)
            self._metrics.tasks_processed.inc()
        else:
            self._metrics.tasks_failed.inc()
        self._metrics.processing_duration.observe(self._timer() - start)
        return task

    async def run(self, shutdown_event: asyncio.Event | None = None) -> None:
        """Tick every ``tick_interval`` seconds until ``shutdown_event`` is set.

        An in-flight task is not drained on cancellation; it stays in
        ``processing``.
        """
        if shutdown_event is None:
            shutdown_event = asyncio.Event()

        logger.info("Consumer started (polling every %ss)", self._tick_interval)

        while not shutdown_event.is_set():
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=self._tick_interval)
                break
            except TimeoutError:
                pass
            except asyncio.CancelledError:
                break

            try:
                await self.process_next()
            except asyncio.CancelledError:
                break
            except Exception:  # Intentionally broad: worker loop
                logger.exception("Consumer tick failed")

        logger.info("Consumer stopped")
