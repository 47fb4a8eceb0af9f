"""Producer enqueue path and status query.

``TaskService`` is what the HTTP routes call. Creation writes the record
first and pushes the id only once the write has been acknowledged, so a
queued id always had a record at push time. A failed push after a
successful write leaves an orphan record behind; it is reported to the
caller and left to expire.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import redis.asyncio as aioredis

from taskflow.core.metrics import ApiMetrics
from taskflow.core.tasks.errors import (
    InvalidPayloadError,
    TaskEnqueueError,
    TaskStoreError,
)
from taskflow.core.tasks.models import Task, utcnow
from taskflow.core.tasks.queue import TaskQueue
from taskflow.core.tasks.store import TaskStore

logger = logging.getLogger(__name__)

_STORE_ERRORS = (aioredis.RedisError, ConnectionError, OSError)


class TaskService:
    """Creates tasks and answers status queries.

    Args:
        store: Task record store.
        queue: Pending-task queue.
        metrics: API metrics; ``tasks_created`` is incremented per task.
        clock: Source of ``created_at`` timestamps.
    """

    def __init__(
        self,
        store: TaskStore,
        queue: TaskQueue,
        metrics: ApiMetrics | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._queue = queue
        self._metrics = metrics
        self._clock = clock

    async def create_task(self, payload: Any) -> Task:
        """Persist a new pending task and enqueue its id.

        Args:
            payload: Opaque, non-empty string.

        Returns:
            The created Task (status ``pending``).

        Raises:
            InvalidPayloadError: If ``payload`` is missing, empty or not a string.
            TaskStoreError: If the record could not be written; nothing is queued.
            TaskEnqueueError: If the record was written but the push failed.
        """
        if not isinstance(payload, str) or payload == "":
            raise InvalidPayloadError("Payload is required")

        task = Task.new(payload, now=self._clock())

        try:
            await self._store.save(task)
        except _STORE_ERRORS as exc:
            logger.error("Failed to store task %s: %s", task.id, exc)
            raise TaskStoreError("Failed to store task") from exc

        try:
            await self._queue.push(task.id)
        except _STORE_ERRORS as exc:
            logger.error("Stored task %s but failed to enqueue it: %s", task.id, exc)
            raise TaskEnqueueError("Failed to enqueue task") from exc

        if self._metrics is not None:
            self._metrics.tasks_created.inc()

        logger.info("Enqueued task %s", task.id)
        return task

    async def get_task(self, task_id: str) -> Task:
        """Read the current state of a task.

        Raises:
            TaskNotFoundError: If no record exists (never created or expired).
            CorruptTaskError: If the record does not parse.
            TaskStoreError: If the store could not be read.
        """
        try:
            return await self._store.load(task_id)
        except _STORE_ERRORS as exc:
            logger.error("Failed to retrieve task %s: %s", task_id, exc)
            raise TaskStoreError("Failed to retrieve task") from exc
