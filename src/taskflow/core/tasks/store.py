"""Task record store backed by Redis string keys.

Redis keys used:
    ``task:{task_id}``  : JSON-serialized Task, 24-hour TTL refreshed on every write
"""

from __future__ import annotations

import logging
from typing import Any

from taskflow.core.tasks.errors import TaskNotFoundError
from taskflow.core.tasks.models import Task

logger = logging.getLogger(__name__)

TASK_KEY_PREFIX = "task"
TASK_TTL_SECONDS = 24 * 60 * 60


def task_key(task_id: str) -> str:
    return f"{TASK_KEY_PREFIX}:{task_id}"


class TaskStore:
    """Key-addressed, expiring repository of task records.

    Args:
        redis: An async Redis client (``redis.asyncio.Redis``).
        ttl_seconds: Expiry applied on every write.
    """

    def __init__(self, redis: Any, ttl_seconds: int = TASK_TTL_SECONDS) -> None:
        self._redis = redis
        self._ttl_seconds = ttl_seconds

    async def save(self, task: Task) -> None:
        """Write ``task`` and refresh its expiry.

        Redis errors propagate to the caller.
        """
        await self._redis.set(task_key(task.id), task.to_json(), ex=self._ttl_seconds)
        logger.debug("Stored task %s (status=%s)", task.id, task.status)

    async def load(self, task_id: str) -> Task:
        """Read the task stored under ``task_id``.

        Raises:
            TaskNotFoundError: If the key does not exist or has expired.
            CorruptTaskError: If the stored value does not parse.
        """
        raw = await self._redis.get(task_key(task_id))
        if raw is None:
            raise TaskNotFoundError(task_id)
        return Task.from_json(task_id, raw)
