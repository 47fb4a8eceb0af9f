"""Pending-task queue backed by a Redis list.

The producer pushes ids at the head (``LPUSH``) and the consumer pops
from the tail (``RPOP``), which gives FIFO order between a single
producer and a single consumer. Each call is atomic on its own; nothing
spans push → pop → process, and nothing deduplicates repeated pushes.

Redis keys used:
    ``task:queue``  : List of pending task ids
"""

from __future__ import annotations

from typing import Any

QUEUE_KEY = "task:queue"


class TaskQueue:
    """Thin wrapper over the list operations on ``task:queue``.

    Args:
        redis: An async Redis client (``redis.asyncio.Redis``).
        key: List key to use.
    """

    def __init__(self, redis: Any, key: str = QUEUE_KEY) -> None:
        self._redis = redis
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def push(self, task_id: str) -> int:
        """Push ``task_id`` onto the head of the list; returns the new length."""
        length: int = await self._redis.lpush(self._key, task_id)
        return length

    async def pop(self) -> str | None:
        """Pop one id from the tail, or ``None`` if the queue is empty."""
        task_id: str | None = await self._redis.rpop(self._key)
        return task_id

    async def length(self) -> int:
        length: int = await self._redis.llen(self._key)
        return length
