"""Pluggable processing step invoked by the consumer loop.

``TaskProcessor`` is the abstract base class for the work done on a
task once it is ``processing``. Returning normally marks the task
``completed``; raising marks it ``failed``. The consumer owns every
status transition, so a processor never touches the store.

Example subclass::

    class ThumbnailProcessor(TaskProcessor):
        async def process(self, task: Task) -> None:
            image = await fetch(task.payload)
            if image is None:
                raise TaskProcessingError("image not found")
            await render_thumbnail(image)
"""

from __future__ import annotations

import abc
import asyncio
import logging
from collections.abc import Awaitable, Callable

from taskflow.core.tasks.errors import TaskProcessingError
from taskflow.core.tasks.models import Task

logger = logging.getLogger(__name__)

BASE_DURATION_SECONDS = 2
DURATION_MODULUS = 5
FAILURE_MODULUS = 10


class TaskProcessor(abc.ABC):
    """Abstract base class for task processing logic."""

    @abc.abstractmethod
    async def process(self, task: Task) -> None:
        """Do the work for ``task``.

        Raises:
            TaskProcessingError: To record a ``failed`` outcome. Any
                other exception is treated the same way by the consumer.
        """


def payload_length(payload: str) -> int:
    """Length of ``payload`` in UTF-8 bytes."""
    return len(payload.encode("utf-8"))


def processing_duration(payload: str) -> int:
    """Simulated duration in seconds: ``2 + (L mod 5)``."""
    return BASE_DURATION_SECONDS + payload_length(payload) % DURATION_MODULUS


def is_simulated_failure(payload: str) -> bool:
    """A payload whose length is a multiple of 10 fails."""
    return payload_length(payload) % FAILURE_MODULUS == 0


class PayloadLengthProcessor(TaskProcessor):
    """Deterministic placeholder work driven purely by payload length.

    Sleeps for :func:`processing_duration` seconds, then fails if
    :func:`is_simulated_failure` holds.

    Args:
        sleep: Awaitable sleep function; tests pass a recorder instead of
            waiting in real time.
    """

    def __init__(self, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        self._sleep = sleep

    async def process(self, task: Task) -> None:
        duration = processing_duration(task.payload)
        logger.info("Processing task %s for %ds", task.id, duration)
        await self._sleep(duration)

        if is_simulated_failure(task.payload):
            raise TaskProcessingError("simulated processing failure")
