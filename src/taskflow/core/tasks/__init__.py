"""Task lifecycle and queueing.

Provides the Task model, the Redis-backed record store and queue, the
producer-side ``TaskService`` and the fixed-interval ``TaskConsumer``.
"""

from taskflow.core.tasks.consumer import TaskConsumer
from taskflow.core.tasks.models import Task, TaskStatus
from taskflow.core.tasks.processing import PayloadLengthProcessor, TaskProcessor
from taskflow.core.tasks.queue import TaskQueue
from taskflow.core.tasks.service import TaskService
from taskflow.core.tasks.store import TaskStore

__all__ = [
    "PayloadLengthProcessor",
    "Task",
    "TaskConsumer",
    "TaskProcessor",
    "TaskQueue",
    "TaskService",
    "TaskStatus",
    "TaskStore",
]
