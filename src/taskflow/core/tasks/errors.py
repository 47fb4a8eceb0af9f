"""Exceptions raised by the task pipeline.

The API layer maps these onto HTTP status codes; the consumer loop logs
and counts them without letting any escape a tick.
"""

from __future__ import annotations


class TaskError(Exception):
    """Base class for task pipeline errors."""


class InvalidPayloadError(TaskError, ValueError):
    """The creation request carried no usable payload."""


class TaskNotFoundError(TaskError):
    """No record exists for the task id (never created, or expired)."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class CorruptTaskError(TaskError):
    """A stored record could not be deserialized."""

    def __init__(self, task_id: str, reason: str = "") -> None:
        message = f"Task {task_id} record is corrupt"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.task_id = task_id


class InvalidTransitionError(TaskError):
    """A status change would move a task backward or out of a terminal state."""


class TaskStoreError(TaskError):
    """The backing store rejected a read or write."""


class TaskEnqueueError(TaskError):
    """The task record was written but its id could not be queued."""


class TaskProcessingError(TaskError):
    """The processing step reported a failed outcome."""
