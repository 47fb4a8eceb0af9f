"""Task entity and its status lifecycle.

Status lifecycle::

    PENDING → PROCESSING → COMPLETED
                         ↘ FAILED

Both COMPLETED and FAILED are terminal. There is no retry state: a task
that fails stays failed.
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from pydantic import AwareDatetime, BaseModel, Field, ValidationError

from taskflow.core.tasks.errors import CorruptTaskError, InvalidTransitionError


class TaskStatus(enum.StrEnum):
    """Lifecycle states for a task."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED})

_ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.PROCESSING}),
    TaskStatus.PROCESSING: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset(),
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Task(BaseModel):
    """A unit of work carried from the producer to the consumer.

    Attributes:
        id: Opaque unique identifier assigned at creation.
        payload: Caller-supplied string, never interpreted.
        status: Current lifecycle status.
        created_at: When the producer created the task.
        updated_at: When the status last changed; unset while pending.
    """

    id: str
    payload: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: AwareDatetime = Field(default_factory=utcnow)
    updated_at: AwareDatetime | None = None

    @classmethod
    def new(cls, payload: str, now: datetime | None = None) -> Task:
        """Build a fresh pending task with a new UUID4 id."""
        return cls(
            id=str(uuid.uuid4()),
            payload=payload,
            status=TaskStatus.PENDING,
            created_at=now or utcnow(),
        )

    def can_transition(self, status: TaskStatus) -> bool:
        return status in _ALLOWED_TRANSITIONS[self.status]

    def transition(self, status: TaskStatus, now: datetime | None = None) -> Task:
        """Advance the task to ``status`` and stamp ``updated_at``.

        The timestamp is clamped so it never moves behind the previous
        ``updated_at`` (or ``created_at`` on the first transition).

        Raises:
            InvalidTransitionError: If the move is not forward along the
                lifecycle.
        """
        if not self.can_transition(status):
            raise InvalidTransitionError(
                f"Task {self.id} cannot move from {self.status} to {status}"
            )
        floor = self.updated_at or self.created_at
        stamp = max(now or utcnow(), floor)
        self.status = status
        self.updated_at = stamp
        return self

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def from_json(cls, task_id: str, raw: str | bytes) -> Task:
        """Parse a stored record.

        Raises:
            CorruptTaskError: If ``raw`` is not a valid serialized task.
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as exc:
            raise CorruptTaskError(task_id, str(exc.errors()[0]["msg"])) from exc
