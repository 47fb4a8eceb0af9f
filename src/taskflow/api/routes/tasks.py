"""Task submission and status routes.

``POST /tasks`` persists and enqueues a task; ``GET /tasks/{task_id}``
returns whatever state the consumer last wrote. There is no
wait-for-completion endpoint: clients poll.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from taskflow.api.deps import get_task_service
from taskflow.core.tasks.errors import (
    CorruptTaskError,
    InvalidPayloadError,
    TaskEnqueueError,
    TaskNotFoundError,
    TaskStoreError,
)
from taskflow.core.tasks.models import Task, TaskStatus
from taskflow.core.tasks.service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


# -- Schemas ------------------------------------------------------------------


class TaskCreate(BaseModel):
    """Schema for submitting a task."""

    payload: str = Field(..., min_length=1)


class TaskCreated(BaseModel):
    """Schema returned once a task is stored and queued."""

    task_id: str
    status: TaskStatus


class TaskStatusResponse(BaseModel):
    """Schema wrapping a stored task."""

    task: Task


# -- Routes -------------------------------------------------------------------


@router.post("", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    service: TaskService = Depends(get_task_service),
) -> TaskCreated:
    """Create a pending task and push its id onto the queue."""
    try:
        task = await service.create_task(body.payload)
    except InvalidPayloadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (TaskStoreError, TaskEnqueueError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return TaskCreated(task_id=task.id, status=task.status)


@router.get("/{task_id}", response_model=TaskStatusResponse, response_model_exclude_none=True)
async def get_task(
    task_id: str,
    service: TaskService = Depends(get_task_service),
) -> TaskStatusResponse:
    """Return the current state of a task."""
    try:
        task = await service.get_task(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Task not found") from exc
    except CorruptTaskError as exc:
        logger.error("Failed to parse task %s: %s", task_id, exc)
        raise HTTPException(status_code=500, detail="Failed to parse task") from exc
    except TaskStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return TaskStatusResponse(task=task)
