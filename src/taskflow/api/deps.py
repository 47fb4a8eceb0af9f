"""Shared FastAPI dependencies.

Components are built once per process and stored on ``app.state``;
routes resolve them here so tests can bind test doubles instead.
"""

from __future__ import annotations

from fastapi import Request

from taskflow.core.tasks.service import TaskService


def get_task_service(request: Request) -> TaskService:
    """Return the TaskService bound to the running app."""
    service: TaskService = request.app.state.task_service
    return service
