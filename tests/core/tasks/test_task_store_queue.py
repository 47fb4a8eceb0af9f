"""Tests for the Redis-backed task store and queue."""

from __future__ import annotations

import json
from typing import Any

import pytest

from taskflow.core.tasks.errors import CorruptTaskError, TaskNotFoundError
from taskflow.core.tasks.models import Task, TaskStatus
from taskflow.core.tasks.queue import QUEUE_KEY, TaskQueue
from taskflow.core.tasks.store import TASK_TTL_SECONDS, TaskStore, task_key


class TestTaskStore:
    @pytest.mark.asyncio
    async def test_save_writes_under_task_key_with_ttl(self, fake_redis: Any) -> None:
        store = TaskStore(fake_redis)
        task = Task.new("hello")

        await store.save(task)

        assert task_key(task.id) == f"task:{task.id}"
        assert json.loads(fake_redis.raw(f"task:{task.id}"))["payload"] == "hello"
        assert await fake_redis.ttl(f"task:{task.id}") == TASK_TTL_SECONDS == 86400

    @pytest.mark.asyncio
    async def test_load_returns_saved_task(self, fake_redis: Any) -> None:
        store = TaskStore(fake_redis)
        task = Task.new("hello")
        await store.save(task)

        loaded = await store.load(task.id)

        assert loaded == task

    @pytest.mark.asyncio
    async def test_load_missing_raises_not_found(self, fake_redis: Any) -> None:
        with pytest.raises(TaskNotFoundError):
            await TaskStore(fake_redis).load("unknown-id")

    @pytest.mark.asyncio
    async def test_load_corrupt_raises(self, fake_redis: Any) -> None:
        fake_redis.put_raw("task:bad", "{not json")
        with pytest.raises(CorruptTaskError):
            await TaskStore(fake_redis).load("bad")

    @pytest.mark.asyncio
    async def test_record_expires_after_ttl(self, fake_redis: Any) -> None:
        store = TaskStore(fake_redis)
        task = Task.new("hello")
        await store.save(task)

        fake_redis.advance(TASK_TTL_SECONDS)

        with pytest.raises(TaskNotFoundError):
            await store.load(task.id)

    @pytest.mark.asyncio
    async def test_every_write_refreshes_expiry(self, fake_redis: Any) -> None:
        store = TaskStore(fake_redis)
        task = Task.new("hello")
        await store.save(task)

        fake_redis.advance(TASK_TTL_SECONDS - 10)
        task.transition(TaskStatus.PROCESSING)
        await store.save(task)
        fake_redis.advance(60)

        loaded = await store.load(task.id)
        assert loaded.status == TaskStatus.PROCESSING


class TestTaskQueue:
    @pytest.mark.asyncio
    async def test_fifo_between_push_and_pop(self, fake_redis: Any) -> None:
        queue = TaskQueue(fake_redis)
        for task_id in ("a", "b", "c"):
            await queue.push(task_id)

        assert fake_redis.list_items(QUEUE_KEY) == ["c", "b", "a"]
        assert [await queue.pop() for _ in range(3)] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_pop_empty_returns_none(self, fake_redis: Any) -> None:
        assert await TaskQueue(fake_redis).pop() is None

    @pytest.mark.asyncio
    async def test_length_and_no_deduplication(self, fake_redis: Any) -> None:
        queue = TaskQueue(fake_redis)
        await queue.push("a")
        await queue.push("a")

        assert await queue.length() == 2
        assert queue.key == "task:queue"
