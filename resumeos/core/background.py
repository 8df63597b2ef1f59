"""Detached tasks that must not block or fail the request that started them."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)

_tasks: set[asyncio.Task[Any]] = set()


def _on_done(task: asyncio.Task[Any]) -> None:
    _tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("background_task_failed name=%s: %s", task.get_name(), exc)


def spawn(coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
    task = asyncio.create_task(coro, name=name)
    _tasks.add(task)
    task.add_done_callback(_on_done)
    return task


def pending() -> int:
    return len(_tasks)


def is_running(name: str) -> bool:
    return any(task.get_name() == name and not task.done() for task in _tasks)


async def drain(timeout: float = 10.0) -> None:
    if not _tasks:
        return
    tasks = list(_tasks)
    _, still_running = await asyncio.wait(tasks, timeout=timeout)
    for task in still_running:
        task.cancel()
    if still_running:
        logger.info("background_tasks_cancelled count=%s", len(still_running))
        await asyncio.gather(*still_running, return_exceptions=True)
