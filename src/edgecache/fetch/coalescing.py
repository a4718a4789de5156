"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: fetch/coalescing.py.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class RequestCoalescer(Generic[T]):
    """
    Deduplicate identical in-flight computations.

    The first caller for a key starts the computation; callers arriving
    while it is still running await the same task. The task stays
    registered until it finishes, even if the caller that started it is
    cancelled.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Future[T]] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> tuple[T, bool]:
        """Return `(result, started)`; `started` is True for the caller that ran `factory`."""
        existing = self._tasks.get(key)
        if existing is not None:
            return await asyncio.shield(existing), False

        task = asyncio.ensure_future(factory())
        self._tasks[key] = task
        task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task), True

    def _forget(self, key: str, task: asyncio.Future[T]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if not task.cancelled():
            # Waiters may all be gone; mark the outcome as retrieved.
            task.exception()
