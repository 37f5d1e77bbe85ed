"""Registry of detached operations that teardown must wait for."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ..events import EventBus

logger = logging.getLogger("atvremote.tracker")


class BackgroundOperationTracker:
    """Track tasks the caller did not await.

    Each task joins the set when launched and leaves it from its own done
    callback. Failures are published on the bus tagged with the command that
    launched them and are never re-raised.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def pending(self) -> frozenset[asyncio.Task[Any]]:
        return frozenset(self._tasks)

    def track(
        self,
        coroutine: Coroutine[Any, Any, Any],
        *,
        origin: str,
        name: str | None = None,
    ) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coroutine, name=name or f"atvremote-{origin}")
        self._tasks.add(task)
        task.add_done_callback(lambda done: self._settled(done, origin))
        return task

    def _settled(self, task: asyncio.Task[Any], origin: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("Background operation %s cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            self._bus.error(exc, origin, f"Background operation failed in {origin}: {exc}")

    async def drain(self) -> None:
        """Wait until every tracked operation has settled.

        Operations registered while draining are waited for as well.
        """
        while self._tasks:
            pending = set(self._tasks)
            logger.debug("Draining %d background operation(s)", len(pending))
            await asyncio.wait(pending)


__all__ = ["BackgroundOperationTracker"]
