"""Idle timeout that tears the session down when no commands arrive."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .monitor import cancel_task

logger = logging.getLogger("atvremote.inactivity")


class InactivityTimer:
    """One-shot timer restarted by every successful command."""

    def __init__(
        self,
        *,
        timeout: float,
        enabled: bool,
        is_connected: Callable[[], bool],
        on_idle: Callable[[], Awaitable[object]],
    ) -> None:
        self.timeout = timeout
        self.enabled = enabled
        self._is_connected = is_connected
        self._on_idle = on_idle
        self._task: asyncio.Task[None] | None = None
        self.fired = 0

    @property
    def armed(self) -> bool:
        return self._task is not None and not self._task.done()

    def reset(self) -> None:
        if not self.enabled:
            return
        cancel_task(self._task)
        self._task = asyncio.get_running_loop().create_task(self._expire(), name="atvremote-inactivity")

    def cancel(self) -> None:
        cancel_task(self._task)
        self._task = None

    async def _expire(self) -> None:
        await asyncio.sleep(self.timeout)
        if not self._is_connected():
            return
        self.fired += 1
        logger.info("No commands for %.1fs, disconnecting", self.timeout)
        await self._on_idle()


__all__ = ["InactivityTimer"]
