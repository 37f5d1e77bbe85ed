"""Keep-alive pulses for an open ADB session."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..const import HEARTBEAT_COMMAND
from ..transport.base import SessionHandle
from .monitor import PeriodicMonitor
from .reachability import ReachabilityMonitor


class HeartbeatMonitor(PeriodicMonitor):
    """Issue a no-op shell command on a fixed interval while connected.

    Failures are dropped on purpose: one missed beat is not actionable and
    loss of the session is detected by the companion reachability monitor,
    which starts and stops together with this one.
    """

    name = "heartbeat"

    def __init__(
        self,
        *,
        handle: SessionHandle,
        address: str,
        is_connected: Callable[[], bool],
        interval: float,
        enabled: bool = True,
        reachability: ReachabilityMonitor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(interval=interval, logger=logger or logging.getLogger("atvremote.heartbeat"))
        self._handle = handle
        self._address = address
        self._is_connected = is_connected
        self.enabled = enabled
        self.reachability = reachability
        self.beats = 0
        self.missed = 0

    def start(self) -> None:
        if not self.enabled:
            return
        super().start()
        if self.reachability is not None:
            self.reachability.start()

    def stop(self) -> None:
        super().stop()
        if self.reachability is not None:
            self.reachability.stop()

    async def tick(self) -> None:
        if not self._is_connected():
            return
        try:
            await self._handle.run_command(self._address, HEARTBEAT_COMMAND)
        except Exception as exc:
            self.missed += 1
            self._logger.debug("Heartbeat to %s failed: %s", self._address, exc)
        else:
            self.beats += 1


__all__ = ["HeartbeatMonitor"]
