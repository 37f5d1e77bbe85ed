"""Periodic live check against the transport's session registry."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..events import EventBus, LogLevel
from ..state.connection import ConnectionState
from ..transport.base import SessionHandle
from .monitor import PeriodicMonitor


class ReachabilityMonitor(PeriodicMonitor):
    """Detect a silently dropped session and reconnect it.

    A failed registry query is reported and otherwise ignored for that cycle.
    A missing address flips the state to disconnected and triggers exactly one
    reconnect attempt before the next tick.
    """

    name = "reachability"
    source = "connectionCheck"

    def __init__(
        self,
        *,
        handle: SessionHandle,
        state: ConnectionState,
        bus: EventBus,
        reconnect: Callable[[], Awaitable[object]],
        interval: float,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(interval=interval, logger=logger or logging.getLogger("atvremote.reachability"))
        self._handle = handle
        self._state = state
        self._bus = bus
        self._reconnect = reconnect
        self.reconnect_attempts = 0

    async def tick(self) -> None:
        if not self._state.believed_connected:
            return
        address = self._state.address
        try:
            devices = await self._handle.list_active_sessions()
        except Exception as exc:
            self._bus.log(LogLevel.WARN, f"Error checking device connection: {exc}", self.source)
            return

        if any(device.id == address for device in devices):
            return

        self._bus.log(
            LogLevel.WARN,
            f"Device {address} not found in adb devices list. Attempting reconnect...",
            self.source,
        )
        self._state.observe(False)
        self.reconnect_attempts += 1
        await self._reconnect()


__all__ = ["ReachabilityMonitor"]
