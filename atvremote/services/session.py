"""Connection lifecycle for one remote session.

The session manager owns the session handle, the connection state and the
three timer roles (heartbeat, reachability and inactivity). Every command
goes through :meth:`SessionManager.run_command`, which opens the session on
demand and re-arms the idle timer once the command succeeds.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from ..config.settings import RemoteConfig
from ..errors import (
    InitializationTimeout,
    RemoteError,
    TransportError,
    TransportErrorCategory,
    classify_transport_error,
    remediation_for,
    summary_for,
)
from ..events import EventBus, LogLevel
from ..state.connection import ConnectionState
from ..transport.base import SessionHandle
from .heartbeat import HeartbeatMonitor
from .inactivity import InactivityTimer
from .reachability import ReachabilityMonitor
from .tracker import BackgroundOperationTracker

logger = logging.getLogger("atvremote.session")


class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    UNKNOWN = "unknown"


class SessionManager:
    """Open, monitor, heal and tear down the session to one device."""

    def __init__(self, config: RemoteConfig, handle: SessionHandle, bus: EventBus) -> None:
        self.config = config
        self.handle = handle
        self.bus = bus
        self.address = config.address
        self.state = ConnectionState(self.address)
        bus.bind_connection_probe(self.is_connected)

        self.tracker = BackgroundOperationTracker(bus)
        self.reachability = ReachabilityMonitor(
            handle=handle,
            state=self.state,
            bus=bus,
            reconnect=self.ensure_connected,
            interval=config.connection_check_seconds,
        )
        self.heartbeat = HeartbeatMonitor(
            handle=handle,
            address=self.address,
            is_connected=self.is_connected,
            interval=config.heartbeat_seconds,
            enabled=config.maintain_connection,
            reachability=self.reachability,
        )
        self.inactivity = InactivityTimer(
            timeout=config.disconnect_timeout,
            enabled=config.auto_disconnect,
            is_connected=self.is_connected,
            on_idle=self.disconnect,
        )
        self._connect_lock = asyncio.Lock()

    def is_connected(self) -> bool:
        return self.state.believed_connected

    async def connect(self) -> bool:
        """Open the session; ``True`` when the device ends up connected."""
        async with self._connect_lock:
            # A concurrent caller may have connected while we waited.
            if self.state.believed_connected:
                return True
            self.state.begin_connect()
            try:
                await asyncio.wait_for(
                    self.handle.connect(self.address),
                    timeout=self.config.connect_timeout_seconds,
                )
            except asyncio.CancelledError:
                self.state.set_connected(False)
                raise
            except asyncio.TimeoutError:
                self.state.set_connected(False)
                self.report_transport_error(
                    TransportError(f"Timed out connecting to {self.address}"),
                    "connect",
                )
                return False
            except Exception as exc:
                if classify_transport_error(exc) is not TransportErrorCategory.ALREADY_CONNECTED:
                    self.state.set_connected(False)
                    self.report_transport_error(exc, "connect")
                    return False
                self.bus.log(LogLevel.DEBUG, f"Already connected to {self.address}", "connect")

            self.state.set_connected(True)
            self.heartbeat.start()
            self.bus.log(LogLevel.INFO, f"Connected to {self.address}", "connect")
            logger.info("Connected to %s", self.address)
            return True

    async def disconnect(self) -> bool:
        """Tear the session down once every detached operation has settled."""
        return await self._teardown(final=False)

    async def _teardown(self, *, final: bool) -> bool:
        self.inactivity.cancel()
        self.heartbeat.stop()
        await self.tracker.drain()

        async with self._connect_lock:
            # A connect that was in flight has settled and may have restarted the timers.
            self.inactivity.cancel()
            self.heartbeat.stop()
            was_connected = self.state.believed_connected
            if final and not was_connected:
                return True
            if was_connected:
                self.state.begin_disconnect()
            released = True
            try:
                await self.handle.disconnect(self.address)
            except Exception as exc:
                if classify_transport_error(exc) is not TransportErrorCategory.ALREADY_DISCONNECTED:
                    self.report_transport_error(exc, "disconnect")
                    if not final:
                        self.state.set_connected(was_connected)
                        if was_connected:
                            self.heartbeat.start()
                        return False
                    released = False
                else:
                    self.bus.log(LogLevel.DEBUG, f"{self.address} was already disconnected", "disconnect")

            # Final teardown forgets the session even when the transport refused.
            self.state.set_connected(False)
            if released:
                self.bus.log(LogLevel.INFO, f"Disconnected from {self.address}", "disconnect")
                logger.info("Disconnected from %s", self.address)
            return released

    async def ensure_connected(self) -> bool:
        if not self.config.auto_connect or self.state.believed_connected:
            return True
        return await self.connect()

    async def get_status(self, live_check: bool = False) -> ConnectionStatus:
        if not live_check:
            return ConnectionStatus.CONNECTED if self.state.believed_connected else ConnectionStatus.DISCONNECTED
        try:
            devices = await self.handle.list_active_sessions()
        except Exception as exc:
            # An unreachable registry counts as disconnected.
            self.state.set_connected(False)
            self.bus.log(LogLevel.WARN, f"Unable to list ADB devices: {exc}", "getConnectionStatus")
            return ConnectionStatus.UNKNOWN
        present = self.state.observe(any(device.id == self.address for device in devices))
        return ConnectionStatus.CONNECTED if present else ConnectionStatus.DISCONNECTED

    async def initialize(self) -> None:
        """Perform the initial auto-connect, bounded by the init timeout.

        The deadline does not cancel the connect attempt; a late outcome is
        still recorded through the background tracker.
        """
        if not self.config.auto_connect:
            return
        task = self.tracker.track(self._initial_connect(), origin="initialize")
        done, _ = await asyncio.wait({task}, timeout=self.config.init_timeout_seconds)
        if not done:
            raise InitializationTimeout(
                f"Initialization of {self.address} timed out after {self.config.init_timeout} ms"
            )
        if not task.result():
            raise TransportError(f"Unable to connect to {self.address}")

    async def _initial_connect(self) -> bool:
        if await self.get_status(live_check=True) is ConnectionStatus.CONNECTED:
            self.heartbeat.start()
            self.bus.log(LogLevel.INFO, f"Already connected to {self.address}", "initialize")
            return True
        return await self.connect()

    async def run_command(self, command: str, *, source: str, report_errors: bool = True) -> bytes:
        """Run a shell command on the device and return its raw output."""
        if not await self.ensure_connected():
            raise TransportError(f"Unable to connect to {self.address}")
        try:
            output = await self.handle.run_command(self.address, command)
        except Exception as exc:
            if report_errors:
                self.report_transport_error(exc, source)
            if isinstance(exc, RemoteError):
                raise
            raise TransportError(str(exc) or type(exc).__name__, category=classify_transport_error(exc)) from exc
        self.inactivity.reset()
        return output

    def report_transport_error(self, exc: BaseException, source: str) -> None:
        category = classify_transport_error(exc)
        remediation = remediation_for(category)
        summary = summary_for(category)
        data: dict[str, Any] = {"category": category.value, "address": self.address}
        if remediation:
            data["remediation"] = list(remediation)
        self.bus.error(exc, source, f"{summary}: {exc}" if summary else None, data=data)
        for line in remediation:
            self.bus.log(LogLevel.INFO, line, source)
        logger.warning("%s failed for %s (%s): %s", source, self.address, category.value, exc)

    def mark_lost(self) -> None:
        """Forget the session without talking to the transport."""
        self.inactivity.cancel()
        self.heartbeat.stop()
        self.state.set_connected(False)

    async def close(self) -> None:
        """Final teardown: timers stopped and the session forgotten, whatever the transport says."""
        await self._teardown(final=True)


__all__ = ["ConnectionStatus", "SessionManager"]
