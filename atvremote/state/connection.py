"""Connection state for one remote session."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import msgspec
from transitions import Machine

logger = logging.getLogger("atvremote.state")


class ConnectionSnapshot(msgspec.Struct, frozen=True):
    address: str
    phase: str
    believed_connected: bool
    connects: int
    disconnects: int
    live_checks: int
    last_observation_unix: float | None


class ConnectionState:
    """Single source of truth for whether the session is believed connected.

    ``believed_connected`` is derived from the FSM phase. Successful and failed
    transport calls move the phase, and a live registry observation overwrites
    it unconditionally.
    """

    if TYPE_CHECKING:
        # FSM generated methods and attributes for static analysis
        phase: str
        begin_connect: Callable[[], bool]
        begin_disconnect: Callable[[], bool]
        mark_connected: Callable[[], bool]
        mark_disconnected: Callable[[], bool]

    STATE_DISCONNECTED = "disconnected"
    STATE_CONNECTING = "connecting"
    STATE_CONNECTED = "connected"
    STATE_DISCONNECTING = "disconnecting"

    # Teardown is not complete until the transport confirms it.
    _BELIEVED_CONNECTED = frozenset({STATE_CONNECTED, STATE_DISCONNECTING})

    def __init__(self, address: str) -> None:
        self.address = address
        self.connects = 0
        self.disconnects = 0
        self.live_checks = 0
        self.last_observation_unix: float | None = None

        self.state_machine = Machine(
            model=self,
            states=[
                self.STATE_DISCONNECTED,
                self.STATE_CONNECTING,
                {"name": self.STATE_CONNECTED, "on_enter": "_on_fsm_connected"},
                self.STATE_DISCONNECTING,
            ],
            initial=self.STATE_DISCONNECTED,
            ignore_invalid_triggers=True,
            model_attribute="phase",
        )
        self.state_machine.add_transition(
            trigger="begin_connect", source=self.STATE_DISCONNECTED, dest=self.STATE_CONNECTING
        )
        self.state_machine.add_transition(
            trigger="begin_disconnect", source=self.STATE_CONNECTED, dest=self.STATE_DISCONNECTING
        )
        self.state_machine.add_transition(trigger="mark_connected", source="*", dest=self.STATE_CONNECTED)
        self.state_machine.add_transition(
            trigger="mark_disconnected",
            source="*",
            dest=self.STATE_DISCONNECTED,
            after="_on_fsm_disconnected",
        )

    def _on_fsm_connected(self) -> None:
        self.connects += 1
        logger.debug("%s marked connected", self.address)

    def _on_fsm_disconnected(self) -> None:
        self.disconnects += 1
        logger.debug("%s marked disconnected", self.address)

    @property
    def believed_connected(self) -> bool:
        return self.phase in self._BELIEVED_CONNECTED

    def set_connected(self, connected: bool) -> None:
        if connected:
            if self.phase != self.STATE_CONNECTED:
                self.mark_connected()
        elif self.phase != self.STATE_DISCONNECTED:
            self.mark_disconnected()

    def observe(self, present: bool) -> bool:
        """Record an authoritative registry observation and return it."""
        self.live_checks += 1
        self.last_observation_unix = time.time()
        self.set_connected(present)
        return present

    def snapshot(self) -> ConnectionSnapshot:
        return ConnectionSnapshot(
            address=self.address,
            phase=self.phase,
            believed_connected=self.believed_connected,
            connects=self.connects,
            disconnects=self.disconnects,
            live_checks=self.live_checks,
            last_observation_unix=self.last_observation_unix,
        )


__all__ = ["ConnectionSnapshot", "ConnectionState"]
