"""Session handle boundary consumed by the remote."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import msgspec


class DeviceEntry(msgspec.Struct, frozen=True):
    """One row of the transport's active-session registry."""

    id: str
    state: str = "device"


@runtime_checkable
class SessionHandle(Protocol):
    """Opaque connect/disconnect/run-command capability over an address.

    Implementations raise :class:`~atvremote.errors.TransportError` (or any
    exception whose message the classifier understands) on failure.
    """

    async def connect(self, address: str) -> None: ...

    async def disconnect(self, address: str) -> None: ...

    async def run_command(self, address: str, command: str) -> bytes: ...

    async def list_active_sessions(self) -> list[DeviceEntry]: ...


__all__ = ["DeviceEntry", "SessionHandle"]
