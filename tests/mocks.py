"""Shared fakes for the remote tests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from atvremote.transport.base import DeviceEntry

TEST_IP = "192.168.1.50"
TEST_ADDRESS = f"{TEST_IP}:5555"


@dataclass
class FakeSessionHandle:
    """In-memory session handle that records every transport call.

    ``outputs`` maps a command prefix to either one reply or a list of replies
    consumed in order (the last one repeats). ``command_errors`` maps a prefix
    to the exception raised for matching commands.
    """

    devices: list[str] = field(default_factory=list)
    connect_error: BaseException | None = None
    disconnect_error: BaseException | None = None
    list_error: BaseException | None = None
    command_errors: dict[str, BaseException] = field(default_factory=dict)
    outputs: dict[str, bytes | list[bytes]] = field(default_factory=dict)
    command_delay: float = 0.0
    connect_delay: float = 0.0
    disconnect_delay: float = 0.0
    register_on_connect: bool = True

    connect_calls: list[str] = field(default_factory=list)
    disconnect_calls: list[str] = field(default_factory=list)
    commands: list[tuple[str, str]] = field(default_factory=list)
    list_calls: int = 0

    @property
    def total_calls(self) -> int:
        return len(self.connect_calls) + len(self.disconnect_calls) + len(self.commands) + self.list_calls

    def command_strings(self) -> list[str]:
        return [command for _, command in self.commands]

    async def connect(self, address: str) -> None:
        self.connect_calls.append(address)
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise self.connect_error
        if self.register_on_connect and address not in self.devices:
            self.devices.append(address)

    async def disconnect(self, address: str) -> None:
        self.disconnect_calls.append(address)
        if self.disconnect_delay:
            await asyncio.sleep(self.disconnect_delay)
        if self.disconnect_error is not None:
            raise self.disconnect_error
        if address in self.devices:
            self.devices.remove(address)

    async def run_command(self, address: str, command: str) -> bytes:
        self.commands.append((address, command))
        if self.command_delay:
            await asyncio.sleep(self.command_delay)
        for prefix, exc in self.command_errors.items():
            if command.startswith(prefix):
                raise exc
        for prefix, reply in self.outputs.items():
            if command.startswith(prefix):
                if isinstance(reply, list):
                    return reply.pop(0) if len(reply) > 1 else reply[0]
                return reply
        return b""

    async def list_active_sessions(self) -> list[DeviceEntry]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return [DeviceEntry(id=device) for device in self.devices]
