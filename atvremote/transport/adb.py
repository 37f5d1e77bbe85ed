"""Asyncio client for the local ADB host server.

Each request opens a fresh TCP connection to the server (``adb start-server``
listens on 127.0.0.1:5037 by default), sends one length-prefixed service
request and reads the ``OKAY``/``FAIL`` status that follows.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Final

from ..errors import PrematureEndOfStream, TransportError, TransportErrorCategory
from .base import DeviceEntry

logger = logging.getLogger("atvremote.transport.adb")

STATUS_OKAY: Final[bytes] = b"OKAY"
STATUS_FAIL: Final[bytes] = b"FAIL"
_LENGTH_DIGITS: Final[int] = 4


def encode_request(service: str) -> bytes:
    """Frame *service* as ``<4 hex digits length><payload>``."""
    payload = service.encode("utf-8")
    if len(payload) > 0xFFFF:
        raise ValueError(f"ADB request too long ({len(payload)} bytes)")
    return f"{len(payload):04x}".encode("ascii") + payload


def parse_device_list(payload: str) -> list[DeviceEntry]:
    entries: list[DeviceEntry] = []
    for line in payload.splitlines():
        line = line.strip()
        if not line:
            continue
        serial, _, state = line.partition("\t")
        entries.append(DeviceEntry(id=serial.strip(), state=state.strip() or "unknown"))
    return entries


class _AdbConnection:
    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.reader = reader
        self.writer = writer

    async def _read_exactly(self, count: int) -> bytes:
        try:
            return await self.reader.readexactly(count)
        except asyncio.IncompleteReadError as exc:
            raise PrematureEndOfStream(count - len(exc.partial)) from exc

    async def read_length_prefixed(self) -> str:
        raw_length = await self._read_exactly(_LENGTH_DIGITS)
        try:
            length = int(raw_length, 16)
        except ValueError as exc:
            raise TransportError(f"Malformed ADB length header {raw_length!r}") from exc
        return (await self._read_exactly(length)).decode("utf-8", errors="replace")

    async def request(self, service: str) -> None:
        self.writer.write(encode_request(service))
        await self.writer.drain()
        status = await self._read_exactly(_LENGTH_DIGITS)
        if status == STATUS_OKAY:
            return
        if status == STATUS_FAIL:
            raise TransportError(await self.read_length_prefixed())
        raise TransportError(f"Unexpected ADB status {status!r} for {service!r}")

    async def read_all(self) -> bytes:
        return await self.reader.read()

    async def close(self) -> None:
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError:
            logger.debug("Ignoring error while closing ADB server socket.")


class AdbServerClient:
    """Session handle speaking the ADB host protocol over asyncio streams."""

    def __init__(self, host: str = "127.0.0.1", port: int = 5037, *, timeout: float = 10.0) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    async def _open(self) -> _AdbConnection:
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            raise TransportError(f"Timed out reaching ADB server at {self.host}:{self.port}") from exc
        except OSError as exc:
            raise TransportError(f"Cannot reach ADB server at {self.host}:{self.port}: {exc}") from exc
        return _AdbConnection(reader, writer)

    async def _query(self, service: str) -> str:
        conn = await self._open()
        try:
            await asyncio.wait_for(conn.request(service), timeout=self.timeout)
            return await asyncio.wait_for(conn.read_length_prefixed(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(f"ADB request {service!r} timed out") from exc
        finally:
            await conn.close()

    async def connect(self, address: str) -> None:
        reply = (await self._query(f"host:connect:{address}")).strip()
        lowered = reply.lower()
        if lowered.startswith("already connected"):
            raise TransportError(reply, category=TransportErrorCategory.ALREADY_CONNECTED)
        if lowered.startswith("connected to"):
            logger.debug("ADB server: %s", reply)
            return
        raise TransportError(reply or f"failed to connect to {address}")

    async def disconnect(self, address: str) -> None:
        try:
            reply = (await self._query(f"host:disconnect:{address}")).strip()
        except TransportError as exc:
            if "no such device" in str(exc).lower():
                raise TransportError(
                    f"{address} already disconnected", category=TransportErrorCategory.ALREADY_DISCONNECTED
                ) from exc
            raise
        lowered = reply.lower()
        if "no such device" in lowered:
            raise TransportError(
                f"{address} already disconnected", category=TransportErrorCategory.ALREADY_DISCONNECTED
            )
        if lowered.startswith("error"):
            raise TransportError(reply)
        logger.debug("ADB server: %s", reply)

    async def list_active_sessions(self) -> list[DeviceEntry]:
        return parse_device_list(await self._query("host:devices"))

    async def run_command(self, address: str, command: str) -> bytes:
        conn = await self._open()
        try:
            await asyncio.wait_for(conn.request(f"host:transport:{address}"), timeout=self.timeout)
            await asyncio.wait_for(conn.request(f"shell:{command}"), timeout=self.timeout)
            # Output length is unbounded (screencap); no deadline on the body.
            return await conn.read_all()
        except asyncio.TimeoutError as exc:
            raise TransportError(f"ADB shell {command!r} on {address} timed out") from exc
        finally:
            await conn.close()


__all__ = ["AdbServerClient", "encode_request", "parse_device_list"]
