"""Tests for screen capture and its detached persistence."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from atvremote.const import SCREENCAP_COMMAND
from atvremote.events import Event
from atvremote.remote import Remote
from mocks import FakeSessionHandle

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.mark.asyncio
async def test_screencap_returns_raw_bytes(remote: Remote, handle: FakeSessionHandle) -> None:
    handle.outputs[SCREENCAP_COMMAND] = PNG

    assert await remote.screencap() == PNG
    assert remote.last_screencap_data == PNG
    assert handle.command_strings() == [SCREENCAP_COMMAND]


@pytest.mark.asyncio
async def test_transform_applied_only_with_dimensions(handle: FakeSessionHandle) -> None:
    calls: list[tuple[int | None, int | None]] = []

    def shrink(data: bytes, width: int | None, height: int | None) -> bytes:
        calls.append((width, height))
        return data[:8]

    remote = Remote({"ip": "192.168.1.50", "heartbeatInterval": 60000}, handle=handle, transform=shrink)
    handle.outputs[SCREENCAP_COMMAND] = PNG

    assert await remote.screencap() == PNG
    assert await remote.screencap(640, 480) == PNG[:8]
    assert await remote.thumbnail() == PNG[:8]
    assert calls == [(640, 480), (240, None)]
    remote.session.mark_lost()
    await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_async_transform_is_awaited(handle: FakeSessionHandle) -> None:
    async def encode(data: bytes, width: int | None, height: int | None) -> bytes:
        await asyncio.sleep(0)
        return b"jpeg"

    remote = Remote({"ip": "192.168.1.50", "heartbeatInterval": 60000}, handle=handle, transform=encode)
    handle.outputs[SCREENCAP_COMMAND] = PNG

    assert await remote.screencap(width=100) == b"jpeg"
    remote.session.mark_lost()
    await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_filepath_detaches_persistence(remote: Remote, handle: FakeSessionHandle, tmp_path: Path) -> None:
    handle.outputs[SCREENCAP_COMMAND] = PNG
    target = tmp_path / "shots" / "screen.png"

    assert await remote.screencap(filepath=target) is None
    assert len(remote.session.tracker) == 1

    await remote.disconnect()

    assert target.read_bytes() == PNG
    assert len(remote.session.tracker) == 0
    assert list(target.parent.iterdir()) == [target]


@pytest.mark.asyncio
async def test_detached_failure_is_reported_not_raised(handle: FakeSessionHandle, tmp_path: Path) -> None:
    def broken(data: bytes, width: int | None, height: int | None) -> bytes:
        raise RuntimeError("encoder crashed")

    remote = Remote({"ip": "192.168.1.50", "heartbeatInterval": 60000}, handle=handle, transform=broken)
    errors: list[Event] = []
    remote.on("error", errors.append)
    handle.outputs[SCREENCAP_COMMAND] = PNG

    assert await remote.thumbnail(filepath=tmp_path / "thumb.png") is None
    await remote.close()

    assert [event.source for event in errors] == ["screencap"]
    assert "encoder crashed" in errors[0].message
    assert not (tmp_path / "thumb.png").exists()
