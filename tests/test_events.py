"""Tests for the per-remote event bus."""

from __future__ import annotations

import asyncio
import logging

import pytest

from atvremote.errors import PrematureEndOfStream, TransportError
from atvremote.events import Event, EventBus, EventKind, LogLevel


def test_quiet_suppresses_debug_and_info_only() -> None:
    bus = EventBus(quiet=True)
    seen: list[Event] = []
    bus.on("log", seen.append)

    assert bus.log("debug", "noise") is None
    assert bus.log(LogLevel.INFO, "chatter") is None
    bus.log("warn", "careful")
    bus.log("error", "broken")

    assert [event.level for event in seen] == [LogLevel.WARN, LogLevel.ERROR]


def test_quiet_never_suppresses_error_events() -> None:
    bus = EventBus(quiet=True)
    seen: list[Event] = []
    bus.on(EventKind.ERROR, seen.append)

    bus.error(TransportError("device unauthorized"), "connect")

    assert len(seen) == 1
    assert seen[0].kind is EventKind.ERROR
    assert seen[0].source == "connect"
    assert seen[0].message == "device unauthorized"


def test_forced_log_bypasses_quiet() -> None:
    bus = EventBus(quiet=True)
    seen: list[Event] = []
    bus.on("log", seen.append)

    bus.log("info", "settings applied", "handleSettings", force=True)

    assert [event.message for event in seen] == ["settings applied"]


def test_event_fields_are_immutable() -> None:
    bus = EventBus(quiet=False)
    event = bus.log("info", "hello", "tests", data={"k": 1})

    assert event is not None
    assert event.timestamp.endswith("Z")
    assert event.data == {"k": 1}
    with pytest.raises(AttributeError):
        event.message = "changed"  # type: ignore[misc]


def test_once_and_off() -> None:
    bus = EventBus(quiet=False)
    once_seen: list[str] = []
    always_seen: list[str] = []

    def always(event: Event) -> None:
        always_seen.append(event.message)

    bus.once("log", lambda event: once_seen.append(event.message))
    bus.on("log", always)
    bus.log("info", "first")
    bus.log("info", "second")
    bus.off("log", always)
    bus.log("info", "third")

    assert once_seen == ["first"]
    assert always_seen == ["first", "second"]
    assert bus.listener_count("log") == 0


def test_raising_listener_does_not_block_others(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus(quiet=False)
    seen: list[str] = []

    def broken(event: Event) -> None:
        raise RuntimeError("listener bug")

    bus.on("log", broken)
    bus.on("log", lambda event: seen.append(event.message))
    with caplog.at_level(logging.ERROR, logger="atvremote.events"):
        bus.log("info", "delivered")

    assert seen == ["delivered"]
    assert "listener" in caplog.text


@pytest.mark.asyncio
async def test_async_listener_is_scheduled_not_awaited() -> None:
    bus = EventBus(quiet=False)
    received = asyncio.Event()

    async def listener(event: Event) -> None:
        await asyncio.sleep(0)
        received.set()

    bus.on("log", listener)
    bus.log("info", "async")

    assert not received.is_set()
    await asyncio.wait_for(received.wait(), timeout=1)


def test_error_carries_data() -> None:
    bus = EventBus()
    seen: list[Event] = []
    bus.on("error", seen.append)

    bus.error(RuntimeError("boom"), "screencap", "capture failed", data={"category": "other"})

    assert seen[0].message == "capture failed"
    assert seen[0].data == {"category": "other"}
    assert isinstance(seen[0].error, RuntimeError)


def test_known_suppression_stream_decode_after_disconnect() -> None:
    """Known suppression: decode noise after teardown becomes a debug log.

    This is deliberately narrow. It only applies to stream decode failures
    and only while the session is not connected.
    """
    connected = False
    bus = EventBus(quiet=False, is_connected=lambda: connected)
    errors: list[Event] = []
    logs: list[Event] = []
    bus.on("error", errors.append)
    bus.on("log", logs.append)

    bus.error(PrematureEndOfStream(4), "screencap")
    assert errors == []
    assert logs[-1].level is LogLevel.DEBUG

    connected = True
    bus.error(PrematureEndOfStream(4), "screencap")
    assert len(errors) == 1


def test_known_suppression_does_not_cover_other_errors() -> None:
    bus = EventBus(quiet=False, is_connected=lambda: False)
    errors: list[Event] = []
    bus.on("error", errors.append)

    bus.error(TransportError("Connection refused"), "connect")
    bus.error(RuntimeError("unexpected"), "connect")

    assert len(errors) == 2


def test_bound_connection_probe_is_used() -> None:
    bus = EventBus(quiet=False)
    errors: list[Event] = []
    bus.on("error", errors.append)
    bus.bind_connection_probe(lambda: True)

    bus.error(TransportError("Premature end of stream"), "screencap")

    assert len(errors) == 1
