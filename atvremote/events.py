"""Per-remote event bus carrying structured ``log`` and ``error`` notifications."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

import msgspec

from .const import DEFAULT_EVENT_SOURCE
from .errors import TransportErrorCategory, classify_transport_error
from .util import utc_timestamp

logger = logging.getLogger("atvremote.events")


class EventKind(str, Enum):
    LOG = "log"
    ERROR = "error"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


_QUIET_SUPPRESSED = frozenset({LogLevel.DEBUG, LogLevel.INFO})


class Event(msgspec.Struct, frozen=True, kw_only=True):
    """Immutable notification delivered to bus subscribers."""

    kind: EventKind
    message: str
    source: str
    timestamp: str
    level: LogLevel | None = None
    data: Any = None
    error: BaseException | None = None


Listener = Callable[[Event], Any]


class _Subscription(msgspec.Struct):
    listener: Listener
    once: bool = False


class EventBus:
    """Synchronous publish/subscribe channel owned by a single remote.

    Delivery never waits on a subscriber: coroutine listeners are scheduled on
    the running loop and a raising listener is logged and skipped.
    """

    def __init__(
        self,
        *,
        quiet: bool = True,
        is_connected: Callable[[], bool] | None = None,
    ) -> None:
        self.quiet = quiet
        self._is_connected = is_connected or (lambda: False)
        self._subscriptions: dict[EventKind, list[_Subscription]] = {kind: [] for kind in EventKind}
        self._pending: set[asyncio.Task[Any]] = set()

    def bind_connection_probe(self, is_connected: Callable[[], bool]) -> None:
        self._is_connected = is_connected

    def on(self, kind: EventKind | str, listener: Listener) -> EventBus:
        self._subscriptions[EventKind(kind)].append(_Subscription(listener))
        return self

    def once(self, kind: EventKind | str, listener: Listener) -> EventBus:
        self._subscriptions[EventKind(kind)].append(_Subscription(listener, once=True))
        return self

    def off(self, kind: EventKind | str, listener: Listener) -> EventBus:
        subs = self._subscriptions[EventKind(kind)]
        for index, sub in enumerate(subs):
            if sub.listener == listener:
                del subs[index]
                break
        return self

    def listener_count(self, kind: EventKind | str) -> int:
        return len(self._subscriptions[EventKind(kind)])

    def log(
        self,
        level: LogLevel | str,
        message: str,
        source: str = DEFAULT_EVENT_SOURCE,
        data: Any = None,
        *,
        force: bool = False,
    ) -> Event | None:
        level = LogLevel(level)
        if self.quiet and not force and level in _QUIET_SUPPRESSED:
            return None
        event = Event(
            kind=EventKind.LOG,
            level=level,
            message=message,
            source=source,
            timestamp=utc_timestamp(),
            data=data,
        )
        self._publish(event)
        return event

    def error(
        self,
        error: BaseException,
        source: str = DEFAULT_EVENT_SOURCE,
        message: str | None = None,
        *,
        data: Any = None,
    ) -> Event | None:
        # Known suppression: decode failures on a stream the device already
        # closed show up after teardown. Only while disconnected.
        if (
            classify_transport_error(error) is TransportErrorCategory.STREAM_DECODE
            and not self._is_connected()
        ):
            return self.log(
                LogLevel.DEBUG,
                f"Ignoring stream decode error after disconnect: {error}",
                source,
            )
        event = Event(
            kind=EventKind.ERROR,
            level=LogLevel.ERROR,
            message=message or str(error) or type(error).__name__,
            source=source,
            timestamp=utc_timestamp(),
            data=data,
            error=error,
        )
        self._publish(event)
        return event

    def _publish(self, event: Event) -> None:
        subs = self._subscriptions[event.kind]
        if not subs:
            if event.kind is EventKind.ERROR:
                logger.debug("Unobserved error event from %s: %s", event.source, event.message)
            return
        for sub in list(subs):
            if sub.once:
                try:
                    subs.remove(sub)
                except ValueError:
                    continue
            try:
                result = sub.listener(event)
            except Exception:
                logger.exception("Event listener %r failed for %s event", sub.listener, event.kind.value)
                continue
            if inspect.isawaitable(result):
                self._schedule(result)

    def _schedule(self, awaitable: Any) -> None:
        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)
        task.add_done_callback(self._listener_done)

    def _listener_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Async event listener failed: %s", task.exception())


__all__ = ["Event", "EventBus", "EventKind", "Listener", "LogLevel"]
