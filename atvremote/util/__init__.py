"""Small helpers shared across the remote packages."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable, Coroutine
from datetime import datetime, timezone
from typing import Any, TypeVar

logger = logging.getLogger("atvremote.util")

T = TypeVar("T")

CompletionCallback = Callable[[BaseException | None, Any], object]

# Strong references for callback-style calls; the loop only keeps weak ones.
_callback_tasks: set[asyncio.Task[Any]] = set()


def utc_timestamp() -> str:
    """Return the current time as an ISO-8601 UTC string with a ``Z`` suffix."""
    return datetime.now(tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _deliver(callback: CompletionCallback, task: asyncio.Task[Any]) -> None:
    _callback_tasks.discard(task)
    if task.cancelled():
        callback(asyncio.CancelledError(), None)
        return
    exc = task.exception()
    try:
        if exc is not None:
            callback(exc, None)
        else:
            callback(None, task.result())
    except Exception:
        logger.exception("Completion callback %r raised", callback)


def dual_mode(
    func: Callable[..., Coroutine[Any, Any, T]],
) -> Callable[..., Awaitable[T] | None]:
    """Let *func* be awaited or driven by a trailing ``callback(error, result)``.

    When the last positional argument is callable it is removed and invoked on
    settlement, and ``None`` is returned. Otherwise the coroutine is returned
    untouched so awaiting it behaves exactly like calling *func* directly.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Awaitable[T] | None:
        if args and callable(args[-1]):
            callback: CompletionCallback = args[-1]
            task = asyncio.ensure_future(func(*args[:-1], **kwargs))
            _callback_tasks.add(task)
            task.add_done_callback(functools.partial(_deliver, callback))
            return None
        return func(*args, **kwargs)

    return wrapper


__all__ = ["CompletionCallback", "dual_mode", "utc_timestamp"]
