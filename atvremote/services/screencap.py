"""Screen captures, optionally transformed and persisted in the background."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from os import PathLike
from pathlib import Path
from tempfile import NamedTemporaryFile

from ..const import DEFAULT_THUMBNAIL_WIDTH, SCREENCAP_COMMAND
from .session import SessionManager

logger = logging.getLogger("atvremote.screencap")

ImageTransform = Callable[[bytes, int | None, int | None], bytes | Awaitable[bytes]]


def passthrough_transform(data: bytes, width: int | None, height: int | None) -> bytes:
    return data


def _write_capture(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile("wb", dir=path.parent, delete=False) as handle:
        handle.write(data)
        temp_name = handle.name
    Path(temp_name).replace(path)


class ScreenCapture:
    """Grab PNG screenshots through ``screencap -p``.

    With a ``filepath`` the transform and write run as a tracked background
    operation and the call returns as soon as the raw image is in hand.
    """

    def __init__(self, session: SessionManager, *, transform: ImageTransform | None = None) -> None:
        self._session = session
        self.transform: ImageTransform = transform or passthrough_transform
        self.last_data: bytes | None = None

    async def capture(
        self,
        width: int | None = None,
        height: int | None = None,
        filepath: str | PathLike[str] | None = None,
    ) -> bytes | None:
        raw = await self._session.run_command(SCREENCAP_COMMAND, source="screencap")
        self.last_data = raw
        logger.debug("Captured %d byte screenshot", len(raw))
        if filepath is not None:
            self._session.tracker.track(
                self._persist(raw, width, height, Path(filepath)),
                origin="screencap",
            )
            return None
        return await self._apply_transform(raw, width, height)

    async def thumbnail(
        self,
        width: int = DEFAULT_THUMBNAIL_WIDTH,
        height: int | None = None,
        filepath: str | PathLike[str] | None = None,
    ) -> bytes | None:
        return await self.capture(width, height, filepath)

    async def _apply_transform(self, data: bytes, width: int | None, height: int | None) -> bytes:
        if width is None and height is None:
            return data
        result = self.transform(data, width, height)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _persist(self, data: bytes, width: int | None, height: int | None, path: Path) -> None:
        image = await self._apply_transform(data, width, height)
        await asyncio.to_thread(_write_capture, path, image)
        logger.info("Saved %d byte screenshot to %s", len(image), path)


__all__ = ["ImageTransform", "ScreenCapture", "passthrough_transform"]
