"""Public entry point wiring every remote component together."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from os import PathLike
from types import TracebackType
from typing import Any

from .config.logging import EventLogBridge
from .config.settings import RemoteConfig, load_remote_config
from .const import DEFAULT_BOOT_TIMEOUT, DEFAULT_THUMBNAIL_WIDTH
from .events import EventBus, EventKind, Listener
from .services.device import DeviceSettings, PowerState
from .services.dispatcher import CommandDispatcher
from .services.screencap import ImageTransform, ScreenCapture
from .services.session import ConnectionStatus, SessionManager
from .transport.adb import AdbServerClient
from .transport.base import SessionHandle
from .util import dual_mode

logger = logging.getLogger("atvremote.remote")

_SUB_SURFACES = frozenset({"long", "shift", "keycode"})


class Remote:
    """Control one Android TV / Fire TV device over ADB.

    Every coroutine method also accepts a trailing ``callback(error, result)``
    in place of being awaited. ``press``, ``press.long``, ``keyboard.key``,
    ``keyboard.key.shift`` and ``keyboard.text`` follow the same convention.
    """

    def __init__(
        self,
        config: RemoteConfig | Mapping[str, Any],
        *,
        handle: SessionHandle | None = None,
        transform: ImageTransform | None = None,
    ) -> None:
        if not isinstance(config, RemoteConfig):
            config = load_remote_config(config)
        self.config = config
        self.events = EventBus(quiet=config.quiet)
        self.handle: SessionHandle = handle or AdbServerClient(
            config.adb_host,
            config.adb_port,
            timeout=config.connect_timeout_seconds,
        )
        self.session = SessionManager(config, self.handle, self.events)
        self.dispatcher = CommandDispatcher(
            self.session,
            input_device=config.input_device,
            long_press_duration=config.long_press_duration,
        )
        self.device = DeviceSettings(self.session, self.events)
        self.capture = ScreenCapture(self.session, transform=transform)

        self.press = self.dispatcher.press
        self.keyboard = self.dispatcher.keyboard
        self.input_keycode = self.dispatcher.input_keycode

        self._log_bridge: EventLogBridge | None = None
        if config.debug_logging:
            self._log_bridge = EventLogBridge().attach(self.events)

    def __repr__(self) -> str:
        return f"<Remote {self.session.address} connected={self.is_connected}>"

    async def __aenter__(self) -> Remote:
        await self.session.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # Events -----------------------------------------------------------

    def on(self, kind: EventKind | str, listener: Listener) -> Remote:
        self.events.on(kind, listener)
        return self

    def once(self, kind: EventKind | str, listener: Listener) -> Remote:
        self.events.once(kind, listener)
        return self

    def off(self, kind: EventKind | str, listener: Listener) -> Remote:
        self.events.off(kind, listener)
        return self

    # Connection -------------------------------------------------------

    @property
    def is_connected(self) -> bool:
        return self.session.is_connected()

    @property
    def last_screencap_data(self) -> bytes | None:
        return self.capture.last_data

    @dual_mode
    async def initialize(self) -> None:
        await self.session.initialize()

    @dual_mode
    async def connect(self) -> bool:
        return await self.session.connect()

    @dual_mode
    async def disconnect(self) -> bool:
        return await self.session.disconnect()

    @dual_mode
    async def get_connection_status(self, live_check: bool = False) -> ConnectionStatus:
        return await self.session.get_status(live_check)

    @dual_mode
    async def close(self) -> None:
        await self.session.close()
        if self._log_bridge is not None:
            self._log_bridge.detach()
            self._log_bridge = None

    # Surfaces ---------------------------------------------------------

    def get_press_commands(self) -> list[str]:
        return [name for name in self.press if name not in _SUB_SURFACES]

    def get_keyboard_keys(self) -> list[str]:
        return [name for name in self.keyboard.key if name not in _SUB_SURFACES]

    # Screen -----------------------------------------------------------

    @dual_mode
    async def screencap(
        self,
        width: int | None = None,
        height: int | None = None,
        filepath: str | PathLike[str] | None = None,
    ) -> bytes | None:
        return await self.capture.capture(width, height, filepath)

    @dual_mode
    async def thumbnail(
        self,
        width: int = DEFAULT_THUMBNAIL_WIDTH,
        height: int | None = None,
        filepath: str | PathLike[str] | None = None,
    ) -> bytes | None:
        return await self.capture.thumbnail(width, height, filepath)

    # Device -----------------------------------------------------------

    @dual_mode
    async def handle_settings(self, mode: str, quiet: bool | None = None) -> dict[str, str]:
        return await self.device.handle_settings(mode, quiet)

    @dual_mode
    async def get_power_state(self) -> PowerState:
        return await self.device.get_power_state()

    @dual_mode
    async def ensure_awake(self) -> PowerState:
        return await self.device.ensure_awake()

    @dual_mode
    async def reboot(self) -> bool:
        return await self.device.reboot()

    @dual_mode
    async def wait_boot_complete(self, timeout: float = DEFAULT_BOOT_TIMEOUT) -> bool:
        return await self.device.wait_boot_complete(timeout)


async def create_remote(
    config: RemoteConfig | Mapping[str, Any],
    *,
    handle: SessionHandle | None = None,
    transform: ImageTransform | None = None,
) -> Remote:
    """Build a :class:`Remote` and run its initial auto-connect."""
    remote = Remote(config, handle=handle, transform=transform)
    await remote.session.initialize()
    logger.debug("Remote for %s ready", remote.session.address)
    return remote


__all__ = ["Remote", "create_remote"]
