"""Settings model and loader for the Android TV remote.

Values come from an explicit mapping, with ``ATVREMOTE_*`` environment
variables filling in anything the mapping leaves out. Everything passes
through :class:`~atvremote.config.schema.RemoteConfigSchema` before a
:class:`RemoteConfig` is produced.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final

from ..const import (
    DEFAULT_ADB_PORT,
    DEFAULT_ADB_SERVER_HOST,
    DEFAULT_ADB_SERVER_PORT,
    DEFAULT_AUTO_CONNECT,
    DEFAULT_AUTO_DISCONNECT,
    DEFAULT_CONNECT_TIMEOUT_MS,
    DEFAULT_CONNECTION_CHECK_INTERVAL_MS,
    DEFAULT_DEBUG_LOGGING,
    DEFAULT_DISCONNECT_TIMEOUT,
    DEFAULT_HEARTBEAT_INTERVAL_MS,
    DEFAULT_INIT_TIMEOUT_MS,
    DEFAULT_INPUT_DEVICE,
    DEFAULT_LONG_PRESS_DURATION,
    DEFAULT_MAINTAIN_CONNECTION,
    DEFAULT_QUIET,
    ENV_PREFIX,
)

logger = logging.getLogger(__name__)

_TRUE_STRINGS: Final[frozenset[str]] = frozenset({"1", "yes", "on", "true", "enable", "enabled"})


@dataclass(slots=True)
class RemoteConfig:
    """Strongly typed configuration for one remote session."""

    ip: str
    port: int = DEFAULT_ADB_PORT
    input_device: str = DEFAULT_INPUT_DEVICE
    auto_connect: bool = DEFAULT_AUTO_CONNECT
    auto_disconnect: bool = DEFAULT_AUTO_DISCONNECT
    disconnect_timeout: float = DEFAULT_DISCONNECT_TIMEOUT
    maintain_connection: bool = DEFAULT_MAINTAIN_CONNECTION
    heartbeat_interval: int = DEFAULT_HEARTBEAT_INTERVAL_MS
    connection_check_interval: int = DEFAULT_CONNECTION_CHECK_INTERVAL_MS
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT_MS
    init_timeout: int = DEFAULT_INIT_TIMEOUT_MS
    quiet: bool = DEFAULT_QUIET
    adb_host: str = DEFAULT_ADB_SERVER_HOST
    adb_port: int = DEFAULT_ADB_SERVER_PORT
    debug_logging: bool = DEFAULT_DEBUG_LOGGING
    long_press_duration: float = DEFAULT_LONG_PRESS_DURATION

    @property
    def address(self) -> str:
        return f"{self.ip}:{self.port}"

    @property
    def heartbeat_seconds(self) -> float:
        return self.heartbeat_interval / 1000.0

    @property
    def connection_check_seconds(self) -> float:
        return self.connection_check_interval / 1000.0

    @property
    def connect_timeout_seconds(self) -> float:
        return self.connect_timeout / 1000.0

    @property
    def init_timeout_seconds(self) -> float:
        return self.init_timeout / 1000.0


def parse_bool(value: object) -> bool:
    """Parse a boolean value safely from various types."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if value is None:
        return False
    return str(value).lower().strip() in _TRUE_STRINGS


def _environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    from .schema import RemoteConfigSchema

    known = RemoteConfigSchema().fields
    overrides: dict[str, Any] = {}
    for key, raw in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX) :].lower()
        if name not in known:
            logger.debug("Ignoring unknown environment setting %s", key)
            continue
        overrides[name] = raw
    return overrides


def load_remote_config(
    values: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> RemoteConfig:
    """Validate *values* (plus environment fallbacks) into a RemoteConfig."""
    from .schema import load_config_mapping

    merged = _environment_overrides(os.environ if environ is None else environ)
    if values:
        merged.update({key: value for key, value in values.items() if value is not None})
    return load_config_mapping(merged)


__all__ = ["RemoteConfig", "load_remote_config", "parse_bool"]
