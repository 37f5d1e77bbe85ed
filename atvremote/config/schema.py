"""Marshmallow schema for RemoteConfig validation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

from marshmallow import Schema, ValidationError, fields, post_load, pre_load, validate

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
    MIN_TIMER_INTERVAL_MS,
)
from ..errors import ConfigurationError
from .settings import RemoteConfig, parse_bool

_BOOL_FIELDS = (
    "auto_connect",
    "auto_disconnect",
    "maintain_connection",
    "quiet",
    "debug_logging",
)

# camelCase spellings accepted for hosts porting existing configuration.
_ALIASES = {
    "autoConnect": "auto_connect",
    "autoDisconnect": "auto_disconnect",
    "disconnectTimeout": "disconnect_timeout",
    "idleTimeoutSeconds": "disconnect_timeout",
    "maintainConnection": "maintain_connection",
    "heartbeatInterval": "heartbeat_interval",
    "connectionCheckInterval": "connection_check_interval",
    "connectTimeout": "connect_timeout",
    "initTimeout": "init_timeout",
    "inputDevice": "input_device",
    "longPressDuration": "long_press_duration",
    "address": "ip",
}


class RemoteConfigSchema(Schema):
    """Declarative validation schema for remote configuration."""

    ip = fields.Str(required=True, validate=validate.Length(min=1))
    port = fields.Int(load_default=DEFAULT_ADB_PORT, validate=validate.Range(min=1, max=65535))
    input_device = fields.Str(load_default=DEFAULT_INPUT_DEVICE, validate=validate.Length(min=1))

    auto_connect = fields.Bool(load_default=DEFAULT_AUTO_CONNECT)
    auto_disconnect = fields.Bool(load_default=DEFAULT_AUTO_DISCONNECT)
    disconnect_timeout = fields.Float(load_default=DEFAULT_DISCONNECT_TIMEOUT, validate=validate.Range(min=0.0))

    maintain_connection = fields.Bool(load_default=DEFAULT_MAINTAIN_CONNECTION)
    heartbeat_interval = fields.Int(
        load_default=DEFAULT_HEARTBEAT_INTERVAL_MS,
        validate=validate.Range(min=MIN_TIMER_INTERVAL_MS),
    )
    connection_check_interval = fields.Int(
        load_default=DEFAULT_CONNECTION_CHECK_INTERVAL_MS,
        validate=validate.Range(min=MIN_TIMER_INTERVAL_MS),
    )
    connect_timeout = fields.Int(load_default=DEFAULT_CONNECT_TIMEOUT_MS, validate=validate.Range(min=1))
    init_timeout = fields.Int(load_default=DEFAULT_INIT_TIMEOUT_MS, validate=validate.Range(min=1))

    quiet = fields.Bool(load_default=DEFAULT_QUIET)
    debug_logging = fields.Bool(load_default=DEFAULT_DEBUG_LOGGING)

    adb_host = fields.Str(load_default=DEFAULT_ADB_SERVER_HOST, validate=validate.Length(min=1))
    adb_port = fields.Int(load_default=DEFAULT_ADB_SERVER_PORT, validate=validate.Range(min=1, max=65535))
    long_press_duration = fields.Float(
        load_default=DEFAULT_LONG_PRESS_DURATION,
        validate=validate.Range(min=0.0),
    )

    @pre_load
    def normalise_keys(self, data: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
        normalised: Dict[str, Any] = {}
        for key, value in data.items():
            normalised[_ALIASES.get(key, key)] = value
        # An idle timeout on its own asks for idle teardown.
        if "idleTimeoutSeconds" in data and "auto_disconnect" not in normalised:
            normalised["auto_disconnect"] = True
        if isinstance(normalised.get("ip"), str) and ":" in normalised["ip"] and "port" not in normalised:
            host, _, port = normalised["ip"].rpartition(":")
            if port.isdigit():
                normalised["ip"] = host
                normalised["port"] = int(port)
        for name in _BOOL_FIELDS:
            if name in normalised and isinstance(normalised[name], str):
                normalised[name] = parse_bool(normalised[name])
        return normalised

    @post_load
    def make_config(self, data: Dict[str, Any], **kwargs: Any) -> RemoteConfig:
        return RemoteConfig(**data)


def load_config_mapping(values: Mapping[str, Any]) -> RemoteConfig:
    """Validate a raw mapping, raising ConfigurationError on any problem."""
    try:
        return RemoteConfigSchema().load(dict(values))
    except ValidationError as exc:
        if "ip" in exc.messages:
            raise ConfigurationError("Missing required 'ip' property in RemoteConfig.") from exc
        raise ConfigurationError(f"Invalid remote configuration: {exc.messages}") from exc


__all__ = ["RemoteConfigSchema", "load_config_mapping"]
