"""Logging helpers for the Android TV remote."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from logging import Handler
from logging.config import dictConfig
from logging.handlers import SysLogHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import msgspec

from .settings import RemoteConfig

if TYPE_CHECKING:
    from ..events import Event, EventBus

SYSLOG_SOCKET = Path("/dev/log")

_RESERVED_LOG_KEYS = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

_EVENT_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _serialise_value(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        # Hex keeps binary payloads (PNG headers, shell output) readable.
        return f"[{' '.join(f'{b:02X}' for b in value)}]"
    return str(value)


class StructuredLogFormatter(logging.Formatter):
    """Emit JSON per log line while trimming the shared prefix."""

    PREFIX = "atvremote."

    def format(self, record: logging.LogRecord) -> str:
        logger_name = record.name
        if logger_name.startswith(self.PREFIX):
            logger_name = logger_name[len(self.PREFIX) :]

        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": logger_name,
            "message": record.getMessage(),
        }

        extras = {
            key: _serialise_value(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_KEYS and not key.startswith("_")
        }
        if extras:
            payload["extra"] = extras

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return msgspec.json.encode(payload).decode("utf-8")


def _build_handler() -> Handler:
    if os.environ.get("ATVREMOTE_LOG_STREAM") or not SYSLOG_SOCKET.exists():
        return logging.StreamHandler()
    syslog_handler = SysLogHandler(address=str(SYSLOG_SOCKET), facility=SysLogHandler.LOG_USER)
    syslog_handler.ident = "atvremote "
    return syslog_handler


def configure_logging(config: RemoteConfig) -> None:
    """Configure the ``atvremote`` logger tree based on remote settings."""

    level_name = "DEBUG" if config.debug_logging else "INFO"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": "atvremote.config.logging.StructuredLogFormatter",
                }
            },
            "handlers": {
                "atvremote": {
                    "()": _build_handler,
                    "level": level_name,
                    "formatter": "structured",
                }
            },
            "loggers": {
                "atvremote": {
                    "level": level_name,
                    "handlers": ["atvremote"],
                    "propagate": False,
                }
            },
        }
    )

    logging.getLogger("atvremote").info("Logging configured at level %s", level_name)


class EventLogBridge:
    """Mirror bus events into the ``atvremote.events`` logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("atvremote.events")
        self._bus: EventBus | None = None

    def attach(self, bus: EventBus) -> EventLogBridge:
        self.detach()
        bus.on("log", self)
        bus.on("error", self)
        self._bus = bus
        return self

    def detach(self) -> None:
        if self._bus is not None:
            self._bus.off("log", self)
            self._bus.off("error", self)
            self._bus = None

    def __call__(self, event: Event) -> None:
        level = _EVENT_LEVELS.get(event.level.value if event.level else "error", logging.INFO)
        extra: dict[str, Any] = {"source": event.source}
        if event.data is not None:
            extra["data"] = event.data
        self._logger.log(
            level,
            "%s",
            event.message,
            exc_info=event.error if event.error is not None else None,
            extra=extra,
        )


__all__ = ["EventLogBridge", "StructuredLogFormatter", "configure_logging"]
