"""Tests for the logging configuration and the event log bridge."""

import json
import logging
from unittest.mock import patch

import pytest

from atvremote.config import logging as log_mod
from atvremote.config.settings import RemoteConfig
from atvremote.errors import TransportError
from atvremote.events import EventBus


def _record(name: str = "atvremote.session") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello %s",
        args=("tv",),
        exc_info=None,
    )


def test_formatter_strips_prefix_and_hexes_bytes() -> None:
    record = _record()
    record.payload = b"\x89PNG"  # type: ignore[attr-defined]
    record.custom_obj = object()  # type: ignore[attr-defined]

    payload = json.loads(log_mod.StructuredLogFormatter().format(record))

    assert payload["logger"] == "session"
    assert payload["message"] == "hello tv"
    assert payload["level"] == "INFO"
    assert payload["ts"].endswith("Z")
    assert payload["extra"]["payload"] == "[89 50 4E 47]"
    assert str(record.custom_obj) in payload["extra"]["custom_obj"]


def test_formatter_keeps_foreign_logger_names() -> None:
    payload = json.loads(log_mod.StructuredLogFormatter().format(_record("asyncio")))

    assert payload["logger"] == "asyncio"
    assert "extra" not in payload


def test_configure_logging_syslog(tmp_path) -> None:
    fake_socket = tmp_path / "log"
    fake_socket.touch()

    with patch("atvremote.config.logging.SYSLOG_SOCKET", fake_socket):
        with patch("atvremote.config.logging.dictConfig") as mock_dict_config:
            log_mod.configure_logging(RemoteConfig(ip="10.0.0.5", debug_logging=True))
            mock_dict_config.assert_called_once()
            config_arg = mock_dict_config.call_args[0][0]
            assert "atvremote" in config_arg["handlers"]
            assert config_arg["loggers"]["atvremote"]["level"] == "DEBUG"


def test_configure_logging_uses_stream_when_requested(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ATVREMOTE_LOG_STREAM", "1")

    log_mod.configure_logging(RemoteConfig(ip="10.0.0.5"))

    logger = logging.getLogger("atvremote")
    assert logger.level == logging.INFO
    assert any(isinstance(handler, logging.StreamHandler) for handler in logger.handlers)
    assert isinstance(logger.handlers[0].formatter, log_mod.StructuredLogFormatter)


def test_event_bridge_mirrors_bus_events(caplog: pytest.LogCaptureFixture) -> None:
    bus = EventBus(quiet=False)
    bridge = log_mod.EventLogBridge().attach(bus)

    with caplog.at_level(logging.DEBUG, logger="atvremote.events"):
        bus.log("warn", "careful", "connectionCheck")
        bus.error(TransportError("device unauthorized"), "connect")

    levels = [(record.levelno, record.getMessage()) for record in caplog.records if record.name == "atvremote.events"]
    assert (logging.WARNING, "careful") in levels
    assert (logging.ERROR, "device unauthorized") in levels

    bridge.detach()
    assert bus.listener_count("log") == 0
    assert bus.listener_count("error") == 0
