"""Tests for transport error classification and connection state."""

from __future__ import annotations

import pytest

from atvremote.errors import (
    PrematureEndOfStream,
    TransportError,
    TransportErrorCategory,
    UnknownCommandError,
    classify_transport_error,
    remediation_for,
    summary_for,
)
from atvremote.state.connection import ConnectionState


@pytest.mark.parametrize(
    ("message", "category"),
    [
        ("device unauthorized.", TransportErrorCategory.UNAUTHORIZED),
        ("Failed to authenticate to 10.0.0.5:5555", TransportErrorCategory.UNAUTHORIZED),
        ("No connection could be made because the target machine actively refused it", TransportErrorCategory.REFUSED),
        ("Connection refused", TransportErrorCategory.REFUSED),
        ("already connected to 10.0.0.5:5555", TransportErrorCategory.ALREADY_CONNECTED),
        ("10.0.0.5:5555 already disconnected", TransportErrorCategory.ALREADY_DISCONNECTED),
        ("Premature end of stream, needed 4 more bytes", TransportErrorCategory.STREAM_DECODE),
        ("something else", TransportErrorCategory.OTHER),
    ],
)
def test_classify_by_message(message: str, category: TransportErrorCategory) -> None:
    assert classify_transport_error(RuntimeError(message)) is category
    assert TransportError(message).category is category


def test_classify_native_refusal() -> None:
    assert classify_transport_error(ConnectionRefusedError()) is TransportErrorCategory.REFUSED


def test_explicit_category_wins() -> None:
    error = TransportError("whatever", category=TransportErrorCategory.ALREADY_DISCONNECTED)

    assert classify_transport_error(error) is TransportErrorCategory.ALREADY_DISCONNECTED


def test_benign_categories() -> None:
    benign = {category for category in TransportErrorCategory if category.benign}

    assert benign == {TransportErrorCategory.ALREADY_CONNECTED, TransportErrorCategory.ALREADY_DISCONNECTED}


def test_remediation_text() -> None:
    assert len(remediation_for(TransportErrorCategory.UNAUTHORIZED)) == 4
    refused = remediation_for(TransportErrorCategory.REFUSED)
    assert len(refused) == 9
    assert any("adb connect <device-ip>:5555" in line for line in refused)
    assert remediation_for(TransportErrorCategory.OTHER) == ()
    assert summary_for(TransportErrorCategory.OTHER) is None


def test_premature_end_of_stream() -> None:
    error = PrematureEndOfStream(3)

    assert error.missing == 3
    assert error.category is TransportErrorCategory.STREAM_DECODE


def test_unknown_command_message() -> None:
    error = UnknownCommandError("bogus", "keyboard")

    assert str(error) == "Unknown keyboard command: bogus"
    assert isinstance(error, KeyError)


def test_connection_state_lifecycle() -> None:
    state = ConnectionState("10.0.0.5:5555")
    assert state.believed_connected is False

    state.begin_connect()
    assert state.phase == ConnectionState.STATE_CONNECTING
    assert state.believed_connected is False

    state.set_connected(True)
    assert state.believed_connected is True
    assert state.connects == 1

    state.begin_disconnect()
    assert state.phase == ConnectionState.STATE_DISCONNECTING
    assert state.believed_connected is True

    state.set_connected(False)
    assert state.believed_connected is False
    assert state.disconnects == 1


def test_begin_disconnect_from_disconnected_is_ignored() -> None:
    state = ConnectionState("10.0.0.5:5555")

    state.begin_disconnect()

    assert state.phase == ConnectionState.STATE_DISCONNECTED
    assert state.believed_connected is False


def test_begin_disconnect_while_connecting_is_ignored() -> None:
    state = ConnectionState("10.0.0.5:5555")
    state.begin_connect()

    state.begin_disconnect()

    assert state.phase == ConnectionState.STATE_CONNECTING
    assert state.believed_connected is False


def test_observation_overwrites_belief() -> None:
    state = ConnectionState("10.0.0.5:5555")
    state.set_connected(True)

    assert state.observe(False) is False
    assert state.believed_connected is False
    assert state.observe(True) is True
    assert state.believed_connected is True

    snapshot = state.snapshot()
    assert snapshot.live_checks == 2
    assert snapshot.last_observation_unix is not None
    assert snapshot.connects == 2


def test_set_connected_is_idempotent() -> None:
    state = ConnectionState("10.0.0.5:5555")
    state.set_connected(True)
    state.set_connected(True)
    state.set_connected(False)
    state.set_connected(False)

    assert state.connects == 1
    assert state.disconnects == 1
