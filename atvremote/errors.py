"""Exception hierarchy and transport error classification."""

from __future__ import annotations

from enum import Enum
from typing import Final


class RemoteError(Exception):
    """Base class for every error raised by the remote."""


class ConfigurationError(RemoteError, ValueError):
    """Raised synchronously when the remote configuration is invalid."""


class UnknownCommandError(RemoteError, KeyError):
    """Raised before any transport call when a command name is not known."""

    def __init__(self, name: str, surface: str = "press") -> None:
        self.name = name
        self.surface = surface
        super().__init__(f"Unknown {surface} command: {name}")

    def __str__(self) -> str:
        return self.args[0]


class MissingKeycodeError(RemoteError):
    """Raised when a keycode was requested for a key that only has a text form."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Key {name!r} has no keycode fallback")


class InitializationTimeout(RemoteError, TimeoutError):
    """Raised when the initial auto-connect does not settle before its deadline."""


class TransportErrorCategory(str, Enum):
    UNAUTHORIZED = "unauthorized"
    REFUSED = "refused"
    ALREADY_CONNECTED = "already_connected"
    ALREADY_DISCONNECTED = "already_disconnected"
    STREAM_DECODE = "stream_decode"
    OTHER = "other"

    @property
    def benign(self) -> bool:
        return self in (
            TransportErrorCategory.ALREADY_CONNECTED,
            TransportErrorCategory.ALREADY_DISCONNECTED,
        )


class TransportError(RemoteError):
    """A failure reported by the session handle."""

    def __init__(self, message: str, *, category: TransportErrorCategory | None = None) -> None:
        super().__init__(message)
        self.category = category if category is not None else classify_message(message)


class PrematureEndOfStream(TransportError):
    """The device closed a response stream before it was fully read."""

    def __init__(self, missing: int = 0) -> None:
        super().__init__(
            f"Premature end of stream, needed {missing} more bytes",
            category=TransportErrorCategory.STREAM_DECODE,
        )
        self.missing = missing


# Order matters: "already disconnected" must win over the generic
# "disconnected" match, and "already connected" must be checked first.
_MESSAGE_RULES: Final[tuple[tuple[TransportErrorCategory, tuple[str, ...]], ...]] = (
    (TransportErrorCategory.UNAUTHORIZED, ("device unauthorized", "failed to authenticate")),
    (
        TransportErrorCategory.REFUSED,
        ("actively refused", "no connection could be made", "connection refused"),
    ),
    (TransportErrorCategory.ALREADY_CONNECTED, ("already connected",)),
    (TransportErrorCategory.ALREADY_DISCONNECTED, ("disconnected",)),
    (TransportErrorCategory.STREAM_DECODE, ("premature end of stream", "closed stream")),
)

_REMEDIATION: Final[dict[TransportErrorCategory, tuple[str, ...]]] = {
    TransportErrorCategory.UNAUTHORIZED: (
        "Your device is unauthorized or failed to authenticate. Please check your TV and accept "
        "the authorization dialog to allow this system to connect via ADB.",
        "If you do not see a prompt, try disconnecting and reconnecting the device, or reboot your TV.",
        "If the problem persists, remove the device from the list of authorized ADB devices in "
        "Developer Options and try again.",
        "Tip: In Developer Options on your TV, try toggling 'ADB Debugging' off and then back on. "
        "This often resolves authentication issues.",
    ),
    TransportErrorCategory.REFUSED: (
        "The device refused the connection. To enable ADB, follow these steps on your Android TV or Fire TV:",
        "1. Open Settings > Device Preferences > About (or My Fire TV > About)",
        "2. Scroll to 'Build' and press OK 7 times to enable Developer Options",
        "3. Go back to Settings > Device Preferences > Developer Options",
        "4. Enable 'Developer Options' if needed, then enable 'ADB Debugging' and 'Apps from Unknown Sources'",
        "5. Ensure your TV and computer are on the same network",
        "6. On your computer, run: adb connect <device-ip>:5555",
        "7. Accept the authorization prompt on your TV",
        "If you do not see 'Developer Options', repeat step 2 until it appears.",
    ),
}

_SUMMARY: Final[dict[TransportErrorCategory, str]] = {
    TransportErrorCategory.UNAUTHORIZED: "Device unauthorized - authentication required",
    TransportErrorCategory.REFUSED: "Connection refused - ADB not enabled",
}


def classify_message(message: str) -> TransportErrorCategory:
    lowered = message.lower()
    for category, needles in _MESSAGE_RULES:
        if any(needle in lowered for needle in needles):
            return category
    return TransportErrorCategory.OTHER


def classify_transport_error(exc: BaseException) -> TransportErrorCategory:
    """Map an exception raised by a session handle onto a category."""
    if isinstance(exc, TransportError):
        return exc.category
    if isinstance(exc, ConnectionRefusedError):
        return TransportErrorCategory.REFUSED
    return classify_message(str(exc))


def remediation_for(category: TransportErrorCategory) -> tuple[str, ...]:
    return _REMEDIATION.get(category, ())


def summary_for(category: TransportErrorCategory) -> str | None:
    return _SUMMARY.get(category)


__all__ = [
    "ConfigurationError",
    "InitializationTimeout",
    "MissingKeycodeError",
    "PrematureEndOfStream",
    "RemoteError",
    "TransportError",
    "TransportErrorCategory",
    "UnknownCommandError",
    "classify_message",
    "classify_transport_error",
    "remediation_for",
    "summary_for",
]
