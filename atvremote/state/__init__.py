"""Runtime state for the Android TV remote."""

from .connection import ConnectionSnapshot, ConnectionState

__all__ = ["ConnectionSnapshot", "ConnectionState"]
