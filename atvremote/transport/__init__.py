"""Transport layer: the session handle boundary and its ADB implementation."""

from .adb import AdbServerClient
from .base import DeviceEntry, SessionHandle

__all__ = ["AdbServerClient", "DeviceEntry", "SessionHandle"]
