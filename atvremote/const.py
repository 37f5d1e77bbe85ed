"""Shared defaults and fixed constants for the Android TV remote."""

from __future__ import annotations

from typing import Final

DEFAULT_ADB_PORT: Final[int] = 5555
DEFAULT_ADB_SERVER_HOST: Final[str] = "127.0.0.1"
DEFAULT_ADB_SERVER_PORT: Final[int] = 5037
DEFAULT_INPUT_DEVICE: Final[str] = "/dev/input/event0"

DEFAULT_AUTO_CONNECT: Final[bool] = True
DEFAULT_AUTO_DISCONNECT: Final[bool] = False
DEFAULT_DISCONNECT_TIMEOUT: Final[float] = 10.0
DEFAULT_MAINTAIN_CONNECTION: Final[bool] = True
DEFAULT_HEARTBEAT_INTERVAL_MS: Final[int] = 20000
DEFAULT_CONNECTION_CHECK_INTERVAL_MS: Final[int] = 10000
DEFAULT_CONNECT_TIMEOUT_MS: Final[int] = 10000
DEFAULT_INIT_TIMEOUT_MS: Final[int] = 7000
DEFAULT_QUIET: Final[bool] = True
DEFAULT_DEBUG_LOGGING: Final[bool] = False
DEFAULT_LONG_PRESS_DURATION: Final[float] = 1.0

MIN_TIMER_INTERVAL_MS: Final[int] = 10

HEARTBEAT_COMMAND: Final[str] = "echo heartbeat"
SCREENCAP_COMMAND: Final[str] = "screencap -p"
DUMPSYS_POWER_COMMAND: Final[str] = "dumpsys power"
BOOT_COMPLETED_COMMAND: Final[str] = "getprop sys.boot_completed"
REBOOT_COMMAND: Final[str] = "reboot"

DEFAULT_THUMBNAIL_WIDTH: Final[int] = 240
BOOT_POLL_INTERVAL: Final[float] = 1.0
DEFAULT_BOOT_TIMEOUT: Final[float] = 30.0

DEFAULT_EVENT_SOURCE: Final[str] = "android-tv-remote"
ENV_PREFIX: Final[str] = "ATVREMOTE_"

# (namespace, key, value) triples applied by DeviceSettings.
STAY_AWAKE_SETTINGS: Final[tuple[tuple[str, str, int], ...]] = (
    ("system", "screen_off_timeout", 2147483647),
    ("secure", "sleep_timeout", 0),
    ("global", "stay_on_while_plugged_in", 3),
)
