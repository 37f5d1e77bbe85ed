"""Session services: lifecycle, monitors, dispatch and device helpers."""

from .device import DeviceSettings, PowerState, parse_power_state
from .dispatcher import CommandDispatcher, CommandSurface
from .heartbeat import HeartbeatMonitor
from .inactivity import InactivityTimer
from .reachability import ReachabilityMonitor
from .screencap import ScreenCapture
from .session import ConnectionStatus, SessionManager
from .tracker import BackgroundOperationTracker

__all__ = [
    "BackgroundOperationTracker",
    "CommandDispatcher",
    "CommandSurface",
    "ConnectionStatus",
    "DeviceSettings",
    "HeartbeatMonitor",
    "InactivityTimer",
    "PowerState",
    "ReachabilityMonitor",
    "ScreenCapture",
    "SessionManager",
    "parse_power_state",
]
