"""Android TV / Fire TV remote control over ADB."""

from .config.settings import RemoteConfig, load_remote_config
from .errors import (
    ConfigurationError,
    InitializationTimeout,
    MissingKeycodeError,
    RemoteError,
    TransportError,
    TransportErrorCategory,
    UnknownCommandError,
)
from .events import Event, EventBus, EventKind, LogLevel
from .remote import Remote, create_remote
from .services.session import ConnectionStatus

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "ConnectionStatus",
    "Event",
    "EventBus",
    "EventKind",
    "InitializationTimeout",
    "LogLevel",
    "MissingKeycodeError",
    "Remote",
    "RemoteConfig",
    "RemoteError",
    "TransportError",
    "TransportErrorCategory",
    "UnknownCommandError",
    "__version__",
    "create_remote",
    "load_remote_config",
]
