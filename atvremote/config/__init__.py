"""Configuration package for the Android TV remote."""

from .settings import RemoteConfig, load_remote_config

__all__ = ["RemoteConfig", "load_remote_config"]
