"""Static command tables and command-string builders."""

from . import commands, keycodes

__all__ = ["commands", "keycodes"]
