"""Semantic command surfaces built once from the static key tables."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Iterator, Mapping
from typing import Any

from ..errors import MissingKeycodeError, UnknownCommandError
from ..protocol.commands import keyevent_command, long_press_command, text_command
from ..protocol.keycodes import (
    KEYCODES,
    REMOTE_KEYS,
    SHIFTED_CHARACTERS,
    TEXT_ONLY_CHARACTERS,
    resolve_press_key,
)
from ..util import dual_mode
from .session import SessionManager

Operation = Callable[..., Awaitable[Any] | None]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def normalise_name(name: str) -> str:
    """Map ``volumeUp`` style names onto the snake_case table keys."""
    if len(name) <= 1:
        return name
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


class CommandSurface(Mapping[str, Operation]):
    """Read-only name -> operation map with attribute and call access.

    ``surface.home()``, ``surface["home"]()`` and ``surface("home")`` are
    equivalent. Unknown names raise :class:`UnknownCommandError` before any
    transport call is made.
    """

    def __init__(self, kind: str, operations: Mapping[str, Operation]) -> None:
        self._kind = kind
        self._operations = dict(operations)

    def __getitem__(self, name: str) -> Operation:
        try:
            return self._operations[normalise_name(name)]
        except KeyError:
            raise UnknownCommandError(name, self._kind) from None

    def __getattr__(self, name: str) -> Operation:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except UnknownCommandError as exc:
            raise AttributeError(str(exc)) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __call__(self, name: str, *args: Any, **kwargs: Any) -> Awaitable[Any] | None:
        return self[name](*args, **kwargs)

    def __repr__(self) -> str:
        return f"<CommandSurface {self._kind} ({len(self)} commands)>"


class PressSurface(CommandSurface):
    """Remote buttons, with a parallel ``long`` surface for held presses."""

    def __init__(self, operations: Mapping[str, Operation], long: CommandSurface) -> None:
        super().__init__("press", operations)
        self.long = long


class KeySurface(CommandSurface):
    """Keyboard keys, with a ``shift`` surface for keys whose shifted form differs."""

    def __init__(self, operations: Mapping[str, Operation], shift: CommandSurface) -> None:
        super().__init__("keyboard", operations)
        self.shift = shift


class Keyboard:
    def __init__(self, key: KeySurface, text: Operation) -> None:
        self.key = key
        self.text = text


class CommandDispatcher:
    """Translate semantic names into shell commands on the session.

    Every surface is resolved in a single pass at construction; a name with
    no key code in the table is left off the surface rather than failing at
    call time.
    """

    def __init__(
        self,
        session: SessionManager,
        *,
        input_device: str,
        long_press_duration: float = 1.0,
        keycodes: Mapping[str, int] = KEYCODES,
    ) -> None:
        self._session = session
        self._input_device = input_device
        self._long_press_duration = long_press_duration
        self._keycodes = keycodes

        self.press = self._build_press_surface()
        self.keyboard = Keyboard(self._build_key_surface(), dual_mode(self._send_text))
        self.input_keycode = dual_mode(self._send_keycode)

    def _send(self, command: str, source: str) -> Awaitable[bytes]:
        return self._session.run_command(command, source=source)

    def _send_keycode(self, code: int) -> Awaitable[bytes]:
        return self._send(keyevent_command(code), "inputKeycode")

    def _send_text(self, text: str) -> Awaitable[bytes]:
        return self._send(text_command(text), "inputText")

    def _command_operation(self, command: str, source: str) -> Operation:
        def send() -> Awaitable[bytes]:
            return self._send(command, source)

        return dual_mode(send)

    def _build_press_surface(self) -> PressSurface:
        presses: dict[str, Operation] = {}
        long_presses: dict[str, Operation] = {}
        for name in REMOTE_KEYS:
            code = resolve_press_key(name, self._keycodes)
            if code is None:
                continue
            presses[name] = self._command_operation(keyevent_command(code), f"press.{name}")
            long_presses[name] = self._command_operation(
                long_press_command(self._input_device, code, self._long_press_duration),
                f"press.long.{name}",
            )
        return PressSurface(presses, CommandSurface("long press", long_presses))

    def _key_operation(self, name: str, code: int | None) -> Operation:
        keycode_command = keyevent_command(code) if code is not None else None
        source = f"keyboard.{name}"

        def send(force_keycode: bool = False) -> Awaitable[bytes]:
            if len(name) == 1 and not force_keycode:
                return self._send(text_command(name), source)
            if keycode_command is None:
                raise MissingKeycodeError(name)
            return self._send(keycode_command, source)

        operation = dual_mode(send)
        if keycode_command is not None:
            operation.keycode = self._command_operation(keycode_command, source)
        return operation

    def _shift_operation(self, name: str, shifted: str) -> Operation:
        # Only text can express a shifted key; the transport cannot hold
        # shift down while another key is pressed.
        source = f"keyboard.shift.{name}"

        def send(force_keycode: bool = False) -> Awaitable[bytes]:
            if force_keycode:
                raise MissingKeycodeError(f"shift+{name}")
            return self._send(text_command(shifted), source)

        return dual_mode(send)

    def _build_key_surface(self) -> KeySurface:
        keys: dict[str, Operation] = {}
        for name, code in self._keycodes.items():
            keys[name] = self._key_operation(name, code)
        for char in TEXT_ONLY_CHARACTERS:
            keys.setdefault(char, self._key_operation(char, None))

        shifted = {
            name: self._shift_operation(name, SHIFTED_CHARACTERS[name])
            for name in keys
            if name in SHIFTED_CHARACTERS and SHIFTED_CHARACTERS[name] != name
        }
        return KeySurface(keys, CommandSurface("shift", shifted))


__all__ = [
    "CommandDispatcher",
    "CommandSurface",
    "Keyboard",
    "KeySurface",
    "PressSurface",
    "normalise_name",
]
