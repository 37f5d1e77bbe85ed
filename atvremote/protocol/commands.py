"""Shell command strings sent through the session handle."""

from __future__ import annotations

_TEXT_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "$": "\\$", "`": "\\`"})


def keyevent_command(code: int) -> str:
    return f"input keyevent {int(code)}"


def long_press_command(input_device: str, code: int, duration: float = 1.0) -> str:
    """Press down, hold for *duration* seconds, then release on *input_device*."""
    code = int(code)
    return (
        f"sendevent {input_device} 1 {code} 1 && "
        f"sleep {duration:g} && "
        f"sendevent {input_device} 1 {code} 0"
    )


def text_command(text: str) -> str:
    # `input text` treats %s as a space.
    escaped = text.translate(_TEXT_ESCAPES).replace(" ", "%s")
    return f'input text "{escaped}"'


def settings_command(mode: str, namespace: str, key: str, value: object = None) -> str:
    if mode == "set":
        return f"settings put {namespace} {key} {value}"
    if mode == "get":
        return f"settings get {namespace} {key}"
    raise ValueError(f"Unknown settings mode {mode!r}; expected 'get' or 'set'")


__all__ = ["keyevent_command", "long_press_command", "settings_command", "text_command"]
