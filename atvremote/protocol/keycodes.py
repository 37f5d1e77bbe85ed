"""Static command tables: Android key codes, remote keys and keyboard keys.

Values follow ``android.view.KeyEvent``. Nothing here is mutated at runtime;
the dispatcher resolves names against these tables once at construction.
"""

from __future__ import annotations

import string
from types import MappingProxyType
from typing import Final, Mapping

_KEYCODES: dict[str, int] = {
    "home": 3,
    "back": 4,
    "call": 5,
    "endcall": 6,
    "star": 17,
    "pound": 18,
    "dpad_up": 19,
    "dpad_down": 20,
    "dpad_left": 21,
    "dpad_right": 22,
    "dpad_center": 23,
    "volume_up": 24,
    "volume_down": 25,
    "power": 26,
    "camera": 27,
    "clear": 28,
    "comma": 55,
    "period": 56,
    "alt_left": 57,
    "alt_right": 58,
    "shift_left": 59,
    "shift_right": 60,
    "tab": 61,
    "space": 62,
    "sym": 63,
    "explorer": 64,
    "envelope": 65,
    "enter": 66,
    "del": 67,
    "grave": 68,
    "minus": 69,
    "equals": 70,
    "left_bracket": 71,
    "right_bracket": 72,
    "backslash": 73,
    "semicolon": 74,
    "apostrophe": 75,
    "slash": 76,
    "at": 77,
    "num": 78,
    "headsethook": 79,
    "focus": 80,
    "plus": 81,
    "menu": 82,
    "notification": 83,
    "search": 84,
    "play_pause": 85,
    "stop": 86,
    "next": 87,
    "previous": 88,
    "rewind": 89,
    "fast_forward": 90,
    "mute": 91,
    "page_up": 92,
    "page_down": 93,
    "escape": 111,
    "forward_del": 112,
    "ctrl_left": 113,
    "ctrl_right": 114,
    "move_home": 122,
    "move_end": 123,
    "insert": 124,
    "forward": 125,
    "media_play": 126,
    "media_pause": 127,
    "media_close": 128,
    "media_eject": 129,
    "media_record": 130,
    "volume_mute": 164,
    "info": 165,
    "channel_up": 166,
    "channel_down": 167,
    "zoom_in": 168,
    "zoom_out": 169,
    "tv": 170,
    "guide": 172,
    "dvr": 173,
    "bookmark": 174,
    "captions": 175,
    "settings": 176,
    "tv_power": 177,
    "tv_input": 178,
    "app_switch": 187,
    "language_switch": 204,
    "assist": 219,
    "brightness_down": 220,
    "brightness_up": 221,
    "sleep": 223,
    "wakeup": 224,
    "media_skip_forward": 272,
    "media_skip_backward": 273,
    "all_apps": 284,
}
for _offset, _letter in enumerate(string.ascii_lowercase):
    _KEYCODES[_letter] = 29 + _offset
for _digit in range(10):
    _KEYCODES[str(_digit)] = 7 + _digit

# Single-character keys that also have a code.
_SYMBOL_KEYCODES: dict[str, str] = {
    ",": "comma",
    ".": "period",
    "`": "grave",
    "-": "minus",
    "=": "equals",
    "[": "left_bracket",
    "]": "right_bracket",
    "\\": "backslash",
    ";": "semicolon",
    "'": "apostrophe",
    "/": "slash",
    "@": "at",
    "+": "plus",
    "*": "star",
    "#": "pound",
}
for _char, _name in _SYMBOL_KEYCODES.items():
    _KEYCODES[_char] = _KEYCODES[_name]

KEYCODES: Final[Mapping[str, int]] = MappingProxyType(_KEYCODES)

# Characters typeable only as text; the transport has no single code for them.
TEXT_ONLY_CHARACTERS: Final[tuple[str, ...]] = tuple('!$%^&()_{}|:"<>?~')

# US layout: base character -> character produced with shift held.
SHIFTED_CHARACTERS: Final[Mapping[str, str]] = MappingProxyType(
    {
        **{letter: letter.upper() for letter in string.ascii_lowercase},
        "1": "!",
        "2": "@",
        "3": "#",
        "4": "$",
        "5": "%",
        "6": "^",
        "7": "&",
        "8": "*",
        "9": "(",
        "0": ")",
        "`": "~",
        "-": "_",
        "=": "+",
        "[": "{",
        "]": "}",
        "\\": "|",
        ";": ":",
        "'": '"',
        ",": "<",
        ".": ">",
        "/": "?",
    }
)

# Buttons found on Android TV / Fire TV remotes. Colour buttons are left out.
REMOTE_KEYS: Final[tuple[str, ...]] = (
    "home",
    "back",
    "menu",
    "ok",
    "select",
    "up",
    "down",
    "left",
    "right",
    "dpad_up",
    "dpad_down",
    "dpad_left",
    "dpad_right",
    "dpad_center",
    "play",
    "pause",
    "play_pause",
    "stop",
    "rewind",
    "fast_forward",
    "next",
    "previous",
    "media_record",
    "volume_up",
    "volume_down",
    "volume_mute",
    "mute",
    "power",
    "sleep",
    "wakeup",
    "input",
    "channel_up",
    "channel_down",
    "guide",
    "info",
    "settings",
    "search",
    "assist",
    "captions",
    "app_switch",
    "all_apps",
    *(f"number{digit}" for digit in range(10)),
)

# Semantic name -> candidate key codes, first present one wins.
PRESS_ALIASES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "ok": ("dpad_center", "ok"),
        "select": ("dpad_center", "ok"),
        "up": ("dpad_up",),
        "down": ("dpad_down",),
        "left": ("dpad_left",),
        "right": ("dpad_right",),
        "play": ("media_play", "play_pause"),
        "pause": ("media_pause", "play_pause"),
        "volume_mute": ("volume_mute", "mute"),
        "mute": ("volume_mute", "mute"),
        "input": ("tv_input",),
    }
)

NUMBER_KEY_PREFIX: Final[str] = "number"


def resolve_press_key(name: str, keycodes: Mapping[str, int] = KEYCODES) -> int | None:
    """Resolve a remote key name to a key code, or ``None`` if it has none."""
    if name in PRESS_ALIASES:
        candidates: tuple[str, ...] = PRESS_ALIASES[name]
    elif name.startswith(NUMBER_KEY_PREFIX) and name[len(NUMBER_KEY_PREFIX) :].isdigit():
        candidates = (name[len(NUMBER_KEY_PREFIX) :],)
    else:
        candidates = (name,)
    for candidate in candidates:
        code = keycodes.get(candidate)
        if code is not None:
            return code
    return None


__all__ = [
    "KEYCODES",
    "NUMBER_KEY_PREFIX",
    "PRESS_ALIASES",
    "REMOTE_KEYS",
    "SHIFTED_CHARACTERS",
    "TEXT_ONLY_CHARACTERS",
    "resolve_press_key",
]
