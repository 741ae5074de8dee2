"""Numeric key codes and their browser key names.

Controllers send Windows virtual-key / DOM ``keyCode`` numbers. The
browser input API wants key names, so every code is resolved through
two fixed tables before it reaches the page:

- ``SPECIAL_KEYS``: control, navigation, meta, numpad, function and
  lock keys (e.g. 13 -> "Enter").
- ``OEM_KEYS``: punctuation on the US layout (e.g. 188 -> ",").

Anything else is taken as a Unicode code point (65 -> "A").
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Highest valid Unicode code point
MAX_KEY_CODE: int = 0x10FFFF

# ---------------------------------------------------------------------------
# Special keys
# ---------------------------------------------------------------------------

SPECIAL_KEYS: Mapping[int, str] = MappingProxyType({
    # Control keys
    8: "Backspace",
    9: "Tab",
    13: "Enter",
    16: "Shift",
    17: "Control",
    18: "Alt",
    19: "Pause",
    20: "CapsLock",
    27: "Escape",
    32: "Space",
    # Navigation
    33: "PageUp",
    34: "PageDown",
    35: "End",
    36: "Home",
    37: "ArrowLeft",
    38: "ArrowUp",
    39: "ArrowRight",
    40: "ArrowDown",
    45: "Insert",
    46: "Delete",
    # Meta keys (left/right Windows or Command)
    91: "Meta",
    92: "Meta",
    93: "ContextMenu",
    # Numpad digits (96=Numpad0 .. 105=Numpad9)
    **{96 + i: f"Numpad{i}" for i in range(10)},
    # Numpad operators
    106: "NumpadMultiply",
    107: "NumpadAdd",
    108: "NumpadEnter",
    109: "NumpadSubtract",
    110: "NumpadDecimal",
    111: "NumpadDivide",
    # Function keys (112=F1 .. 123=F12)
    **{111 + i: f"F{i}" for i in range(1, 13)},
    # Lock keys
    144: "NumLock",
    145: "ScrollLock",
})

# ---------------------------------------------------------------------------
# OEM punctuation keys (US layout)
# ---------------------------------------------------------------------------

OEM_KEYS: Mapping[int, str] = MappingProxyType({
    186: ";",
    187: "=",
    188: ",",
    189: "-",
    190: ".",
    191: "/",
    192: "`",
    219: "[",
    220: "\\",
    221: "]",
    222: "'",
})


def _check_disjoint(*tables: Mapping[int, str]) -> None:
    """Raise ValueError if any code appears in more than one table."""
    seen: set[int] = set()
    for table in tables:
        overlap = seen & table.keys()
        if overlap:
            raise ValueError(f"Key codes mapped twice: {sorted(overlap)}")
        seen |= table.keys()


_check_disjoint(SPECIAL_KEYS, OEM_KEYS)


def resolve_key(code: int) -> str:
    """Convert a numeric key code to the key name the browser expects.

    Returns:
        The special-key name, the OEM character, or the character whose
        code point equals ``code``.

    Raises:
        ValueError: If ``code`` is negative or beyond the Unicode range.
    """
    if code in SPECIAL_KEYS:
        return SPECIAL_KEYS[code]
    if code in OEM_KEYS:
        return OEM_KEYS[code]
    if not 0 <= code <= MAX_KEY_CODE:
        raise ValueError(f"Key code out of range: {code!r}")
    return chr(code)
