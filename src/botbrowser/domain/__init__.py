"""Domain models for botbrowser.

This package contains the input events sent to a content surface and the
commands parsed from the control socket. All models use Pydantic v2.
"""

from botbrowser.domain.models import (
    CharEvent,
    ControlCommand,
    InputEvent,
    KeyCommand,
    KeyDownEvent,
    KeyUpEvent,
    RefreshCommand,
    TextCommand,
)

__all__ = [
    "CharEvent",
    "ControlCommand",
    "InputEvent",
    "KeyCommand",
    "KeyDownEvent",
    "KeyUpEvent",
    "RefreshCommand",
    "TextCommand",
]
