"""Core domain models for the botbrowser system.

Two families of value objects flow through the system: the synthetic
input events delivered to a window's content surface, and the control
commands parsed from messages on the control socket. Both are short-lived
and never persisted.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from botbrowser.keys.codes import MAX_KEY_CODE


# ---------------------------------------------------------------------------
# Input Event Models (discriminated union)
# ---------------------------------------------------------------------------


class KeyDownEvent(BaseModel):
    """A key press delivered to the content surface."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["keyDown"] = "keyDown"
    key: str = Field(description="Resolved key name (e.g., 'Enter', 'ArrowLeft', 'A')")


class KeyUpEvent(BaseModel):
    """A key release delivered to the content surface."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["keyUp"] = "keyUp"
    key: str = Field(description="Resolved key name (e.g., 'Enter', 'ArrowLeft', 'A')")


class CharEvent(BaseModel):
    """A single typed character, without key-down or key-up."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["char"] = "char"
    key: str = Field(description="The literal character to insert")


InputEvent = Annotated[
    Union[KeyDownEvent, KeyUpEvent, CharEvent],
    Field(discriminator="event_type"),
]


# ---------------------------------------------------------------------------
# Control Command Models
# ---------------------------------------------------------------------------


class RefreshCommand(BaseModel):
    """Reload the hosted window's content."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["refresh"] = "refresh"


class KeyCommand(BaseModel):
    """Press and/or release a key identified by its numeric code."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["key"] = "key"
    action: Literal["keyClick", "keyDown", "keyUp"] = Field(
        description="Which half of a keystroke to send (or both for keyClick)"
    )
    code: int = Field(ge=0, le=MAX_KEY_CODE, description="Numeric key code")


class TextCommand(BaseModel):
    """Type a literal string character by character."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["text"] = "text"
    text: str = Field(description="Text to type")


ControlCommand = Annotated[
    Union[RefreshCommand, KeyCommand, TextCommand],
    Field(discriminator="command_type"),
]
