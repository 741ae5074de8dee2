"""Text protocol spoken on the control socket.

Each message is a ``|``-separated string:

    refresh               -> reload the hosted window
    keyClick|<code>       -> press + release key <code>
    keyDown|<code>        -> press key <code>
    keyUp|<code>          -> release key <code>
    text|<literal text>   -> type the text one character at a time

Only the first field is checked for ``refresh``; every other command
needs exactly two fields. Anything else is not a command.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from botbrowser.domain.models import KeyCommand, RefreshCommand, TextCommand

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"
REFRESH = "refresh"
KEY_ACTIONS = ("keyClick", "keyDown", "keyUp")
TEXT = "text"

DEFAULT_SOCKET_DIR = "/tmp"
DEFAULT_SOCKET_PREFIX = "darkbot_ipc_"


def control_socket_path(
    socket_dir: str | Path = DEFAULT_SOCKET_DIR,
    prefix: str = DEFAULT_SOCKET_PREFIX,
    pid: int | None = None,
) -> Path:
    """Socket path for the browser process ``pid`` (default: this process)."""
    if pid is None:
        pid = os.getpid()
    return Path(socket_dir) / f"{prefix}{pid}"


def parse_message(message: str) -> RefreshCommand | KeyCommand | TextCommand | None:
    """Parse one control message.

    Returns:
        The command, or None if the message is not a valid command
        (unknown action, wrong field count, non-numeric or out-of-range
        key code).
    """
    fields = message.split(FIELD_SEPARATOR)
    if fields[0] == REFRESH:
        return RefreshCommand()
    if len(fields) != 2:
        return None

    action, argument = fields
    if action == TEXT:
        return TextCommand(text=argument)
    if action in KEY_ACTIONS:
        try:
            return KeyCommand(action=action, code=int(argument))
        except (ValueError, ValidationError):
            logger.debug("Bad key code in %r", message)
            return None
    return None


def format_message(action: str, argument: str | int | None = None) -> str:
    """Build a control message from an action and its argument."""
    if argument is None:
        return action
    return f"{action}{FIELD_SEPARATOR}{argument}"
