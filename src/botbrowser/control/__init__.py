"""Local control endpoint for botbrowser.

A Unix socket through which an external controller process sends
refresh, key and text commands to the hosted browser window, plus the
client used on the controller side.
"""

from botbrowser.control.client import ControlClient, ControlClientError
from botbrowser.control.protocol import control_socket_path, format_message, parse_message
from botbrowser.control.server import ControlServer

__all__ = [
    "ControlClient",
    "ControlClientError",
    "ControlServer",
    "control_socket_path",
    "format_message",
    "parse_message",
]
