"""Synthetic input module for botbrowser.

Resolves key codes and delivers key and text input to the content
surface of a hosted window.

Public API:
    ContentSurface -- Abstract base class for input targets
    InputDispatcher -- Key click/down/up and text typing
"""

from botbrowser.input.base import ContentSurface, InputSurfaceError
from botbrowser.input.dispatcher import DEFAULT_TYPE_DELAY, InputDispatcher

__all__ = ["ContentSurface", "DEFAULT_TYPE_DELAY", "InputDispatcher", "InputSurfaceError"]
