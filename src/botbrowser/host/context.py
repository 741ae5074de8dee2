"""Shared host state: which window the control socket talks to."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from botbrowser.input.base import ContentSurface

logger = logging.getLogger(__name__)


class HostedWindow(ABC):
    """A browser window hosting the game client."""

    @property
    @abstractmethod
    def surface(self) -> ContentSurface:
        """The content surface that receives synthetic input."""
        ...

    @abstractmethod
    async def reload(self) -> None:
        """Reload the window's content."""
        ...


class HostContext:
    """Holds the current hosted window.

    The browser host reports window lifecycle through ``window_created``
    and ``window_closed``; the control server only reads ``window``.
    Extra windows opened from a shortcut are not reported as created and
    never replace the current one.
    """

    def __init__(self) -> None:
        self._window: HostedWindow | None = None

    @property
    def window(self) -> HostedWindow | None:
        return self._window

    def window_created(self, window: HostedWindow) -> None:
        """Make ``window`` the target of control commands."""
        self._window = window
        logger.info("Control target set to %r", window)

    def window_closed(self, window: HostedWindow) -> None:
        """Forget ``window`` if it is the current target."""
        if self._window is window:
            self._window = None
            logger.info("Control target closed, commands will be ignored")
