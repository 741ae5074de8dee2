"""Abstract base class for content surfaces.

A content surface is the renderable area of a hosted window that
synthetic input is delivered to. The dispatcher only borrows a surface
for the duration of a call; the hosting window owns it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from botbrowser.domain.models import CharEvent, KeyDownEvent, KeyUpEvent

logger = logging.getLogger(__name__)


class ContentSurface(ABC):
    """Abstract interface for a surface that accepts synthetic input.

    Implementations wrap a concrete browser page (see
    ``botbrowser.host.playwright_window.PlaywrightSurface``). Faults from
    the underlying page, such as a closed or crashed target, are raised
    as-is and never translated.
    """

    @abstractmethod
    async def is_focused(self) -> bool:
        """Whether the surface currently has input focus."""
        ...

    @abstractmethod
    async def focus(self) -> None:
        """Give the surface input focus."""
        ...

    @abstractmethod
    async def send_input_event(self, event: KeyDownEvent | KeyUpEvent | CharEvent) -> None:
        """Deliver one synthetic input event to the surface.

        Raises:
            InputSurfaceError: If the surface does not support the event type.
        """
        ...

    async def ensure_focused(self) -> None:
        """Focus the surface unless it already has focus."""
        if not await self.is_focused():
            logger.debug("Surface not focused, focusing")
            await self.focus()


class InputSurfaceError(Exception):
    """Raised when a surface cannot accept an input event."""

    def __init__(self, message: str, event_type: str = "") -> None:
        super().__init__(message)
        self.event_type = event_type
