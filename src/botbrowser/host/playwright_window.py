"""Playwright adapters for the content surface and hosted window."""

from __future__ import annotations

import logging

from playwright.async_api import Page

from botbrowser.domain.models import CharEvent, KeyDownEvent, KeyUpEvent
from botbrowser.host.context import HostedWindow
from botbrowser.input.base import ContentSurface, InputSurfaceError

logger = logging.getLogger(__name__)


class PlaywrightSurface(ContentSurface):
    """Delivers input events to a Playwright page.

    Key-down and key-up go through ``page.keyboard.down/up``. Char events
    use ``insert_text`` so the page receives the character without any
    key-down or key-up.
    """

    def __init__(self, page: Page) -> None:
        self._page = page

    async def is_focused(self) -> bool:
        return bool(await self._page.evaluate("document.hasFocus()"))

    async def focus(self) -> None:
        await self._page.bring_to_front()

    async def send_input_event(self, event: KeyDownEvent | KeyUpEvent | CharEvent) -> None:
        keyboard = self._page.keyboard
        if isinstance(event, KeyDownEvent):
            await keyboard.down(event.key)
        elif isinstance(event, KeyUpEvent):
            await keyboard.up(event.key)
        elif isinstance(event, CharEvent):
            await keyboard.insert_text(event.key)
        else:
            raise InputSurfaceError(
                f"Unsupported input event: {event!r}",
                event_type=getattr(event, "event_type", ""),
            )


class PlaywrightWindow(HostedWindow):
    """A hosted window backed by one Playwright page."""

    def __init__(self, page: Page) -> None:
        self._page = page
        self._surface = PlaywrightSurface(page)

    @property
    def page(self) -> Page:
        return self._page

    @property
    def surface(self) -> PlaywrightSurface:
        return self._surface

    async def reload(self) -> None:
        logger.info("Reloading %s", self._page.url)
        await self._page.reload()

    def __repr__(self) -> str:
        return f"PlaywrightWindow(url={self._page.url!r})"
