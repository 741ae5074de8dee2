"""Synthetic keyboard input for a content surface.

Key operations resolve a numeric code and emit key-down and/or key-up
events. Text typing emits one character event per character with a short
pause between them, which keeps the page's input queue from being flooded
and looks like human typing.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from botbrowser.domain.models import CharEvent, KeyDownEvent, KeyUpEvent
from botbrowser.input.base import ContentSurface
from botbrowser.keys.codes import resolve_key

logger = logging.getLogger(__name__)

# Default pause between typed characters (seconds)
DEFAULT_TYPE_DELAY = 0.01


class InputDispatcher:
    """Sends key and text input to a content surface.

    All operations run on the caller's event loop. Key operations only
    suspend while awaiting the surface; ``type_text`` additionally sleeps
    after every character, so other commands may land between two
    characters unless ``serialize`` is set.

    Usage::

        dispatcher = InputDispatcher()
        await dispatcher.key_click(surface, 13)      # Enter
        await dispatcher.type_text(surface, "hello")
    """

    def __init__(
        self,
        type_delay: float = DEFAULT_TYPE_DELAY,
        serialize: bool = False,
    ) -> None:
        self._type_delay = type_delay
        # One lock for every surface: commands run strictly first-come first-served
        self._lock: asyncio.Lock | None = asyncio.Lock() if serialize else None

    @property
    def type_delay(self) -> float:
        return self._type_delay

    @property
    def serialized(self) -> bool:
        return self._lock is not None

    @asynccontextmanager
    async def _turn(self) -> AsyncIterator[None]:
        if self._lock is None:
            yield
            return
        async with self._lock:
            yield

    async def dispatch(
        self,
        surface: ContentSurface,
        code: int,
        press: bool,
        release: bool,
    ) -> None:
        """Focus the surface, then send key-down and/or key-up for ``code``.

        Press always comes before release. With both flags false only the
        focus step happens.

        Raises:
            ValueError: If ``code`` cannot be resolved to a key.
        """
        async with self._turn():
            await surface.ensure_focused()
            key = resolve_key(code)
            if press:
                await surface.send_input_event(KeyDownEvent(key=key))
            if release:
                await surface.send_input_event(KeyUpEvent(key=key))
            logger.debug("Dispatched %s (code=%d press=%s release=%s)", key, code, press, release)

    async def key_click(self, surface: ContentSurface, code: int) -> None:
        """Press and release a key."""
        await self.dispatch(surface, code, press=True, release=True)

    async def key_down(self, surface: ContentSurface, code: int) -> None:
        """Press a key without releasing it."""
        await self.dispatch(surface, code, press=True, release=False)

    async def key_up(self, surface: ContentSurface, code: int) -> None:
        """Release a previously pressed key."""
        await self.dispatch(surface, code, press=False, release=True)

    async def type_text(self, surface: ContentSurface, text: str) -> None:
        """Type ``text`` one character at a time.

        Each character is sent as a single char event followed by a
        ``type_delay`` pause. Cancelling the awaiting task stops typing
        after the character in flight.
        """
        async with self._turn():
            await surface.ensure_focused()
            for char in text:
                await surface.send_input_event(CharEvent(key=char))
                await asyncio.sleep(self._type_delay)
            logger.debug("Typed %d chars: %s", len(text), text[:50])
