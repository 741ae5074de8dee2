"""Shared test fixtures for the botbrowser test suite.

Provides a recording content surface, a fake hosted window and a host
context wired to it, so the dispatcher and control server can be tested
without a real browser.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from botbrowser.domain.models import CharEvent, KeyDownEvent, KeyUpEvent
from botbrowser.host.context import HostContext, HostedWindow
from botbrowser.input.base import ContentSurface
from botbrowser.input.dispatcher import InputDispatcher


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class RecordingSurface(ContentSurface):
    """A content surface that records every call in order."""

    def __init__(self, focused: bool = True) -> None:
        self.focused = focused
        self.focus_calls = 0
        self.events: list[KeyDownEvent | KeyUpEvent | CharEvent] = []

    async def is_focused(self) -> bool:
        return self.focused

    async def focus(self) -> None:
        self.focus_calls += 1
        self.focused = True

    async def send_input_event(self, event: KeyDownEvent | KeyUpEvent | CharEvent) -> None:
        self.events.append(event)


class FakeWindow(HostedWindow):
    """A hosted window with a recording surface and a mocked reload."""

    def __init__(self, surface: RecordingSurface) -> None:
        self._surface = surface
        self.reload_mock = AsyncMock()

    @property
    def surface(self) -> RecordingSurface:
        return self._surface

    async def reload(self) -> None:
        await self.reload_mock()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def surface() -> RecordingSurface:
    """A focused recording surface."""
    return RecordingSurface()


@pytest.fixture
def unfocused_surface() -> RecordingSurface:
    """A recording surface that starts without focus."""
    return RecordingSurface(focused=False)


@pytest.fixture
def window(surface: RecordingSurface) -> FakeWindow:
    """A fake hosted window around the recording surface."""
    return FakeWindow(surface)


@pytest.fixture
def host_context(window: FakeWindow) -> HostContext:
    """A host context whose current window is the fake window."""
    context = HostContext()
    context.window_created(window)
    return context


@pytest.fixture
def dispatcher() -> InputDispatcher:
    """A dispatcher with no typing delay."""
    return InputDispatcher(type_delay=0.0)
