"""Browser hosting module for botbrowser.

Runs the Chromium window that hosts the game client and tracks which
window the control socket should drive.
"""

from botbrowser.host.context import HostContext, HostedWindow

__all__ = ["BrowserHost", "HostContext", "HostedWindow", "PlaywrightWindow"]


def __getattr__(name: str) -> type:
    """Lazy import for the Playwright-backed implementations."""
    if name == "BrowserHost":
        from botbrowser.host.browser import BrowserHost
        return BrowserHost
    if name == "PlaywrightWindow":
        from botbrowser.host.playwright_window import PlaywrightWindow
        return PlaywrightWindow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
