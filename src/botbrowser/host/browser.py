"""Browser host for the game client.

Launches a headed Chromium through Playwright and manages the game
windows: session cookie injection, start URL, client user agent, pinned
window title, popups redirected into the opener, and Ctrl+N for an
extra window.
"""

from __future__ import annotations

import asyncio
import json
import logging

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from botbrowser.config.settings import BrowserConfig
from botbrowser.host.context import HostContext
from botbrowser.host.playwright_window import PlaywrightWindow

logger = logging.getLogger(__name__)

# Name of the page binding the Ctrl+N script calls
NEW_WINDOW_BINDING = "__botbrowserNewWindow"

# Keeps document.title fixed so page title updates never reach the window
TITLE_PIN_SCRIPT = """
(() => {
  const fixed = %s;
  Object.defineProperty(Document.prototype, 'title', {
    configurable: true,
    get: () => fixed,
    set: () => {},
  });
  const pin = () => {
    let el = document.querySelector('title');
    if (!el && document.head) {
      el = document.head.appendChild(document.createElement('title'));
    }
    if (el && el.textContent !== fixed) {
      el.textContent = fixed;
    }
  };
  document.addEventListener('DOMContentLoaded', () => {
    pin();
    if (document.head) {
      new MutationObserver(pin).observe(document.head, {
        childList: true, subtree: true, characterData: true,
      });
    }
  });
})();
"""

# Ctrl+N on key release asks the host for another window
NEW_WINDOW_SHORTCUT_SCRIPT = """
window.addEventListener('keyup', (event) => {
  if (event.ctrlKey && event.code === 'KeyN' && document.hasFocus()) {
    window.%s();
  }
}, true);
""" % NEW_WINDOW_BINDING


def build_start_url(
    url: str | None,
    sid: str | None,
    launch_game: bool = False,
    default_url: str = "https://darkorbit.com",
) -> str:
    """Build the first URL a window loads.

    With both a server URL and a session id the window opens the internal
    start page (or the game map directly when ``launch_game`` is set).
    Otherwise it falls back to ``default_url``.
    """
    if not (url and sid):
        return default_url
    action = "internalMapRevolution" if launch_game else "internalStart"
    return f"{url.rstrip('/')}/indexInternal.es?action={action}"


class BrowserHost:
    """Owns the Playwright browser and every game window.

    Usage::

        context = HostContext()
        async with BrowserHost(BrowserConfig(), context) as host:
            window = await host.open_window(url, sid, launch_game=True)
            context.window_created(window)
            await host.wait_closed()
    """

    def __init__(self, config: BrowserConfig, context: HostContext) -> None:
        self._config = config
        self._context = context
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._browser_context: BrowserContext | None = None
        self._windows: list[PlaywrightWindow] = []
        self._all_closed = asyncio.Event()
        # Arguments of the first window, reused for Ctrl+N windows
        self._url: str | None = None
        self._sid: str | None = None

    @property
    def is_running(self) -> bool:
        return self._browser_context is not None

    @property
    def windows(self) -> list[PlaywrightWindow]:
        return list(self._windows)

    async def start(self) -> None:
        """Launch Chromium and prepare the shared browser context."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._config.headless,
            args=list(self._config.chromium_args),
        )
        self._browser_context = await self._browser.new_context(
            user_agent=self._config.user_agent,
            viewport={"width": self._config.width, "height": self._config.height},
        )
        await self._browser_context.add_init_script(
            TITLE_PIN_SCRIPT % json.dumps(self._config.title)
        )
        await self._browser_context.add_init_script(NEW_WINDOW_SHORTCUT_SCRIPT)
        await self._browser_context.expose_binding(NEW_WINDOW_BINDING, self._on_new_window_shortcut)
        logger.info(
            "Browser started (%dx%d, ua=%s)",
            self._config.width, self._config.height, self._config.user_agent,
        )

    async def stop(self) -> None:
        """Close every window, the browser and Playwright."""
        if self._browser_context is not None:
            try:
                await self._browser_context.close()
            except PlaywrightError as e:
                logger.debug("Browser context close error: %s", e)
            self._browser_context = None
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.debug("Browser close error: %s", e)
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self._windows.clear()
        self._all_closed.set()
        logger.info("Browser stopped")

    async def open_window(
        self,
        url: str | None = None,
        sid: str | None = None,
        launch_game: bool = False,
    ) -> PlaywrightWindow:
        """Open a new game window and start loading it.

        Navigation failures are logged; the window stays open so it can
        be refreshed later.
        """
        if self._browser_context is None:
            raise RuntimeError("Browser host is not started")
        if not self._windows:
            self._url, self._sid = url, sid

        page = await self._browser_context.new_page()
        window = PlaywrightWindow(page)
        self._windows.append(window)
        self._all_closed.clear()
        page.on("popup", self._on_popup)
        page.on("close", lambda _page: self._on_window_closed(window))

        if url and sid:
            await self._browser_context.add_cookies(
                [{"url": url, "name": self._config.session_cookie, "value": sid}]
            )
        start_url = build_start_url(url, sid, launch_game, self._config.default_url)
        logger.info("Opening window at %s (launch=%s)", start_url, launch_game)
        try:
            await page.goto(start_url)
        except PlaywrightError as e:
            logger.warning("Failed to load %s: %s", start_url, e)
        return window

    async def wait_closed(self) -> None:
        """Wait until the last window has been closed."""
        await self._all_closed.wait()

    async def _on_popup(self, popup: Page) -> None:
        """Load a popup's URL in its opener instead of a new window."""
        opener = await popup.opener()
        try:
            await popup.wait_for_load_state("domcontentloaded")
        except PlaywrightError as e:
            logger.debug("Popup did not load: %s", e)
        target = popup.url
        await popup.close()
        if opener is None or not target or target == "about:blank":
            return
        logger.info("Redirecting new window to %s", target)
        try:
            await opener.goto(target)
        except PlaywrightError as e:
            logger.warning("Failed to load %s: %s", target, e)

    async def _on_new_window_shortcut(self, source: dict) -> None:
        logger.info("New window requested from shortcut")
        await self.open_window(self._url, self._sid)

    def _on_window_closed(self, window: PlaywrightWindow) -> None:
        if window in self._windows:
            self._windows.remove(window)
        self._context.window_closed(window)
        if not self._windows:
            logger.info("All windows closed")
            self._all_closed.set()

    async def __aenter__(self) -> BrowserHost:
        await self.start()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.stop()
