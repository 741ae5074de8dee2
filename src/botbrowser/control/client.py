"""Controller-side client for the control socket.

Connects to a running browser's control endpoint and writes commands.
The server's echo is read and discarded in the background so it never
backs up the connection.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from botbrowser.control.protocol import (
    DEFAULT_SOCKET_DIR,
    DEFAULT_SOCKET_PREFIX,
    REFRESH,
    TEXT,
    control_socket_path,
    format_message,
)

logger = logging.getLogger(__name__)


class ControlClientError(Exception):
    """Raised when talking to the control endpoint fails."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class ControlClient:
    """Sends control commands to one browser instance.

    Usage::

        async with ControlClient.for_pid(browser_pid) as client:
            await client.key_click(13)
            await client.text("hello")
            await client.refresh()
    """

    def __init__(self, path: str | Path, timeout: float = 5.0) -> None:
        self._path = Path(path)
        self._timeout = timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._drain_task: asyncio.Task[None] | None = None

    @classmethod
    def for_pid(
        cls,
        pid: int,
        socket_dir: str | Path = DEFAULT_SOCKET_DIR,
        prefix: str = DEFAULT_SOCKET_PREFIX,
        timeout: float = 5.0,
    ) -> ControlClient:
        """Client for the browser process with the given PID."""
        return cls(control_socket_path(socket_dir, prefix, pid), timeout=timeout)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_connected(self) -> bool:
        return self._writer is not None

    async def connect(self) -> None:
        """Open the connection to the control socket."""
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_unix_connection(str(self._path)),
                timeout=self._timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise ControlClientError(
                f"Failed to connect to {self._path}: {e}", path=str(self._path)
            ) from e
        self._drain_task = asyncio.create_task(self._discard_echo(self._reader))
        logger.info("Connected to control endpoint %s", self._path)

    async def disconnect(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._writer is not None:
            self._writer.close()
            try:
                await self._writer.wait_closed()
            except (ConnectionError, OSError):
                pass
            self._writer = None
            self._reader = None
            logger.info("Disconnected from control endpoint")
        if self._drain_task is not None:
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                pass
            self._drain_task = None

    async def send(self, message: str) -> None:
        """Write one raw control message."""
        if self._writer is None:
            raise ControlClientError("Not connected to control endpoint", path=str(self._path))
        try:
            self._writer.write(f"{message}\n".encode())
            await asyncio.wait_for(self._writer.drain(), timeout=self._timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise ControlClientError(
                f"Failed to send {message!r}: {e}", path=str(self._path)
            ) from e
        logger.debug("Sent control message: %s", message[:50])

    async def refresh(self) -> None:
        await self.send(format_message(REFRESH))

    async def key_click(self, code: int) -> None:
        await self.send(format_message("keyClick", code))

    async def key_down(self, code: int) -> None:
        await self.send(format_message("keyDown", code))

    async def key_up(self, code: int) -> None:
        await self.send(format_message("keyUp", code))

    async def text(self, text: str) -> None:
        """Type ``text`` in the browser window.

        Newlines split messages on the wire, so text must not contain one.
        """
        if "\n" in text:
            raise ValueError("Text must not contain newlines")
        await self.send(format_message(TEXT, text))

    @staticmethod
    async def _discard_echo(reader: asyncio.StreamReader) -> None:
        while True:
            try:
                data = await reader.read(4096)
            except (ConnectionError, OSError):
                return
            if not data:
                return

    async def __aenter__(self) -> ControlClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()
