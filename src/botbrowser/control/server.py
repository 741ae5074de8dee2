"""Unix socket server for the local control endpoint.

Receives text commands from a controller process and forwards them to
the input dispatcher or reloads the hosted window. The socket path
contains the browser's PID, so several instances can run side by side.

Messages end at a newline. Bytes left without one are handled as a
message once the sender goes quiet or disconnects, so newline-free
writes work too. Malformed messages are dropped without a reply. Handled
bytes are echoed back; the echo has no meaning beyond debugging.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from botbrowser.control.protocol import parse_message
from botbrowser.domain.models import KeyCommand, RefreshCommand, TextCommand
from botbrowser.host.context import HostContext
from botbrowser.input.dispatcher import InputDispatcher

logger = logging.getLogger(__name__)

# Max bytes read from a client per chunk
READ_CHUNK_SIZE = 4096

# Seconds of silence after which an unterminated message is handled
IDLE_FLUSH_DELAY = 0.05


class ControlServer:
    """Serves the control protocol on a Unix domain socket.

    Usage::

        server = ControlServer(context, InputDispatcher(), control_socket_path())
        async with server:
            await host.wait_closed()
    """

    def __init__(
        self,
        context: HostContext,
        dispatcher: InputDispatcher,
        path: str | Path,
    ) -> None:
        self._context = context
        self._dispatcher = dispatcher
        self._path = Path(path)
        self._server: asyncio.AbstractServer | None = None
        self._clients: set[asyncio.StreamWriter] = set()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    async def start(self) -> None:
        """Bind the socket and start accepting controllers."""
        if self._path.exists():
            logger.warning("Removing stale control socket %s", self._path)
            self._path.unlink()
        self._server = await asyncio.start_unix_server(self._handle_client, path=str(self._path))
        logger.info("Control endpoint listening on %s", self._path)

    async def stop(self) -> None:
        """Stop accepting controllers and remove the socket file."""
        if self._server is not None:
            self._server.close()
            # wait_closed() also waits for open connections
            for writer in list(self._clients):
                writer.close()
            await self._server.wait_closed()
            self._server = None
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        logger.info("Control endpoint stopped")

    async def handle_message(self, message: str) -> None:
        """Execute one control message against the current window.

        Does nothing when no window is hosted or the message is not a
        valid command. Faults from the window or its surface propagate.
        """
        window = self._context.window
        if window is None:
            logger.debug("No hosted window, ignoring %r", message)
            return

        command = parse_message(message)
        if command is None:
            logger.debug("Ignoring malformed message %r", message)
            return

        if isinstance(command, RefreshCommand):
            await window.reload()
        elif isinstance(command, KeyCommand):
            surface = window.surface
            if command.action == "keyClick":
                await self._dispatcher.key_click(surface, command.code)
            elif command.action == "keyDown":
                await self._dispatcher.key_down(surface, command.code)
            else:
                await self._dispatcher.key_up(surface, command.code)
        elif isinstance(command, TextCommand):
            await self._dispatcher.type_text(window.surface, command.text)

    async def handle_chunk(self, data: bytes) -> None:
        """Split received bytes into messages and handle them in order."""
        for segment in data.split(b"\n"):
            message = segment.decode("utf-8", errors="replace").rstrip("\r")
            if message:
                await self.handle_message(message)

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        logger.debug("Controller connected")
        self._clients.add(writer)
        # Bytes after the last newline, waiting for the rest of their line
        pending = b""
        try:
            while True:
                try:
                    data = await asyncio.wait_for(
                        reader.read(READ_CHUNK_SIZE),
                        timeout=IDLE_FLUSH_DELAY if pending else None,
                    )
                except asyncio.TimeoutError:
                    # Sender went quiet without a newline
                    await self._handle_and_echo(pending, writer)
                    pending = b""
                    continue
                if not data:
                    break
                complete, newline, pending = (pending + data).rpartition(b"\n")
                if newline:
                    await self._handle_and_echo(complete + newline, writer)
            if pending:
                await self.handle_chunk(pending)
        except (ConnectionError, OSError) as e:
            logger.warning("Control socket error: %s", e)
        finally:
            self._clients.discard(writer)
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionError, OSError):
                pass
            logger.debug("Controller disconnected")

    async def _handle_and_echo(self, data: bytes, writer: asyncio.StreamWriter) -> None:
        await self.handle_chunk(data)
        writer.write(data)
        await writer.drain()

    async def __aenter__(self) -> ControlServer:
        await self.start()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.stop()
