"""Tests for the control socket server."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from botbrowser.control.server import ControlServer
from botbrowser.domain.models import CharEvent, KeyDownEvent, KeyUpEvent
from botbrowser.host.context import HostContext
from botbrowser.input.dispatcher import InputDispatcher


@pytest.fixture
def server(host_context: HostContext, dispatcher: InputDispatcher, tmp_path: Path) -> ControlServer:
    return ControlServer(host_context, dispatcher, tmp_path / "ctl.sock")


@pytest.fixture
def socket_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """A short directory path, AF_UNIX paths are limited to ~108 bytes."""
    return tmp_path_factory.mktemp("ctl")


# ===================================================================
# Message routing
# ===================================================================

class TestKeyMessages:
    @pytest.mark.asyncio
    async def test_key_click(self, server: ControlServer, surface, window) -> None:
        await server.handle_message("keyClick|65")
        assert surface.events == [KeyDownEvent(key="A"), KeyUpEvent(key="A")]
        window.reload_mock.assert_not_called()

    @pytest.mark.asyncio
    async def test_key_click_matches_direct_dispatch(
        self, server: ControlServer, surface, unfocused_surface, dispatcher: InputDispatcher
    ) -> None:
        await server.handle_message("keyClick|65")
        await dispatcher.key_click(unfocused_surface, 65)
        assert surface.events == unfocused_surface.events

    @pytest.mark.asyncio
    async def test_key_down(self, server: ControlServer, surface) -> None:
        await server.handle_message("keyDown|13")
        assert surface.events == [KeyDownEvent(key="Enter")]

    @pytest.mark.asyncio
    async def test_key_up(self, server: ControlServer, surface) -> None:
        await server.handle_message("keyUp|13")
        assert surface.events == [KeyUpEvent(key="Enter")]

    @pytest.mark.asyncio
    async def test_unfocused_surface_is_focused(
        self, host_context: HostContext, dispatcher: InputDispatcher, unfocused_surface, tmp_path: Path
    ) -> None:
        window = host_context.window
        window._surface = unfocused_surface
        srv = ControlServer(host_context, dispatcher, tmp_path / "ctl.sock")
        await srv.handle_message("keyClick|65")
        assert unfocused_surface.focus_calls == 1
        assert len(unfocused_surface.events) == 2


class TestTextMessages:
    @pytest.mark.asyncio
    async def test_text(self, server: ControlServer, surface) -> None:
        await server.handle_message("text|hi")
        assert surface.events == [CharEvent(key="h"), CharEvent(key="i")]


class TestRefreshMessages:
    @pytest.mark.asyncio
    async def test_refresh(self, server: ControlServer, window, surface) -> None:
        await server.handle_message("refresh")
        window.reload_mock.assert_awaited_once()
        assert surface.events == []

    @pytest.mark.asyncio
    async def test_refresh_with_extra_fields(self, server: ControlServer, window, surface) -> None:
        await server.handle_message("refresh|anything|ignored")
        window.reload_mock.assert_awaited_once()
        assert surface.events == []


class TestIgnoredMessages:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "message",
        ["bogusAction|65", "keyClick", "keyClick|1|2", "keyClick|abc", "text|a|b", "hello"],
    )
    async def test_malformed_is_ignored(
        self, server: ControlServer, window, surface, message: str
    ) -> None:
        await server.handle_message(message)
        assert surface.events == []
        assert surface.focus_calls == 0
        window.reload_mock.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["refresh", "keyClick|65", "text|abc", "bogus"])
    async def test_no_window_is_noop(self, tmp_path: Path, message: str) -> None:
        dispatcher = AsyncMock(spec=InputDispatcher)
        srv = ControlServer(HostContext(), dispatcher, tmp_path / "ctl.sock")
        await srv.handle_message(message)
        assert dispatcher.mock_calls == []

    @pytest.mark.asyncio
    async def test_closed_window_is_noop(
        self, server: ControlServer, host_context: HostContext, window, surface
    ) -> None:
        host_context.window_closed(window)
        await server.handle_message("keyClick|65")
        await server.handle_message("refresh")
        assert surface.events == []
        window.reload_mock.assert_not_called()


class TestSurfaceFaults:
    @pytest.mark.asyncio
    async def test_surface_fault_propagates(self, server: ControlServer, surface) -> None:
        surface.send_input_event = AsyncMock(side_effect=RuntimeError("Target closed"))
        with pytest.raises(RuntimeError, match="Target closed"):
            await server.handle_message("keyClick|65")


class TestHandleChunk:
    @pytest.mark.asyncio
    async def test_newline_separated_messages(self, server: ControlServer, surface, window) -> None:
        await server.handle_chunk(b"keyDown|16\r\nkeyUp|16\n\nrefresh\n")
        assert surface.events == [KeyDownEvent(key="Shift"), KeyUpEvent(key="Shift")]
        window.reload_mock.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_chunk_without_newline(self, server: ControlServer, surface) -> None:
        await server.handle_chunk(b"keyClick|13")
        assert surface.events == [KeyDownEvent(key="Enter"), KeyUpEvent(key="Enter")]

    @pytest.mark.asyncio
    async def test_utf8_text(self, server: ControlServer, surface) -> None:
        await server.handle_chunk("text|é!".encode())
        assert surface.events == [CharEvent(key="é"), CharEvent(key="!")]


# ===================================================================
# Socket round trip
# ===================================================================

class TestSocketServer:
    @pytest.mark.asyncio
    async def test_start_and_stop(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path
    ) -> None:
        path = socket_dir / "s"
        srv = ControlServer(host_context, dispatcher, path)
        await srv.start()
        assert srv.is_serving
        assert path.exists()
        await srv.stop()
        assert not srv.is_serving
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_stale_socket_file_is_replaced(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path
    ) -> None:
        path = socket_dir / "s"
        path.write_text("stale")
        async with ControlServer(host_context, dispatcher, path) as srv:
            assert srv.is_serving

    @pytest.mark.asyncio
    async def test_message_is_handled_and_echoed(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        async with ControlServer(host_context, dispatcher, path):
            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(b"keyClick|13")
            await writer.drain()
            echo = await asyncio.wait_for(reader.read(100), timeout=2.0)
            writer.close()
            await writer.wait_closed()
        assert echo == b"keyClick|13"
        assert surface.events == [KeyDownEvent(key="Enter"), KeyUpEvent(key="Enter")]

    @pytest.mark.asyncio
    async def test_malformed_message_still_echoed(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        async with ControlServer(host_context, dispatcher, path):
            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(b"bogusAction|65")
            await writer.drain()
            echo = await asyncio.wait_for(reader.read(100), timeout=2.0)
            writer.close()
            await writer.wait_closed()
        assert echo == b"bogusAction|65"
        assert surface.events == []

    @pytest.mark.asyncio
    async def test_server_survives_client_disconnect(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        async with ControlServer(host_context, dispatcher, path) as srv:
            _, first = await asyncio.open_unix_connection(str(path))
            first.close()
            await first.wait_closed()

            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(b"keyDown|65")
            await writer.drain()
            await asyncio.wait_for(reader.read(100), timeout=2.0)
            writer.close()
            await writer.wait_closed()
            assert srv.is_serving
        assert surface.events == [KeyDownEvent(key="A")]


class TestSocketFraming:
    @staticmethod
    def _typed(surface) -> str:
        return "".join(event.key for event in surface.events)

    @pytest.mark.asyncio
    async def test_long_text_spans_reads(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        payload = b"text|" + b"a" * 5000 + b"\n"
        async with ControlServer(host_context, dispatcher, path):
            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(payload)
            await writer.drain()
            echo = await asyncio.wait_for(reader.readexactly(len(payload)), timeout=5.0)
            writer.close()
            await writer.wait_closed()
        assert echo == payload
        assert self._typed(surface) == "a" * 5000

    @pytest.mark.asyncio
    async def test_multibyte_char_on_read_boundary(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        text = "b" * 4090 + "ééé"
        payload = f"text|{text}\n".encode()
        # The first "é" occupies bytes 4095 and 4096
        assert payload[4095:4097] == "é".encode()
        async with ControlServer(host_context, dispatcher, path):
            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(payload)
            await writer.drain()
            await asyncio.wait_for(reader.readexactly(len(payload)), timeout=5.0)
            writer.close()
            await writer.wait_closed()
        assert self._typed(surface) == text

    @pytest.mark.asyncio
    async def test_message_split_across_writes(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        async with ControlServer(host_context, dispatcher, path):
            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(b"keyCl")
            await writer.drain()
            writer.write(b"ick|13\nkeyDown|16\n")
            await writer.drain()
            echo = await asyncio.wait_for(reader.readexactly(23), timeout=2.0)
            writer.close()
            await writer.wait_closed()
        assert echo == b"keyClick|13\nkeyDown|16\n"
        assert surface.events == [
            KeyDownEvent(key="Enter"),
            KeyUpEvent(key="Enter"),
            KeyDownEvent(key="Shift"),
        ]

    @pytest.mark.asyncio
    async def test_unterminated_message_handled_at_eof(
        self, host_context: HostContext, dispatcher: InputDispatcher, socket_dir: Path, surface
    ) -> None:
        path = socket_dir / "s"
        async with ControlServer(host_context, dispatcher, path):
            reader, writer = await asyncio.open_unix_connection(str(path))
            writer.write(b"keyDown|65")
            writer.write_eof()
            # The server closes its side once the leftover is handled
            await asyncio.wait_for(reader.read(), timeout=2.0)
            writer.close()
            await writer.wait_closed()
        assert surface.events == [KeyDownEvent(key="A")]
