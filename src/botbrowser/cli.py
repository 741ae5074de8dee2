"""Command-line interface for botbrowser.

Provides the main entry point for running the browser host with its
control endpoint, and for sending a single control message to a running
instance.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="botbrowser",
        description="Game client browser with a local control socket",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/botbrowser.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    browser_parser = subparsers.add_parser(
        "browser", help="Open the game window and serve the control socket",
    )
    browser_parser.add_argument("--url", type=str, default=None, help="Game server URL")
    browser_parser.add_argument("--sid", type=str, default=None, help="Session id cookie value")
    browser_parser.add_argument(
        "--launch", action="store_true",
        help="Open the game map directly instead of the start page",
    )

    send_parser = subparsers.add_parser(
        "send", help="Send one control message to a running browser",
    )
    send_parser.add_argument("--pid", type=int, required=True, help="PID of the browser process")
    send_parser.add_argument(
        "message", type=str,
        help="Control message, e.g. 'refresh', 'keyClick|13' or 'text|hello'",
    )

    return parser.parse_args(argv)


async def _run_browser(settings, args) -> None:
    """Start the browser host and control endpoint, run until all windows close."""
    from botbrowser.control.protocol import control_socket_path
    from botbrowser.control.server import ControlServer
    from botbrowser.host.browser import BrowserHost
    from botbrowser.host.context import HostContext
    from botbrowser.input.dispatcher import InputDispatcher

    context = HostContext()
    dispatcher = InputDispatcher(
        type_delay=settings.control.type_delay,
        serialize=settings.control.serialize_input,
    )
    path = control_socket_path(settings.control.socket_dir, settings.control.socket_prefix)
    server = ControlServer(context, dispatcher, path)

    async with server, BrowserHost(settings.browser, context) as host:
        window = await host.open_window(args.url, args.sid, launch_game=args.launch)
        context.window_created(window)
        print(f"Control socket: {path} (pid {os.getpid()})")
        await host.wait_closed()


async def _send(settings, args) -> None:
    """Send a single control message."""
    from botbrowser.control.client import ControlClient

    client = ControlClient.for_pid(
        args.pid,
        socket_dir=settings.control.socket_dir,
        prefix=settings.control.socket_prefix,
        timeout=settings.control.client_timeout,
    )
    async with client:
        await client.send(args.message)
    print(f"Sent {args.message!r} to {client.path}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the botbrowser CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from botbrowser.config.settings import load_settings
    from botbrowser.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "browser":
        logger.info("Starting browser (url=%s, launch=%s)", args.url, args.launch)
        asyncio.run(_run_browser(settings, args))

    elif args.command == "send":
        logger.info("Sending control message to pid %d", args.pid)
        asyncio.run(_send(settings, args))


if __name__ == "__main__":
    main()
