#!/usr/bin/env python3
"""
Server management script.

Runs the API under uvicorn with a termination hook. SHUTDOWN_MODE picks
what SIGTERM/SIGINT do:

    drain   stop accepting connections, finish in-flight requests, exit
    ignore  log the signal and keep serving

Usage:
    python server.py start   # Start server in the foreground
    python server.py status  # Check if running
"""

import signal
import sys
from types import FrameType
from typing import Callable, Optional

import requests
import structlog
import uvicorn

from config import Settings, settings

logger = structlog.get_logger(__name__)

TerminationHook = Callable[[int], None]


class ServiceServer(uvicorn.Server):
    """
    uvicorn server with a configurable reaction to termination signals.

    `on_termination` is called with the signal number before the mode is
    applied, in both modes.
    """

    def __init__(
        self,
        config: uvicorn.Config,
        shutdown_mode: str = "drain",
        on_termination: Optional[TerminationHook] = None,
    ):
        super().__init__(config)
        if shutdown_mode not in ("drain", "ignore"):
            raise ValueError(f"Unknown shutdown mode: {shutdown_mode}")
        self.shutdown_mode = shutdown_mode
        self.on_termination = on_termination

    def handle_exit(self, sig: int, frame: Optional[FrameType]) -> None:
        signal_name = signal.Signals(sig).name

        if self.on_termination is not None:
            self.on_termination(sig)

        if self.shutdown_mode == "ignore":
            logger.warning("termination_signal_ignored", signal=signal_name)
            return

        logger.info("termination_signal_received", signal=signal_name, action="drain")
        super().handle_exit(sig, frame)


def build_server(
    app_settings: Settings = settings,
    on_termination: Optional[TerminationHook] = None,
) -> ServiceServer:
    """Create the server for the given settings."""
    config = uvicorn.Config(
        "main:app",
        host=app_settings.host,
        port=app_settings.port,
        log_level=app_settings.log_level.lower(),
    )
    return ServiceServer(
        config,
        shutdown_mode=app_settings.shutdown_mode,
        on_termination=on_termination,
    )


def run() -> None:
    """Start the server in the foreground."""
    server = build_server()
    logger.info(
        "server_starting",
        host=settings.host,
        port=settings.port,
        shutdown_mode=settings.shutdown_mode,
    )
    server.run()
    logger.info("server_stopped")


def show_status() -> None:
    """Show server status."""
    url = f"http://localhost:{settings.port}/health"
    try:
        response = requests.get(url, timeout=2)
    except requests.exceptions.RequestException:
        print("[NOT RUNNING] Server is not running")
        print("              Start with: python server.py start")
        return

    if response.ok:
        print(f"[OK] Server is running on port {settings.port}")
    else:
        print(f"[ERROR] Health check returned {response.status_code}")


def main():
    """Main entry point."""
    command = sys.argv[1] if len(sys.argv) > 1 else "start"

    if command == "start":
        run()
    elif command == "status":
        show_status()
    else:
        print("Usage: python server.py [start|status]")
        sys.exit(1)


if __name__ == "__main__":
    main()
