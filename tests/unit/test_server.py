"""
Unit tests for the uvicorn runner and its termination hook.
"""

import signal

import pytest
import uvicorn
from unittest.mock import MagicMock

from config import Settings
from server import ServiceServer, build_server


async def _app(scope, receive, send):
    pass


def make_server(mode: str, hook=None) -> ServiceServer:
    return ServiceServer(uvicorn.Config(_app), shutdown_mode=mode, on_termination=hook)


class TestServiceServer:
    """Tests for ServiceServer.handle_exit()"""

    def test_drain_mode_requests_graceful_exit(self):
        server = make_server("drain")

        server.handle_exit(signal.SIGTERM, None)

        assert server.should_exit is True
        assert server.force_exit is False

    def test_ignore_mode_keeps_serving(self):
        server = make_server("ignore")

        server.handle_exit(signal.SIGTERM, None)
        server.handle_exit(signal.SIGINT, None)

        assert server.should_exit is False
        assert server.force_exit is False

    @pytest.mark.parametrize("mode", ["drain", "ignore"])
    def test_hook_called_in_both_modes(self, mode):
        hook = MagicMock()
        server = make_server(mode, hook)

        server.handle_exit(signal.SIGTERM, None)

        hook.assert_called_once_with(signal.SIGTERM)

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            make_server("explode")


class TestBuildServer:
    """Tests for build_server()"""

    def test_uses_settings(self):
        app_settings = Settings(_env_file=None, host="127.0.0.1", port=4321, shutdown_mode="ignore")

        server = build_server(app_settings)

        assert server.config.host == "127.0.0.1"
        assert server.config.port == 4321
        assert server.shutdown_mode == "ignore"

    def test_default_port(self):
        server = build_server(Settings(_env_file=None))

        assert server.config.port == 3000
        assert server.config.host == "0.0.0.0"
