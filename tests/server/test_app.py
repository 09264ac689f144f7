"""Tests for server assembly and the process entry point."""

from __future__ import annotations

from unittest.mock import patch

from mcp_webcam.config import ServerConfig
from mcp_webcam.protocol.errors import TransportError
from mcp_webcam.remote.shodan import ShodanClient
from mcp_webcam.server.app import (
    EXIT_OK,
    EXIT_TRANSPORT_ERROR,
    WebcamServer,
    run_server,
)
from tests.helpers import MemoryTransport, request_line


class _BrokenTransport(MemoryTransport):
    async def receive(self) -> str | None:
        raise TransportError("Stream ended in the middle of a message")


class TestWebcamServer:
    def test_creates_shodan_client_from_key(self, camera) -> None:
        server = WebcamServer(
            ServerConfig(shodan_api_key="k"), transport=MemoryTransport(), camera=camera
        )
        assert "search_webcams" in server.registry
        assert isinstance(server._shodan, ShodanClient)

    def test_local_only_without_key(self, config, camera) -> None:
        server = WebcamServer(config, transport=MemoryTransport(), camera=camera)
        assert "search_webcams" not in server.registry
        assert server._shodan is None

    async def test_serve_answers_and_closes(self, keyed_config, camera, shodan) -> None:
        transport = MemoryTransport(
            [
                request_line("initialize", 1, {"protocolVersion": "2024-11-05"}),
                request_line("notifications/initialized"),
                request_line("tools/call", 2, {"name": "search_webcams", "arguments": {"limit": 3}}),
            ]
        )
        server = WebcamServer(keyed_config, transport=transport, camera=camera, shodan=shodan)
        await server.serve()

        replies = transport.by_id()
        assert len(transport.sent) == 2
        assert replies[1]["result"]["serverInfo"]["name"] == "mcp-webcam"
        assert replies[2]["result"]["metadata"]["total"] == 0
        shodan.search_webcams.assert_awaited_once_with(3)
        shodan.aclose.assert_awaited_once()
        assert transport.closed


class TestRunServer:
    def test_clean_eof_exits_ok(self, config) -> None:
        with patch("mcp_webcam.server.app.CameraManager"):
            assert run_server(config, transport=MemoryTransport()) == EXIT_OK

    def test_transport_failure_exit_code(self, config) -> None:
        with patch("mcp_webcam.server.app.CameraManager"):
            code = run_server(config, transport=_BrokenTransport())
        assert code == EXIT_TRANSPORT_ERROR
