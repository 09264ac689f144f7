"""WebcamServer — wires configuration, collaborators, and the dispatcher."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from mcp_webcam import __version__
from mcp_webcam.devices.camera import CameraManager
from mcp_webcam.protocol.errors import TransportError
from mcp_webcam.protocol.transport import StdioTransport
from mcp_webcam.remote.shodan import ShodanClient
from mcp_webcam.server.dispatcher import RequestDispatcher
from mcp_webcam.server.executor import ToolExecutor
from mcp_webcam.tools.registry import build_registry

if TYPE_CHECKING:
    from mcp_webcam.config import ServerConfig
    from mcp_webcam.protocol.transport import Transport
    from mcp_webcam.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_TRANSPORT_ERROR = 2


class WebcamServer:
    """The assembled server.

    Collaborators can be injected; by default the camera manager uses
    OpenCV, and a Shodan client is created when an API key is configured.
    """

    def __init__(
        self,
        config: ServerConfig,
        *,
        transport: Transport | None = None,
        camera: CameraManager | None = None,
        shodan: ShodanClient | None = None,
    ) -> None:
        self._config = config
        self._camera = camera if camera is not None else CameraManager()
        if shodan is None and config.shodan_api_key:
            shodan = ShodanClient(config.shodan_api_key)
        self._shodan = shodan
        self._registry = build_registry(config, camera=self._camera, shodan=shodan)
        self._executor = ToolExecutor(
            max_workers=config.max_blocking_workers,
            remote_timeout=config.remote_timeout,
        )
        self._transport = transport if transport is not None else StdioTransport()
        self._dispatcher = RequestDispatcher(
            self._registry,
            self._executor,
            self._transport,
            server_name=config.server_name,
            server_version=__version__,
        )

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    async def serve(self) -> None:
        """Serve until the transport closes, then release resources."""
        logger.info("Starting %s %s", self._config.server_name, __version__)
        logger.info("Only access webcams you own or have permission to use")
        try:
            await self._dispatcher.run()
        finally:
            await self.aclose()
        logger.info("%s stopped", self._config.server_name)

    async def aclose(self) -> None:
        self._executor.shutdown(wait=False)
        if self._shodan is not None:
            await self._shodan.aclose()
        await self._transport.close()


def run_server(config: ServerConfig, *, transport: Transport | None = None) -> int:
    """Run the stdio server to completion and return the process exit code."""
    server = WebcamServer(config, transport=transport)
    try:
        asyncio.run(server.serve())
    except TransportError as exc:
        logger.critical("Transport failure: %s", exc)
        return EXIT_TRANSPORT_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return EXIT_OK
