"""ToolRegistry — the static name-to-tool table served by ``tools/list``."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from mcp_webcam.tools.local import CaptureImageTool, GetCameraInfoTool, ListCamerasTool
from mcp_webcam.tools.remote import (
    CaptureRemoteImageTool,
    ListRemoteWebcamsTool,
    SearchWebcamsTool,
)

if TYPE_CHECKING:
    from mcp_webcam.config import ServerConfig
    from mcp_webcam.devices.camera import CameraManager
    from mcp_webcam.remote.shodan import ShodanClient
    from mcp_webcam.tools.base import Tool, ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Read-only table of tools in registration order.

    Usage::

        registry = ToolRegistry([ListCamerasTool(camera), CaptureImageTool(camera)])
        registry.list()                   # descriptors, in order
        tool = registry.lookup("capture_image")
    """

    def __init__(self, tools: Iterable[Tool]) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.name in self._tools:
                msg = f"Duplicate tool name: {tool.name}"
                raise ValueError(msg)
            self._tools[tool.name] = tool
        self._descriptors: tuple[ToolDescriptor, ...] = tuple(
            t.descriptor for t in self._tools.values()
        )

    def lookup(self, name: str) -> Tool | None:
        """Return the tool registered as *name*, if any."""
        return self._tools.get(name)

    def list(self) -> list[ToolDescriptor]:
        """Return all descriptors in registration order."""
        return list(self._descriptors)

    def names(self) -> list[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())


def build_registry(
    config: ServerConfig,
    *,
    camera: CameraManager,
    shodan: ShodanClient | None = None,
) -> ToolRegistry:
    """Build the registry for *config*.

    Local camera tools are always present.  Remote tools are registered only
    when ``config.shodan_api_key`` is set and a client is supplied.
    """
    tools: list[Tool] = [
        ListCamerasTool(camera),
        CaptureImageTool(camera),
        GetCameraInfoTool(camera),
    ]

    if config.shodan_api_key and shodan is not None:
        tools.extend([
            SearchWebcamsTool(shodan),
            CaptureRemoteImageTool(shodan),
            ListRemoteWebcamsTool(shodan),
        ])
        logger.info("Shodan integration enabled")
    else:
        logger.warning("SHODAN_API_KEY not set; remote webcam tools are disabled")

    registry = ToolRegistry(tools)
    logger.info("Registered tools: %s", ", ".join(registry.names()))
    return registry
