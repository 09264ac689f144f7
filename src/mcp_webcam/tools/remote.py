"""Remote webcam tools — async handlers backed by :class:`ShodanClient`.

These tools are only registered when a Shodan API key is configured.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from mcp_webcam.protocol.errors import ToolExecutionError
from mcp_webcam.protocol.models import ImageContent, TextContent, ToolResult
from mcp_webcam.remote.shodan import ShodanError
from mcp_webcam.tools.base import AsyncTool, ToolDescriptor
from mcp_webcam.tools.schema import InputSchema, ToolParam

if TYPE_CHECKING:
    from mcp_webcam.remote.shodan import ShodanClient

DEFAULT_SEARCH_LIMIT = 20


class SearchWebcamsTool(AsyncTool):
    descriptor = ToolDescriptor(
        name="search_webcams",
        description="Search for remote webcams using Shodan",
        input_schema=InputSchema(
            params=(
                ToolParam(
                    name="limit",
                    type="integer",
                    description=f"Maximum number of results (defaults to {DEFAULT_SEARCH_LIMIT})",
                    minimum=1,
                ),
            ),
        ),
    )

    def __init__(self, shodan: ShodanClient) -> None:
        self._shodan = shodan

    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        limit: int = arguments.get("limit", DEFAULT_SEARCH_LIMIT)
        try:
            webcams = await self._shodan.search_webcams(limit)
        except ShodanError as exc:
            raise ToolExecutionError(self.name, str(exc)) from exc

        lines = [f"Found {len(webcams)} remote webcam(s) via Shodan search"]
        lines.extend(f"{w.ip}:{w.port} {w.url} ({w.access_type.value})" for w in webcams)
        return ToolResult.from_text(
            "\n".join(lines),
            metadata={
                "webcams": [w.model_dump(mode="json") for w in webcams],
                "total": len(webcams),
            },
        )


class CaptureRemoteImageTool(AsyncTool):
    descriptor = ToolDescriptor(
        name="capture_remote_image",
        description="Capture an image from a remote webcam",
        input_schema=InputSchema(
            params=(
                ToolParam(
                    name="url",
                    type="string",
                    description="Snapshot or MJPEG URL of the webcam",
                    required=True,
                ),
                ToolParam(name="ip", type="string", description="Webcam IP (informational)"),
                ToolParam(
                    name="port",
                    type="integer",
                    description="Webcam port (informational)",
                    minimum=1,
                ),
            ),
        ),
    )

    def __init__(self, shodan: ShodanClient) -> None:
        self._shodan = shodan

    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        url: str = arguments["url"]
        try:
            image, mime_type = await self._shodan.fetch_image(url)
        except ShodanError as exc:
            raise ToolExecutionError(self.name, str(exc)) from exc

        return ToolResult(
            content=(
                ImageContent(data=image, mime_type=mime_type),
                TextContent(text=f"Captured image from remote webcam: {url}"),
            ),
            metadata={
                "source": "remote_webcam",
                "url": url,
                "ip": arguments.get("ip", "unknown"),
                "port": arguments.get("port", 80),
                "size_bytes": len(image),
                "mime_type": mime_type,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )


class ListRemoteWebcamsTool(AsyncTool):
    """Discovery results are not cached; every call is independent."""

    descriptor = ToolDescriptor(
        name="list_remote_webcams",
        description="List discovered remote webcams",
    )

    def __init__(self, shodan: ShodanClient) -> None:
        self._shodan = shodan

    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult.from_text(
            "Remote webcam results are not cached. "
            "Use the 'search_webcams' tool to discover remote webcams.",
            metadata={"webcams": [], "cached": False},
        )
