"""Local camera tools — blocking handlers backed by :class:`CameraManager`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp_webcam.devices.camera import CameraError
from mcp_webcam.protocol.errors import ToolExecutionError
from mcp_webcam.protocol.models import ImageContent, TextContent, ToolResult
from mcp_webcam.tools.base import BlockingTool, ToolDescriptor
from mcp_webcam.tools.schema import InputSchema, ToolParam

if TYPE_CHECKING:
    from mcp_webcam.devices.camera import CameraInfo, CameraManager

logger = logging.getLogger(__name__)


def _describe(camera: CameraInfo) -> str:
    line = f"[{camera.index}] {camera.name}"
    if camera.description:
        line += f" ({camera.description})"
    return line


class ListCamerasTool(BlockingTool):
    descriptor = ToolDescriptor(
        name="list_cameras",
        description="List all available local camera devices",
    )

    def __init__(self, camera: CameraManager) -> None:
        self._camera = camera

    def call(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            cameras = self._camera.list_cameras()
        except CameraError as exc:
            raise ToolExecutionError(self.name, str(exc)) from exc

        lines = [f"Found {len(cameras)} camera(s)"]
        lines.extend(_describe(c) for c in cameras)
        return ToolResult.from_text(
            "\n".join(lines),
            metadata={"cameras": [c.model_dump() for c in cameras]},
        )


class CaptureImageTool(BlockingTool):
    descriptor = ToolDescriptor(
        name="capture_image",
        description="Capture an image from a local camera",
        input_schema=InputSchema(
            params=(
                ToolParam(
                    name="camera_index",
                    type="integer",
                    description="Camera index to use (defaults to 0)",
                    minimum=0,
                ),
            ),
        ),
    )

    def __init__(self, camera: CameraManager) -> None:
        self._camera = camera

    def call(self, arguments: dict[str, Any]) -> ToolResult:
        index: int = arguments.get("camera_index", 0)
        try:
            frame = self._camera.capture(index)
        except CameraError as exc:
            raise ToolExecutionError(self.name, str(exc)) from exc

        return ToolResult(
            content=(
                ImageContent(data=frame.image, mime_type=frame.mime_type),
                TextContent(
                    text=(
                        f"Captured {frame.width}x{frame.height} image from camera "
                        f"{frame.camera_index} at {frame.timestamp}"
                    )
                ),
            ),
            metadata={
                "width": frame.width,
                "height": frame.height,
                "camera_index": frame.camera_index,
                "timestamp": frame.timestamp,
                "mime_type": frame.mime_type,
            },
        )


class GetCameraInfoTool(BlockingTool):
    descriptor = ToolDescriptor(
        name="get_camera_info",
        description="Get information about available local cameras",
    )

    def __init__(self, camera: CameraManager) -> None:
        self._camera = camera

    def call(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            cameras = self._camera.list_cameras()
        except CameraError as exc:
            raise ToolExecutionError(self.name, str(exc)) from exc

        current = self._camera.current_index
        current_text = "none" if current is None else str(current)
        return ToolResult.from_text(
            f"Camera info: {len(cameras)} total camera(s), current: {current_text}",
            metadata={
                "available_cameras": [c.model_dump() for c in cameras],
                "current_camera": current,
                "total_cameras": len(cameras),
            },
        )
