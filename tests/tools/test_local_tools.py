"""Tests for the local camera tools."""

from __future__ import annotations

import pytest

from mcp_webcam.devices.camera import CameraInfo, CameraManager, CaptureFailedError
from mcp_webcam.protocol.errors import ToolExecutionError
from mcp_webcam.protocol.models import ImageContent, TextContent
from mcp_webcam.tools.local import CaptureImageTool, GetCameraInfoTool, ListCamerasTool
from tests.helpers import FAKE_JPEG, FakeCameraBackend


@pytest.fixture
def two_cameras() -> CameraManager:
    return CameraManager(
        FakeCameraBackend(
            [
                CameraInfo(index=0, name="Built-in", description="V4L2"),
                CameraInfo(index=2, name="USB"),
            ]
        )
    )


class TestListCamerasTool:
    def test_lists_devices(self, two_cameras) -> None:
        result = ListCamerasTool(two_cameras).call({})
        assert result.text.splitlines() == [
            "Found 2 camera(s)",
            "[0] Built-in (V4L2)",
            "[2] USB",
        ]
        assert [c["index"] for c in result.metadata["cameras"]] == [0, 2]

    def test_no_devices(self) -> None:
        tool = ListCamerasTool(CameraManager(FakeCameraBackend([])))
        assert tool.call({}).text == "Found 0 camera(s)"


class TestCaptureImageTool:
    def test_defaults_to_camera_zero(self, camera) -> None:
        result = CaptureImageTool(camera).call({})
        image, text = result.content
        assert isinstance(image, ImageContent)
        assert image.data == FAKE_JPEG
        assert image.mime_type == "image/jpeg"
        assert isinstance(text, TextContent)
        assert text.text.startswith("Captured 640x480 image from camera 0 at ")
        assert result.metadata["camera_index"] == 0
        assert result.metadata["width"] == 640

    def test_explicit_index(self, two_cameras) -> None:
        result = CaptureImageTool(two_cameras).call({"camera_index": 2})
        assert result.metadata["camera_index"] == 2

    def test_missing_device_is_execution_error(self, camera) -> None:
        with pytest.raises(ToolExecutionError) as info:
            CaptureImageTool(camera).call({"camera_index": 7})
        assert info.value.tool == "capture_image"
        assert "Camera not found: 7" in info.value.message

    def test_device_failure_is_execution_error(self) -> None:
        backend = FakeCameraBackend()
        backend.failures.append(CaptureFailedError(0, "unsupported format"))
        with pytest.raises(ToolExecutionError, match="unsupported format"):
            CaptureImageTool(CameraManager(backend)).call({})


class TestGetCameraInfoTool:
    def test_before_any_capture(self, two_cameras) -> None:
        result = GetCameraInfoTool(two_cameras).call({})
        assert result.text == "Camera info: 2 total camera(s), current: none"
        assert result.metadata["current_camera"] is None
        assert result.metadata["total_cameras"] == 2

    def test_reports_last_captured_device(self, two_cameras) -> None:
        CaptureImageTool(two_cameras).call({"camera_index": 2})
        result = GetCameraInfoTool(two_cameras).call({})
        assert result.metadata["current_camera"] == 2
        assert result.text.endswith("current: 2")
