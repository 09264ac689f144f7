"""Local camera devices."""

from mcp_webcam.devices.camera import (
    CameraBackend,
    CameraError,
    CameraInfo,
    CameraManager,
    CameraNotFoundError,
    CameraUnsupportedError,
    CaptureFailedError,
    CaptureResult,
    OpenCVBackend,
)

__all__ = [
    "CameraBackend",
    "CameraError",
    "CameraInfo",
    "CameraManager",
    "CameraNotFoundError",
    "CameraUnsupportedError",
    "CaptureFailedError",
    "CaptureResult",
    "OpenCVBackend",
]
