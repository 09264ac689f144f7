"""Local camera access — device enumeration and single-frame capture.

``CameraManager`` is the only entry point the tools use.  It serializes
access per device: one capture holds a device's lock from open to release,
so two concurrent captures on the same camera run one after the other while
captures on different cameras proceed in parallel.

The default :class:`OpenCVBackend` needs the ``camera`` extra
(``pip install mcp-webcam[camera]``).
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class CameraError(Exception):
    """Base error for local camera failures."""


class CameraNotFoundError(CameraError):
    """No usable device at the requested index."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"Camera not found: {index}")


class CameraUnsupportedError(CameraError):
    """Local camera support is not installed."""

    def __init__(self) -> None:
        super().__init__(
            "Local camera support not installed; install with: pip install mcp-webcam[camera]"
        )


class CaptureFailedError(CameraError):
    """The device opened but no usable frame came back."""

    def __init__(self, index: int, detail: str) -> None:
        self.index = index
        self.detail = detail
        super().__init__(f"Capture failed on camera {index}: {detail}")


class CameraInfo(BaseModel):
    """Description of one local camera device."""

    index: int
    name: str
    description: str = ""
    available: bool = True


class CaptureResult(BaseModel):
    """One encoded frame."""

    model_config = ConfigDict(frozen=True)

    image: bytes
    mime_type: str = "image/jpeg"
    width: int
    height: int
    camera_index: int
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


@runtime_checkable
class CameraBackend(Protocol):
    """Driver interface for probing and reading cameras.

    ``probe`` and ``capture`` each open one device; the manager calls them
    while holding that device's lock.
    """

    def candidates(self) -> list[int]: ...
    def probe(self, index: int) -> CameraInfo | None: ...
    def capture(self, index: int) -> CaptureResult: ...


def _import_cv2() -> Any:
    try:
        import cv2  # type: ignore[import-untyped]
    except ImportError as exc:
        raise CameraUnsupportedError() from exc
    return cv2


class OpenCVBackend:
    """Camera backend built on ``cv2.VideoCapture``.

    Satisfies the :class:`CameraBackend` protocol.  Devices are probed by
    index from ``0`` up to ``max_probe - 1``.  OpenCV failures surface as
    :class:`CaptureFailedError`.
    """

    def __init__(self, *, max_probe: int = 5, jpeg_quality: int = 90) -> None:
        self._max_probe = max_probe
        self._jpeg_quality = jpeg_quality

    def candidates(self) -> list[int]:
        return list(range(self._max_probe))

    def probe(self, index: int) -> CameraInfo | None:
        cv2 = _import_cv2()
        try:
            cap = cv2.VideoCapture(index)
            try:
                if not cap.isOpened():
                    return None
                return CameraInfo(
                    index=index,
                    name=f"Camera {index}",
                    description=str(cap.getBackendName()),
                )
            finally:
                cap.release()
        except cv2.error as exc:
            raise CaptureFailedError(index, str(exc)) from exc

    def capture(self, index: int) -> CaptureResult:
        cv2 = _import_cv2()
        try:
            cap = cv2.VideoCapture(index)
            try:
                if not cap.isOpened():
                    raise CameraNotFoundError(index)
                ok, frame = cap.read()
                if not ok or frame is None:
                    raise CaptureFailedError(index, "device returned no frame")
                height, width = frame.shape[:2]
                ok, buffer = cv2.imencode(
                    ".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality]
                )
                if not ok:
                    raise CaptureFailedError(index, "JPEG encoding failed")
            finally:
                cap.release()
        except cv2.error as exc:
            raise CaptureFailedError(index, str(exc)) from exc

        return CaptureResult(
            image=buffer.tobytes(),
            width=int(width),
            height=int(height),
            camera_index=index,
        )


class CameraManager:
    """Thread-safe front for a :class:`CameraBackend`.

    Every device open, whether probing or capturing, happens under that
    device's lock.

    Usage::

        manager = CameraManager()
        cameras = manager.list_cameras()
        frame = manager.capture(0)
    """

    def __init__(self, backend: CameraBackend | None = None) -> None:
        self._backend = backend if backend is not None else OpenCVBackend()
        self._locks: dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._current_index: int | None = None

    @property
    def current_index(self) -> int | None:
        """Index of the last device captured from, if any."""
        return self._current_index

    def device_lock(self, index: int) -> threading.Lock:
        """Return the lock guarding device *index*."""
        with self._locks_guard:
            lock = self._locks.get(index)
            if lock is None:
                lock = self._locks[index] = threading.Lock()
            return lock

    def list_cameras(self) -> list[CameraInfo]:
        """Enumerate available local cameras.

        Waits for any capture in progress on a device before probing it.
        """
        cameras: list[CameraInfo] = []
        for index in self._backend.candidates():
            with self.device_lock(index):
                info = self._backend.probe(index)
            if info is not None:
                cameras.append(info)
        logger.info("Found %d camera(s)", len(cameras))
        return cameras

    def capture(self, index: int = 0) -> CaptureResult:
        """Capture one JPEG frame from device *index*.

        Blocks while another capture holds the same device.
        """
        with self.device_lock(index):
            logger.debug("Capturing frame from camera %d", index)
            result = self._backend.capture(index)
            self._current_index = index

        logger.info(
            "Captured %dx%d image from camera %d", result.width, result.height, index
        )
        return result
