"""Shared fakes for the test suite."""

from __future__ import annotations

import asyncio
import json
import threading
import time
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from mcp_webcam.devices.camera import (
    CameraError,
    CameraInfo,
    CameraNotFoundError,
    CaptureResult,
)
from mcp_webcam.protocol.models import ToolResult
from mcp_webcam.remote.shodan import ShodanClient
from mcp_webcam.tools.base import AsyncTool, BlockingTool, ToolDescriptor
from mcp_webcam.tools.schema import InputSchema, ToolParam

FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"


class FakeCameraBackend:
    """In-memory camera backend that records device usage per index."""

    def __init__(
        self,
        cameras: list[CameraInfo] | None = None,
        delay: float = 0.0,
        probe_delay: float = 0.0,
    ) -> None:
        self.cameras = [CameraInfo(index=0, name="Fake Cam")] if cameras is None else cameras
        self.delay = delay
        self.probe_delay = probe_delay
        self.intervals: dict[int, list[tuple[float, float]]] = {}
        self.probe_calls = 0
        self.failures: list[CameraError] = []
        self.max_holders: dict[int, int] = {}
        self._holders: dict[int, int] = {}
        self._guard = threading.Lock()

    def _enter(self, index: int) -> None:
        with self._guard:
            self._holders[index] = self._holders.get(index, 0) + 1
            self.max_holders[index] = max(self.max_holders.get(index, 0), self._holders[index])

    def _leave(self, index: int) -> None:
        with self._guard:
            self._holders[index] -= 1

    def candidates(self) -> list[int]:
        return [c.index for c in self.cameras]

    def probe(self, index: int) -> CameraInfo | None:
        self.probe_calls += 1
        self._enter(index)
        try:
            if self.probe_delay:
                time.sleep(self.probe_delay)
            return next((c for c in self.cameras if c.index == index), None)
        finally:
            self._leave(index)

    def capture(self, index: int) -> CaptureResult:
        if index not in self.candidates():
            raise CameraNotFoundError(index)
        self._enter(index)
        try:
            if self.failures:
                raise self.failures.pop(0)
            start = time.monotonic()
            if self.delay:
                time.sleep(self.delay)
            end = time.monotonic()
        finally:
            self._leave(index)
        with self._guard:
            self.intervals.setdefault(index, []).append((start, end))
        return CaptureResult(image=FAKE_JPEG, width=640, height=480, camera_index=index)


class MemoryTransport:
    """Transport fed from a list of lines; records everything sent."""

    def __init__(self, lines: list[str] | None = None) -> None:
        self._incoming = list(lines or [])
        self.sent: list[str] = []
        self.closed = False

    async def receive(self) -> str | None:
        await asyncio.sleep(0)
        if not self._incoming:
            return None
        return self._incoming.pop(0)

    async def send(self, line: str) -> None:
        self.sent.append(line)

    async def close(self) -> None:
        self.closed = True

    def responses(self) -> list[dict[str, Any]]:
        return [json.loads(line) for line in self.sent]

    def by_id(self) -> dict[Any, dict[str, Any]]:
        return {r["id"]: r for r in self.responses()}


class EchoTool(AsyncTool):
    """Async tool returning its ``text`` argument."""

    descriptor = ToolDescriptor(
        name="echo",
        description="Echo text back",
        input_schema=InputSchema(
            params=(ToolParam(name="text", type="string", required=True),),
        ),
    )

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        self.calls.append(arguments)
        return ToolResult.from_text(arguments["text"])


class GatedTool(AsyncTool):
    """Async tool that waits until an event is set."""

    def __init__(self, name: str, gate: asyncio.Event, release: asyncio.Event | None = None) -> None:
        self.descriptor = ToolDescriptor(name=name)
        self._gate = gate
        self._release = release

    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        if self._release is not None:
            self._release.set()
        await self._gate.wait()
        return ToolResult.from_text(self.name)


class SleepyBlockingTool(BlockingTool):
    """Blocking tool that sleeps on its worker thread."""

    def __init__(self, name: str = "sleepy", delay: float = 0.05) -> None:
        self.descriptor = ToolDescriptor(name=name)
        self._delay = delay
        self.threads: list[str] = []

    def call(self, arguments: dict[str, Any]) -> ToolResult:
        self.threads.append(threading.current_thread().name)
        time.sleep(self._delay)
        return ToolResult.from_text(self.name)


def make_shodan_mock() -> MagicMock:
    """A ShodanClient stand-in with async methods."""
    shodan = MagicMock(spec=ShodanClient)
    shodan.search_webcams = AsyncMock(return_value=[])
    shodan.fetch_image = AsyncMock(return_value=(FAKE_JPEG, "image/jpeg"))
    shodan.aclose = AsyncMock()
    return shodan


def request_line(method: str, request_id: Any = None, params: Any = None) -> str:
    """Build a JSON-RPC request line; ``request_id=None`` makes a notification."""
    message: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if request_id is not None:
        message["id"] = request_id
    if params is not None:
        message["params"] = params
    return json.dumps(message)
