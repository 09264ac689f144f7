"""Tool interfaces — one class per tool, in one of two execution modes.

- ``BlockingTool`` — synchronous handlers that hold a worker thread until
  device I/O completes (local cameras).
- ``AsyncTool`` — coroutine handlers that suspend on network I/O
  (Shodan search, remote snapshots).

Only :class:`~mcp_webcam.server.executor.ToolExecutor` cares which mode a
tool uses; the registry and dispatcher treat both alike.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from mcp_webcam.tools.schema import InputSchema

if TYPE_CHECKING:
    from mcp_webcam.protocol.models import ToolResult


class ExecutionMode(str, Enum):
    """How a tool's handler runs."""

    BLOCKING = "blocking"
    ASYNC = "async"


class ToolDescriptor(BaseModel):
    """A registered capability as advertised by ``tools/list``."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    input_schema: InputSchema = InputSchema()

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema.to_json_schema(),
        }


class Tool(ABC):
    """Common surface of every tool."""

    descriptor: ToolDescriptor
    mode: ExecutionMode

    @property
    def name(self) -> str:
        return self.descriptor.name


class BlockingTool(Tool):
    """A tool whose handler blocks; run on the executor's worker pool."""

    mode = ExecutionMode.BLOCKING

    @abstractmethod
    def call(self, arguments: dict[str, Any]) -> ToolResult:
        """Run the tool with validated *arguments*."""


class AsyncTool(Tool):
    """A tool whose handler is a coroutine; run on the event loop."""

    mode = ExecutionMode.ASYNC

    @abstractmethod
    async def call(self, arguments: dict[str, Any]) -> ToolResult:
        """Run the tool with validated *arguments*."""
