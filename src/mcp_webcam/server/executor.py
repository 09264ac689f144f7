"""ToolExecutor — runs validated tool calls in the right execution context.

- :class:`~mcp_webcam.tools.base.BlockingTool` handlers run on a bounded
  thread pool, so device I/O never stalls the event loop.  No timeout.
- :class:`~mcp_webcam.tools.base.AsyncTool` handlers run as tasks on the
  event loop under a per-call deadline.

Both paths return the same thing: a task resolving to a
:class:`~mcp_webcam.protocol.models.ToolResult` or raising a
:class:`~mcp_webcam.protocol.errors.ToolError`.  Nothing else escapes.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from mcp_webcam.protocol.errors import ToolError, ToolInternalError, ToolTimeoutError
from mcp_webcam.protocol.models import ToolResult
from mcp_webcam.tools.base import AsyncTool, BlockingTool
from mcp_webcam.utils.telemetry import ATTR_TOOL_MODE, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    from mcp_webcam.tools.base import Tool

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ToolExecutor:
    """Bridges blocking and async tool handlers behind one interface.

    Usage::

        executor = ToolExecutor(max_workers=4, remote_timeout=30.0)
        task = executor.submit(tool, {"camera_index": 0})
        result = await task
    """

    def __init__(self, *, max_workers: int = 4, remote_timeout: float = 30.0) -> None:
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="mcp-webcam-device",
        )
        self._remote_timeout = remote_timeout

    @property
    def remote_timeout(self) -> float:
        return self._remote_timeout

    def submit(self, tool: Tool, arguments: dict[str, Any]) -> asyncio.Task[ToolResult]:
        """Start *tool* and return a task for its result."""
        return asyncio.create_task(self.execute(tool, arguments), name=f"tool:{tool.name}")

    async def execute(self, tool: Tool, arguments: dict[str, Any]) -> ToolResult:
        """Run *tool* to completion.

        Raises
        ------
        ToolError
            Whatever the handler raised as a tool error, a
            :class:`ToolTimeoutError` for async tools past their deadline, or
            a :class:`ToolInternalError` for any other exception.
        """
        with _tracer.start_as_current_span("tool.execute") as span:
            span.set_attribute(ATTR_TOOL_NAME, tool.name)
            span.set_attribute(ATTR_TOOL_MODE, tool.mode.value)
            logger.debug("Executing %s tool %s", tool.mode.value, tool.name)

            try:
                if isinstance(tool, BlockingTool):
                    result = await self._run_blocking(tool, arguments)
                elif isinstance(tool, AsyncTool):
                    result = await self._run_async(tool, arguments)
                else:
                    msg = f"unsupported tool type: {type(tool).__name__}"
                    raise TypeError(msg)
            except ToolError:
                raise
            except Exception as exc:
                logger.critical("Unexpected error in tool %s", tool.name, exc_info=True)
                raise ToolInternalError(tool.name, f"{type(exc).__name__}: {exc}") from exc

            if not isinstance(result, ToolResult):
                logger.critical("Tool %s returned %r instead of a ToolResult", tool.name, result)
                raise ToolInternalError(tool.name, "handler returned an invalid result")
            return result

    async def _run_blocking(self, tool: BlockingTool, arguments: dict[str, Any]) -> ToolResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._pool, functools.partial(tool.call, arguments))

    async def _run_async(self, tool: AsyncTool, arguments: dict[str, Any]) -> ToolResult:
        deadline = asyncio.timeout(self._remote_timeout)
        try:
            async with deadline:
                return await tool.call(arguments)
        except TimeoutError as exc:
            if not deadline.expired():
                raise
            raise ToolTimeoutError(tool.name, self._remote_timeout) from exc

    def shutdown(self, *, wait: bool = True) -> None:
        """Release the worker pool."""
        self._pool.shutdown(wait=wait)
