"""Error taxonomy for the protocol layer and the mapping to JSON-RPC errors.

Every failure the dispatcher can observe is one of the :class:`ProtocolError`
subclasses below.  :func:`to_error_object` turns any exception into exactly one
:class:`~mcp_webcam.protocol.models.JsonRpcError`.  :class:`TransportError` is
the only fatal condition and is never serialized.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

from mcp_webcam.protocol.models import JsonRpcError

logger = logging.getLogger(__name__)


class ErrorCode(IntEnum):
    """Stable numeric codes clients can branch on."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    # Server-defined band for tool failures.
    TOOL_EXECUTION_ERROR = -32000
    TOOL_TIMEOUT = -32001
    TOOL_INTERNAL_ERROR = -32002


class ProtocolError(Exception):
    """Base error for all recoverable, per-request failures."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class ParseError(ProtocolError):
    """The message (or its params) is not valid structured data."""

    code = ErrorCode.PARSE_ERROR


class InvalidRequestError(ProtocolError):
    """Valid JSON that is not a JSON-RPC request object."""

    code = ErrorCode.INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    """Unrecognized top-level method."""

    code = ErrorCode.METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}", {"method": method})


class InvalidParamsError(ProtocolError):
    """Missing or unknown tool name, or arguments rejected by the tool schema."""

    code = ErrorCode.INVALID_PARAMS


class UnknownToolError(InvalidParamsError):
    """``tools/call`` named a tool that is not registered."""

    def __init__(self, name: str | None) -> None:
        self.name = name
        if name is None:
            message = "Missing tool name"
        else:
            message = f"Unknown tool: {name}"
        super().__init__(message, {"tool": name})


class SchemaValidationError(InvalidParamsError):
    """An argument failed schema validation."""

    def __init__(self, field: str, expected: str, reason: str = "") -> None:
        self.field = field
        self.expected = expected
        self.reason = reason or f"expected {expected}"
        super().__init__(
            f"Invalid argument '{field}': {self.reason}",
            {"field": field, "expected": expected},
        )


class InternalError(ProtocolError):
    """A dispatcher-level fault outside any tool."""

    code = ErrorCode.INTERNAL_ERROR


class ToolError(ProtocolError):
    """Base error for failures of a single tool call."""

    def __init__(self, tool: str, message: str, data: dict[str, Any] | None = None) -> None:
        self.tool = tool
        super().__init__(message, {"tool": tool, **(data or {})})


class ToolExecutionError(ToolError):
    """The handler failed (device busy, network error, remote API rejection)."""

    code = ErrorCode.TOOL_EXECUTION_ERROR

    def __init__(self, tool: str, detail: str = "") -> None:
        self.detail = detail
        message = f"Tool execution failed: {tool}" + (f": {detail}" if detail else "")
        super().__init__(tool, message, {"detail": detail})


class ToolTimeoutError(ToolError):
    """A network-backed tool exceeded its deadline."""

    code = ErrorCode.TOOL_TIMEOUT

    def __init__(self, tool: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(tool, f"Tool timed out after {timeout}s: {tool}", {"timeout": timeout})


class ToolInternalError(ToolError):
    """An unexpected exception escaped a handler."""

    code = ErrorCode.TOOL_INTERNAL_ERROR

    def __init__(self, tool: str, detail: str = "") -> None:
        self.detail = detail
        super().__init__(tool, f"Internal error in tool: {tool}", {"detail": detail})


class TransportError(Exception):
    """The stream closed unexpectedly or became unreadable. Fatal."""


def to_error_object(exc: BaseException) -> JsonRpcError:
    """Map *exc* to its JSON-RPC error object."""
    if isinstance(exc, ProtocolError):
        if isinstance(exc, ToolError):
            logger.error("%s (code %d)", exc.message, exc.code)
        return JsonRpcError(code=int(exc.code), message=exc.message, data=exc.data)

    logger.error("Unmapped error reached the dispatcher: %r", exc)
    return JsonRpcError(
        code=int(ErrorCode.INTERNAL_ERROR),
        message="Internal error",
        data={"detail": str(exc) or type(exc).__name__},
    )
