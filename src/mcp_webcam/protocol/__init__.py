"""JSON-RPC protocol layer — messages, errors, framing, serialization."""

from mcp_webcam.protocol.errors import (
    ErrorCode,
    InvalidParamsError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolError,
    ToolExecutionError,
    ToolInternalError,
    ToolTimeoutError,
    TransportError,
    to_error_object,
)
from mcp_webcam.protocol.models import (
    ImageContent,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolResult,
)
from mcp_webcam.protocol.transport import StdioTransport, Transport

__all__ = [
    "ErrorCode",
    "ImageContent",
    "InvalidParamsError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ParseError",
    "ProtocolError",
    "StdioTransport",
    "TextContent",
    "ToolError",
    "ToolExecutionError",
    "ToolInternalError",
    "ToolResult",
    "ToolTimeoutError",
    "Transport",
    "TransportError",
    "to_error_object",
]
