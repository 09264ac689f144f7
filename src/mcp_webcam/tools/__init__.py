"""Tools — schemas, interfaces, the registry, and the concrete webcam tools."""

from mcp_webcam.tools.base import AsyncTool, BlockingTool, ExecutionMode, Tool, ToolDescriptor
from mcp_webcam.tools.registry import ToolRegistry, build_registry
from mcp_webcam.tools.schema import InputSchema, ToolParam, validate_arguments

__all__ = [
    "AsyncTool",
    "BlockingTool",
    "ExecutionMode",
    "InputSchema",
    "Tool",
    "ToolDescriptor",
    "ToolParam",
    "ToolRegistry",
    "build_registry",
    "validate_arguments",
]
