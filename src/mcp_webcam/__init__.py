"""mcp-webcam — local and remote webcam tools served over MCP stdio."""

from __future__ import annotations

__version__ = "0.1.0"
