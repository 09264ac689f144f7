"""Server core — dispatcher, executor, and process wiring."""

from mcp_webcam.server.app import WebcamServer, run_server
from mcp_webcam.server.dispatcher import RequestDispatcher
from mcp_webcam.server.executor import ToolExecutor

__all__ = [
    "RequestDispatcher",
    "ToolExecutor",
    "WebcamServer",
    "run_server",
]
