"""RequestDispatcher — the read loop and method router.

Each inbound line becomes an independent task: decode, route, execute,
reply.  The read loop only schedules work, so a slow capture or search
never delays the next message.  Replies may leave in a different order than
requests arrived; each carries the id of its request.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from mcp_webcam import __version__
from mcp_webcam.protocol.errors import (
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    TransportError,
    UnknownToolError,
    to_error_object,
)
from mcp_webcam.protocol.models import JsonRpcRequest
from mcp_webcam.protocol.serializer import serialize_error, serialize_result
from mcp_webcam.tools.schema import validate_arguments
from mcp_webcam.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_METHOD,
    ATTR_RPC_REQUEST_ID,
    get_tracer,
)

if TYPE_CHECKING:
    from mcp_webcam.protocol.models import RequestId
    from mcp_webcam.protocol.transport import Transport
    from mcp_webcam.server.executor import ToolExecutor
    from mcp_webcam.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_PROTOCOL_VERSION = "2024-11-05"


class RequestDispatcher:
    """Reads requests from a transport and writes correlated replies.

    Usage::

        dispatcher = RequestDispatcher(registry, executor, StdioTransport())
        await dispatcher.run()        # returns when stdin closes
    """

    def __init__(
        self,
        registry: ToolRegistry,
        executor: ToolExecutor,
        transport: Transport,
        *,
        server_name: str = "mcp-webcam",
        server_version: str = __version__,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._transport = transport
        self._server_name = server_name
        self._server_version = server_version
        self._pending: set[asyncio.Task[None]] = set()
        self._delivery_error: TransportError | None = None

    @property
    def in_flight(self) -> int:
        """Number of requests still being processed."""
        return len(self._pending)

    async def run(self) -> None:
        """Serve until the transport reports end of stream.

        Outstanding requests are allowed to finish and reply before this
        returns.

        Raises
        ------
        TransportError
            If the stream becomes unreadable or a reply cannot be written.
        """
        logger.info("Dispatcher ready with %d tool(s)", len(self._registry))
        try:
            while self._delivery_error is None:
                line = await self._transport.receive()
                if line is None:
                    logger.info("Input stream closed")
                    break
                if self._delivery_error is not None:
                    logger.warning("Output stream failed; dropping remaining input")
                    break
                self._schedule(line)
        finally:
            await self.drain()

        if self._delivery_error is not None:
            raise self._delivery_error

    async def drain(self) -> None:
        """Wait for every in-flight request to reply."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _schedule(self, line: str) -> None:
        task = asyncio.create_task(self._process(line))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _process(self, line: str) -> None:
        reply = await self.handle_line(line)
        if reply is None:
            return
        try:
            await self._transport.send(reply)
        except TransportError as exc:
            logger.critical("Failed to deliver response: %s", exc)
            self._delivery_error = exc

    # ------------------------------------------------------------------
    # Decoding and routing
    # ------------------------------------------------------------------

    async def handle_line(self, line: str) -> str | None:
        """Process one framed message; return the reply line, or ``None``.

        Notifications never produce a reply, even when they fail.
        """
        request_id: RequestId = None
        is_notification = False

        with _tracer.start_as_current_span("rpc.request") as span:
            try:
                message = self._parse(line)
                request_id = self._extract_id(message)
                request = self._to_request(message, request_id)
                is_notification = request.is_notification
                span.set_attribute(ATTR_RPC_METHOD, request.method)
                if request_id is not None:
                    span.set_attribute(ATTR_RPC_REQUEST_ID, str(request_id))
                result = await self._route(request)
            except Exception as exc:
                if not isinstance(exc, ProtocolError):
                    logger.critical("Unhandled error dispatching request %r", request_id, exc_info=True)
                error = to_error_object(exc)
                span.set_attribute(ATTR_RPC_ERROR_CODE, error.code)
                if is_notification:
                    logger.warning("Notification failed: %s", error.message)
                    return None
                return serialize_error(request_id, error)

        if is_notification:
            return None
        return serialize_result(request_id, result)

    @staticmethod
    def _parse(line: str) -> dict[str, Any]:
        try:
            message = json.loads(line)
        except ValueError as exc:
            raise ParseError(f"Parse error: {exc}") from exc
        if not isinstance(message, dict):
            raise InvalidRequestError(
                "Invalid Request: expected a single JSON object",
                {"received": type(message).__name__},
            )
        return message

    @staticmethod
    def _extract_id(message: dict[str, Any]) -> RequestId:
        request_id = message.get("id")
        if request_id is None:
            return None
        if isinstance(request_id, bool) or not isinstance(request_id, int | str):
            raise InvalidRequestError("Invalid Request: id must be a string, an integer, or null")
        return request_id

    @staticmethod
    def _to_request(message: dict[str, Any], request_id: RequestId) -> JsonRpcRequest:
        method = message.get("method")
        if not isinstance(method, str) or not method:
            raise InvalidRequestError("Invalid Request: missing method")

        params = message.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, dict):
            raise ParseError(
                "Parse error: params must be an object",
                {"received": type(params).__name__},
            )
        return JsonRpcRequest(method=method, id=request_id, params=params)

    async def _route(self, request: JsonRpcRequest) -> dict[str, Any]:
        method = request.method
        if method == "initialize":
            return self._initialize(request.params)
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": [d.to_wire() for d in self._registry.list()]}
        if method == "tools/call":
            return await self._call_tool(request.params)
        if method.startswith("notifications/"):
            logger.debug("Notification received: %s", method)
            return {}
        logger.warning("Unknown method requested: %s", method)
        raise MethodNotFoundError(method)

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client = params.get("clientInfo")
        if isinstance(client, dict):
            logger.info("Client connected: %s %s", client.get("name"), client.get("version"))

        version = params.get("protocolVersion")
        if not isinstance(version, str) or not version:
            version = DEFAULT_PROTOCOL_VERSION

        return {
            "protocolVersion": version,
            "serverInfo": {"name": self._server_name, "version": self._server_version},
            "capabilities": {"tools": {}},
            "tools": [d.to_wire() for d in self._registry.list()],
        }

    async def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise UnknownToolError(None)
        tool = self._registry.lookup(name)
        if tool is None:
            logger.warning("Unknown tool requested: %s", name)
            raise UnknownToolError(name)

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, dict):
            raise InvalidParamsError(
                "Invalid params: 'arguments' must be an object",
                {"tool": name, "field": "arguments", "expected": "object"},
            )

        validate_arguments(tool.descriptor.input_schema, arguments)
        result = await self._executor.submit(tool, arguments)
        return result.to_wire()
