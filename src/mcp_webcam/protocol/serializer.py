"""Response serializer — builds outgoing JSON-RPC lines."""

from __future__ import annotations

import json
from typing import Any

from mcp_webcam.protocol.models import JsonRpcError, JsonRpcResponse, RequestId


def serialize_result(request_id: RequestId, result: dict[str, Any]) -> str:
    """Return the wire line for a successful response."""
    return encode(JsonRpcResponse(id=request_id, result=result))


def serialize_error(request_id: RequestId, error: JsonRpcError) -> str:
    """Return the wire line for an error response."""
    return encode(JsonRpcResponse(id=request_id, error=error))


def encode(response: JsonRpcResponse) -> str:
    """Compact, single-line JSON; never contains a raw newline."""
    return json.dumps(response.to_wire(), separators=(",", ":"), ensure_ascii=False, default=str)
