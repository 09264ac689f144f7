"""Protocol models — JSON-RPC 2.0 messages and tool result payloads.

Implements the message format used by the Model Context Protocol for
tool discovery (``tools/list``) and execution (``tools/call``).
"""

from __future__ import annotations

import base64
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

JSONRPC_VERSION = "2.0"

RequestId = int | str | None

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    id: RequestId = None
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_notification(self) -> bool:
        """A request without a correlation id expects no response."""
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message carrying either a result or an error."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _result_xor_error(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    def to_wire(self) -> dict[str, Any]:
        """Return the wire dict; ``id`` is always present, even when null."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.to_wire()
        else:
            payload["result"] = self.result
        return payload


# ---------------------------------------------------------------------------
# Content blocks: ordered units of tool output
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content block."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    """Binary image content block, base64-encoded on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["image"] = "image"
    data: bytes
    mime_type: str = Field(default="image/jpeg", alias="mimeType")

    @field_serializer("data")
    def _encode_data(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")


ContentBlock = Annotated[TextContent | ImageContent, Field(discriminator="type")]


class ToolResult(BaseModel):
    """Successful output of a tool call."""

    model_config = ConfigDict(frozen=True)

    content: tuple[ContentBlock, ...] = ()
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_text(cls, text: str, metadata: dict[str, Any] | None = None) -> ToolResult:
        """Create a ToolResult with a single text block."""
        return cls(content=(TextContent(text=text),), metadata=metadata)

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "\n".join(block.text for block in self.content if isinstance(block, TextContent))

    def to_wire(self) -> dict[str, Any]:
        """Render as the ``tools/call`` result payload, preserving block order."""
        payload: dict[str, Any] = {
            "content": [block.model_dump(mode="json", by_alias=True) for block in self.content],
        }
        if self.metadata is not None:
            payload["metadata"] = self.metadata
        return payload
