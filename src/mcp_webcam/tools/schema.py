"""Tool input schemas and the argument validator.

Schemas are declared as an ordered list of :class:`ToolParam` entries and
rendered to JSON Schema for ``tools/list``.  Validation is deliberately
shallow: required keys, primitive kinds, and an optional integer minimum.
Unknown keys are ignored so older servers accept newer clients.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

from mcp_webcam.protocol.errors import SchemaValidationError

ParamType = Literal["string", "integer", "boolean"]


class ToolParam(BaseModel):
    """A single named argument of a tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ParamType = "string"
    description: str = ""
    required: bool = False
    minimum: int | None = None


class InputSchema(BaseModel):
    """The declared arguments of a tool, in declaration order."""

    model_config = ConfigDict(frozen=True)

    params: tuple[ToolParam, ...] = ()

    @model_validator(mode="after")
    def _unique_names(self) -> InputSchema:
        names = [p.name for p in self.params]
        if len(names) != len(set(names)):
            msg = f"duplicate parameter names in schema: {names}"
            raise ValueError(msg)
        return self

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema object for ``inputSchema``."""
        properties: dict[str, Any] = {}
        for param in self.params:
            prop: dict[str, Any] = {"type": param.type}
            if param.description:
                prop["description"] = param.description
            if param.minimum is not None:
                prop["minimum"] = param.minimum
            properties[param.name] = prop
        return {
            "type": "object",
            "properties": properties,
            "required": self.required,
        }


def _matches(kind: ParamType, value: Any) -> bool:
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "integer":
        # bool is an int subclass; JSON true is not an integer.
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, str)


def validate_arguments(schema: InputSchema, arguments: dict[str, Any]) -> dict[str, Any]:
    """Check *arguments* against *schema* and return them unchanged.

    Raises
    ------
    SchemaValidationError
        Naming the first offending key: missing required keys are reported
        before type mismatches, each in declaration order.
    """
    for param in schema.params:
        if param.required and param.name not in arguments:
            raise SchemaValidationError(param.name, param.type, "required argument is missing")

    for param in schema.params:
        if param.name not in arguments:
            continue
        value = arguments[param.name]
        if not _matches(param.type, value):
            raise SchemaValidationError(
                param.name,
                param.type,
                f"expected {param.type}, got {type(value).__name__}",
            )
        if param.minimum is not None and value < param.minimum:
            raise SchemaValidationError(param.name, param.type, f"must be >= {param.minimum}")

    return arguments
