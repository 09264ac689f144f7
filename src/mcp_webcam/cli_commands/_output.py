"""Shared CLI output formatters."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from mcp_webcam.utils.logging import stderr_console

if TYPE_CHECKING:
    from mcp_webcam.tools.base import Tool

console = Console()
err_console = stderr_console


def print_tools_table(tools: Iterable[Tool]) -> None:
    """Pretty-print registered tools as a table."""
    table = Table(title="Registered Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Mode")
    table.add_column("Arguments")
    table.add_column("Description")

    for tool in tools:
        params = tool.descriptor.input_schema.params
        args = ", ".join(
            f"{p.name}{'' if p.required else '?'}: {p.type}" for p in params
        ) or "-"
        table.add_row(
            tool.name,
            tool.mode.value,
            args,
            _truncate(tool.descriptor.description),
        )

    console.print(table)


def print_tools_json(tools: Iterable[Tool]) -> None:
    """Print tools exactly as ``tools/list`` returns them."""
    payload = {"tools": [tool.descriptor.to_wire() for tool in tools]}
    console.print_json(json.dumps(payload))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
