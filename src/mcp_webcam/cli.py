"""mcp-webcam CLI entrypoint."""

from __future__ import annotations

import click

from mcp_webcam import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mcp-webcam")
def main() -> None:
    """mcp-webcam — webcam tools for MCP clients."""


# Register subcommands
from mcp_webcam.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
