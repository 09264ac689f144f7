"""``mcp-webcam tools`` — show the tools the server would register."""

from __future__ import annotations

import sys

import click

from mcp_webcam.cli_commands._output import err_console, print_tools_json, print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
@click.option(
    "--shodan-api-key",
    default=None,
    help="Shodan API key (defaults to $SHODAN_API_KEY).",
)
def tools(as_json: bool, shodan_api_key: str | None) -> None:
    """List the tools available under the current configuration."""
    from mcp_webcam.config import ConfigError, ServerConfig
    from mcp_webcam.devices.camera import CameraManager
    from mcp_webcam.remote.shodan import ShodanClient
    from mcp_webcam.tools.registry import build_registry

    try:
        config = ServerConfig.from_env(shodan_api_key=shodan_api_key)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    shodan = ShodanClient(config.shodan_api_key) if config.shodan_api_key else None
    registry = build_registry(config, camera=CameraManager(), shodan=shodan)

    if as_json:
        print_tools_json(registry)
        return

    print_tools_table(registry)
    if not config.shodan_enabled:
        err_console.print("[yellow]Remote webcam tools disabled: SHODAN_API_KEY not set.[/yellow]")
