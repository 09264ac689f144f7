"""``mcp-webcam serve`` — run the MCP server on stdin/stdout."""

from __future__ import annotations

import logging
import sys

import click

from mcp_webcam.cli_commands._output import err_console

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Diagnostic verbosity on stderr (defaults to $MCP_WEBCAM_LOG_LEVEL or WARNING).",
)
@click.option(
    "--shodan-api-key",
    default=None,
    help="Shodan API key enabling remote webcam tools (defaults to $SHODAN_API_KEY).",
)
@click.option(
    "--remote-timeout",
    type=float,
    default=None,
    help="Deadline in seconds for network-backed tool calls.",
)
@click.option(
    "--max-workers",
    type=int,
    default=None,
    help="Worker threads for local camera calls.",
)
@click.option(
    "--telemetry/--no-telemetry",
    default=None,
    help="Export OpenTelemetry spans (requires the otel extra).",
)
def serve(
    log_level: str | None,
    shodan_api_key: str | None,
    remote_timeout: float | None,
    max_workers: int | None,
    telemetry: bool | None,
) -> None:
    """Serve webcam tools over newline-delimited JSON-RPC on stdio."""
    from mcp_webcam.config import ConfigError, ServerConfig
    from mcp_webcam.server.app import EXIT_CONFIG_ERROR, run_server
    from mcp_webcam.utils.logging import configure_logging

    try:
        config = ServerConfig.from_env(
            log_level=log_level,
            shodan_api_key=shodan_api_key,
            remote_timeout=remote_timeout,
            max_blocking_workers=max_workers,
            telemetry=telemetry,
        )
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(config.log_level)

    if config.telemetry:
        from mcp_webcam.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name=config.server_name,
                otlp_endpoint=config.otlp_endpoint,
            )
        except ImportError as exc:
            logger.warning("Telemetry disabled: %s", exc)

    sys.exit(run_server(config))
