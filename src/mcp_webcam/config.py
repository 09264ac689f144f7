"""Server configuration — environment-derived, validated settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

ENV_SHODAN_API_KEY = "SHODAN_API_KEY"
ENV_LOG_LEVEL = "MCP_WEBCAM_LOG_LEVEL"
ENV_REMOTE_TIMEOUT = "MCP_WEBCAM_REMOTE_TIMEOUT"
ENV_MAX_WORKERS = "MCP_WEBCAM_MAX_WORKERS"
ENV_TELEMETRY = "MCP_WEBCAM_TELEMETRY"
ENV_OTLP_ENDPOINT = "OTEL_EXPORTER_OTLP_ENDPOINT"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Configuration values are missing or invalid."""


class ServerConfig(BaseModel):
    """Configuration for the webcam MCP server."""

    server_name: str = Field(default="mcp-webcam", description="Name reported by initialize.")
    shodan_api_key: str | None = Field(
        default=None,
        description="Shodan API key; remote webcam tools are registered only when set.",
    )
    log_level: str = Field(default="WARNING", description="Diagnostic verbosity (stderr only).")
    remote_timeout: float = Field(
        default=30.0, gt=0, description="Deadline in seconds for network-backed tool calls."
    )
    max_blocking_workers: int = Field(
        default=4, ge=1, description="Worker threads for blocking (device) tool calls."
    )
    telemetry: bool = Field(default=False, description="Export OpenTelemetry spans.")
    otlp_endpoint: str | None = Field(default=None, description="OTLP/gRPC span endpoint.")

    @field_validator("shodan_api_key")
    @classmethod
    def _blank_key_is_absent(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            msg = f"log level must be one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @property
    def shodan_enabled(self) -> bool:
        return self.shodan_api_key is not None

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> ServerConfig:
        """Build a config from environment variables.

        Keyword *overrides* win over the environment; ``None`` overrides are
        ignored so unset CLI options fall through.

        Raises
        ------
        ConfigError
            If any value fails validation.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if ENV_SHODAN_API_KEY in env:
            values["shodan_api_key"] = env[ENV_SHODAN_API_KEY]
        if ENV_LOG_LEVEL in env:
            values["log_level"] = env[ENV_LOG_LEVEL]
        if ENV_REMOTE_TIMEOUT in env:
            values["remote_timeout"] = env[ENV_REMOTE_TIMEOUT]
        if ENV_MAX_WORKERS in env:
            values["max_blocking_workers"] = env[ENV_MAX_WORKERS]
        if ENV_TELEMETRY in env:
            values["telemetry"] = env[ENV_TELEMETRY].strip().lower() in _TRUTHY
        if env.get(ENV_OTLP_ENDPOINT):
            values["otlp_endpoint"] = env[ENV_OTLP_ENDPOINT]

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
