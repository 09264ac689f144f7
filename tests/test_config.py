"""Tests for environment-derived configuration."""

import pytest

from mcp_webcam.config import ConfigError, ServerConfig


class TestServerConfig:
    def test_defaults(self) -> None:
        config = ServerConfig.from_env({})
        assert config.shodan_api_key is None
        assert not config.shodan_enabled
        assert config.log_level == "WARNING"
        assert config.remote_timeout == 30.0
        assert config.max_blocking_workers == 4
        assert config.telemetry is False

    def test_reads_environment(self) -> None:
        config = ServerConfig.from_env(
            {
                "SHODAN_API_KEY": "abc",
                "MCP_WEBCAM_LOG_LEVEL": "debug",
                "MCP_WEBCAM_REMOTE_TIMEOUT": "2.5",
                "MCP_WEBCAM_MAX_WORKERS": "8",
                "MCP_WEBCAM_TELEMETRY": "yes",
                "OTEL_EXPORTER_OTLP_ENDPOINT": "http://collector:4317",
            }
        )
        assert config.shodan_enabled
        assert config.log_level == "DEBUG"
        assert config.remote_timeout == 2.5
        assert config.max_blocking_workers == 8
        assert config.telemetry is True
        assert config.otlp_endpoint == "http://collector:4317"

    def test_blank_key_disables_remote_tools(self) -> None:
        assert not ServerConfig.from_env({"SHODAN_API_KEY": "   "}).shodan_enabled

    def test_overrides_win(self) -> None:
        config = ServerConfig.from_env({"SHODAN_API_KEY": "env"}, shodan_api_key="cli")
        assert config.shodan_api_key == "cli"

    def test_none_override_falls_through(self) -> None:
        config = ServerConfig.from_env({"MCP_WEBCAM_LOG_LEVEL": "INFO"}, log_level=None)
        assert config.log_level == "INFO"

    def test_falsy_telemetry(self) -> None:
        assert ServerConfig.from_env({"MCP_WEBCAM_TELEMETRY": "0"}).telemetry is False

    @pytest.mark.parametrize(
        "env",
        [
            {"MCP_WEBCAM_REMOTE_TIMEOUT": "0"},
            {"MCP_WEBCAM_REMOTE_TIMEOUT": "soon"},
            {"MCP_WEBCAM_MAX_WORKERS": "0"},
            {"MCP_WEBCAM_LOG_LEVEL": "LOUD"},
        ],
    )
    def test_invalid_values(self, env: dict[str, str]) -> None:
        with pytest.raises(ConfigError):
            ServerConfig.from_env(env)
