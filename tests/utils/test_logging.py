"""Tests for stderr logging setup."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from mcp_webcam.utils.logging import configure_logging, stderr_console


@pytest.fixture
def package_logger():
    logger = logging.getLogger("mcp_webcam")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestConfigureLogging:
    def test_installs_stderr_handler(self, package_logger) -> None:
        configure_logging("INFO")
        rich_handlers = [h for h in package_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert rich_handlers[0].console is stderr_console
        assert stderr_console.stderr
        assert package_logger.level == logging.INFO
        assert package_logger.propagate is False

    def test_reconfigure_replaces_handler(self, package_logger) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")
        rich_handlers = [h for h in package_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert package_logger.level == logging.DEBUG
