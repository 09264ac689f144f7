"""Diagnostic logging setup.

Stdout carries the protocol, so every log record goes to stderr through a
:class:`rich.logging.RichHandler`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "mcp_webcam"

stderr_console = Console(stderr=True)


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a stderr handler to the package logger at *level*.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_mcp_webcam", False):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=stderr_console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler._mcp_webcam = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
