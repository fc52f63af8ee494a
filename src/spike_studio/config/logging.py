"""Logging configuration using rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "spike_studio"

_configured = False


def setup_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """Install a RichHandler on the package logger.

    Args:
        level: Logging level name.
        console: Optional console to log to (defaults to stderr).

    Returns:
        The configured package logger.
    """
    global _configured
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under the package logger."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
