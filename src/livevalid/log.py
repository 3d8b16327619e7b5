"""Logging configuration for the livevalid CLI.

The library itself only creates module loggers; handlers are installed by
``setup_logging``, which the CLI calls once per command.
"""

from __future__ import annotations

import logging
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

# Log records go to stderr so they never mix with command output
console = Console(stderr=True)


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the ``livevalid`` logger with a Rich handler.

    Args:
        level: Logging level name.

    Returns:
        The configured package logger.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")

    logger = logging.getLogger("livevalid")
    logger.setLevel(getattr(logging, level))

    # Clear existing handlers so repeated CLI invocations don't stack them
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(getattr(logging, level))
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)
    logger.propagate = False

    return logger
