"""CLI utility functions for livevalid.

Provides helper functions for:
- Config wiring: Extracting Typer CLI options and passing to load_config
- Rule building: Turning rule options into conditions
- Error formatting: Consistent user-friendly error messages with exit codes
"""

from __future__ import annotations

import re
from typing import Any, NoReturn

import typer

from livevalid.condition import Condition
from livevalid.conditions import (
    Contains,
    NotNull,
    RegEx,
    RequiredField,
    TextLength,
    TextMaxLength,
    TextMinLength,
)
from livevalid.config import LivevalidConfig, load_config

# Exit code conventions
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # User error (bad option, bad config, etc.)
EXIT_INVALID = 1  # At least one value failed validation


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


def warning(msg: str) -> None:
    """Print a warning message to stderr."""
    styled_prefix = typer.style("Warning:", fg=typer.colors.YELLOW, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)


# -----------------------------------------------------------------------------
# Config Wiring
# -----------------------------------------------------------------------------


def wire_config(
    *,
    operator: str | None = None,
    log_level: str | None = None,
    json_output: bool = False,
) -> LivevalidConfig:
    """Load configuration with CLI option overrides.

    Args:
        operator: Operator name given on the command line, if any.
        log_level: Log level given on the command line, if any.
        json_output: Whether --json was passed.

    Returns:
        Resolved configuration.

    Raises:
        typer.Exit: If the configuration is invalid.
    """
    overrides: dict[str, Any] = {
        "operator": operator,
        "log_level": log_level,
        "output": "json" if json_output else None,
    }
    try:
        return load_config(cli_overrides=overrides)
    except ValueError as e:
        error(f"Invalid configuration: {e}")


# -----------------------------------------------------------------------------
# Rule Building
# -----------------------------------------------------------------------------


def build_conditions(
    *,
    required: bool = False,
    not_null: bool = False,
    min_length: int | None = None,
    max_length: int | None = None,
    length: int | None = None,
    regex: list[str] | None = None,
    contains: list[str] | None = None,
) -> list[Condition[Any]]:
    """Build the conditions selected by rule options, in a stable order.

    Returns:
        List of conditions. Empty when no rule option was given.

    Raises:
        ValueError: If an option value is invalid (negative length, bad pattern).
    """
    conditions: list[Condition[Any]] = []
    if not_null:
        conditions.append(NotNull())
    if required:
        conditions.append(RequiredField())
    if min_length is not None:
        conditions.append(TextMinLength(min_length))
    if max_length is not None:
        conditions.append(TextMaxLength(max_length))
    if length is not None:
        conditions.append(TextLength(length))
    for pattern in regex or []:
        try:
            conditions.append(RegEx(pattern, f"Text does not match {pattern}"))
        except re.error as e:
            raise ValueError(f"Invalid regular expression '{pattern}': {e}") from e
    for fragment in contains or []:
        conditions.append(Contains(fragment))
    return conditions
