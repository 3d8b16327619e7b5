"""livevalid CLI - Main entry point."""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from livevalid import __version__
from livevalid.binder import ValidatorBinder
from livevalid.cli_utils import (
    EXIT_INVALID,
    build_conditions,
    error,
    warning,
    wire_config,
)
from livevalid.config import LivevalidConfig
from livevalid.condition import Condition
from livevalid.live import MutableLiveValue
from livevalid.live_validator import LiveValidator
from livevalid.log import setup_logging
from livevalid.mux import MuxValidator
from livevalid.operators import Disjunction
from livevalid.result import ValidationResult

app = typer.Typer(
    name="livevalid",
    help="livevalid - Reactive value validation from the command line.",
    add_completion=False,
)

# Rich console for command output
console = Console()


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _result_to_dict(value: str | None, result: ValidationResult | None) -> dict[str, Any]:
    return {
        "value": value,
        "valid": result is not None and result.is_valid,
        "error": result.error_message if result is not None else None,
    }


def _format_verdict(value: str | None, result: ValidationResult | None, counter: str = "") -> str:
    shown = escape(repr(value))
    if result is not None and result.is_valid:
        return f"  [green]✓[/green] {shown}{counter}"
    message = result.error_message if result is not None else None
    reason = f": {escape(message)}" if message else ""
    return f"  [red]✗[/red] {shown}{counter}{reason}"


def _setup(
    *,
    any_rule: bool,
    log_level: str | None,
    json_output: bool,
    rules: dict[str, Any],
) -> tuple[LivevalidConfig, list[Condition[Any]]]:
    """Resolve config, configure logging and build conditions for a command."""
    config = wire_config(
        operator="disjunction" if any_rule else None,
        log_level=log_level,
        json_output=json_output,
    )
    setup_logging(config.log_level)
    try:
        conditions = build_conditions(**rules)
    except ValueError as e:
        error(str(e))
    if not conditions:
        # An empty disjunction is invalid, an empty conjunction is valid
        if isinstance(config.create_operator(), Disjunction):
            warning("No rules given with a disjunction, every value is rejected")
        else:
            warning("No rules given, every value is valid")
    return config, conditions


def _make_validator(
    source: MutableLiveValue[str], config: LivevalidConfig, conditions: list[Condition[Any]]
) -> LiveValidator[str]:
    validator: LiveValidator[str] = LiveValidator(source, operator=config.create_operator())
    validator.change_conditions(lambda current: current.extend(conditions))
    return validator


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"livevalid version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """livevalid - Reactive value validation from the command line."""
    pass


# -----------------------------------------------------------------------------
# Check Command
# -----------------------------------------------------------------------------


@app.command()
def check(
    values: list[str] = typer.Argument(..., help="Values to validate."),
    required: bool = typer.Option(False, "--required", help="Reject empty or blank values."),
    not_null: bool = typer.Option(False, "--not-null", help="Reject missing values."),
    min_length: int | None = typer.Option(None, "--min-length", help="Minimum text length."),
    max_length: int | None = typer.Option(None, "--max-length", help="Maximum text length."),
    length: int | None = typer.Option(None, "--length", help="Exact text length."),
    regex: list[str] | None = typer.Option(
        None, "--regex", help="Pattern the whole value must match. Repeatable."
    ),
    contains: list[str] | None = typer.Option(
        None, "--contains", help="Text the value must contain. Repeatable."
    ),
    any_rule: bool = typer.Option(
        False, "--any", help="Pass when any rule passes instead of all of them."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Minimal output for CI."),
) -> None:
    """Validate one or more values against the given rules.

    Every value gets its own live validator; a multiplexer combines their
    verdicts. Exits with status 1 if any value is invalid.
    """
    config, conditions = _setup(
        any_rule=any_rule,
        log_level=log_level,
        json_output=json_output,
        rules={
            "required": required,
            "not_null": not_null,
            "min_length": min_length,
            "max_length": max_length,
            "length": length,
            "regex": regex,
            "contains": contains,
        },
    )

    mux = MuxValidator()
    fields: list[tuple[str, LiveValidator[str]]] = []
    for value in values:
        validator = _make_validator(MutableLiveValue(value), config, conditions)
        mux.add_validator(validator)
        fields.append((value, validator))

    # Observing the mux activates every member
    subscription = mux.observe(lambda _result: None)
    aggregate = mux.state.value
    subscription.cancel()

    passed = aggregate is not None and aggregate.is_valid

    if config.output == "json":
        console.print_json(
            json.dumps(
                {
                    "valid": passed,
                    "error": aggregate.error_message if aggregate is not None else None,
                    "results": [
                        _result_to_dict(value, validator.state.value) for value, validator in fields
                    ],
                }
            )
        )
    elif not quiet:
        for value, validator in fields:
            console.print(_format_verdict(value, validator.state.value))
        valid_count = sum(1 for _, validator in fields if validator.is_valid())
        status = "[green]valid[/green]" if passed else "[red]invalid[/red]"
        console.print(f"\n{valid_count}/{len(fields)} values passed, overall {status}")

    if not passed:
        raise typer.Exit(code=EXIT_INVALID)


# -----------------------------------------------------------------------------
# Watch Command
# -----------------------------------------------------------------------------


@app.command()
def watch(
    required: bool = typer.Option(False, "--required", help="Reject empty or blank values."),
    not_null: bool = typer.Option(False, "--not-null", help="Reject missing values."),
    min_length: int | None = typer.Option(None, "--min-length", help="Minimum text length."),
    max_length: int | None = typer.Option(None, "--max-length", help="Maximum text length."),
    length: int | None = typer.Option(None, "--length", help="Exact text length."),
    regex: list[str] | None = typer.Option(
        None, "--regex", help="Pattern the whole value must match. Repeatable."
    ),
    contains: list[str] | None = typer.Option(
        None, "--contains", help="Text the value must contain. Repeatable."
    ),
    any_rule: bool = typer.Option(
        False, "--any", help="Pass when any rule passes instead of all of them."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    json_output: bool = typer.Option(False, "--json", help="Output one JSON object per line."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print the summary."),
) -> None:
    """Validate stdin line by line as a live source.

    Each line replaces the source value and the bound validator reports a new
    verdict. Exits with status 1 if any line was invalid.
    """
    config, conditions = _setup(
        any_rule=any_rule,
        log_level=log_level,
        json_output=json_output,
        rules={
            "required": required,
            "not_null": not_null,
            "min_length": min_length,
            "max_length": max_length,
            "length": length,
            "regex": regex,
            "contains": contains,
        },
    )

    source: MutableLiveValue[str] = MutableLiveValue()
    validator = _make_validator(source, config, conditions)
    verdicts: list[ValidationResult] = []

    def report(line: MutableLiveValue[str] | None, result: ValidationResult | None) -> None:
        # The verdict for the empty source on attach is not a line
        if line is None or not line.has_value or result is None:
            return
        verdicts.append(result)
        if config.output == "json":
            typer.echo(json.dumps(_result_to_dict(line.value, result)))
        elif not quiet:
            counter = ""
            if binder.max_length is not None:
                counter = f" ({len(line.value or '')}/{binder.max_length})"
            console.print(_format_verdict(line.value, result, counter))

    binder: ValidatorBinder[MutableLiveValue[str], str] = ValidatorBinder(
        validator, on_result=report, target=source
    )
    binder.attach()
    try:
        for line in typer.get_text_stream("stdin"):
            source.value = line.rstrip("\r\n")
    finally:
        binder.detach()

    invalid_count = sum(1 for result in verdicts if not result.is_valid)
    if config.output != "json":
        console.print(f"\n{len(verdicts) - invalid_count}/{len(verdicts)} lines passed")

    if invalid_count:
        raise typer.Exit(code=EXIT_INVALID)
