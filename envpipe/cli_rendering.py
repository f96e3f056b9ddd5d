"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
parsed mappings, and validation reports.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, NoReturn

import typer

from .errors import AggregateValidationError, CommandStageError


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats, which JSON cannot represent, with strings."""

    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


def echo_mapping(values: Mapping[str, Any]) -> None:
    """Print a mapping as deterministic, sorted JSON."""

    payload = {key: _json_safe(value) for key, value in values.items()}
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def echo_validation_errors(error: AggregateValidationError) -> None:
    """Print every collected validation violation, one per line."""

    typer.secho(
        f"Validation failed with {len(error.errors)} error(s):",
        fg=typer.colors.RED,
        err=True,
    )
    for issue in error.errors:
        typer.secho(f"- {issue}", fg=typer.colors.RED, err=True)
