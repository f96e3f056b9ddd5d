"""Command-line interface for envpipe.

Responsibilities:
- Expose user-facing commands to parse, check, and generate `.env` documents.
- Map core failures to stage-aware diagnostics.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from .cli_rendering import echo_mapping, echo_validation_errors, exit_with_command_error
from .environment import ProcessEnvironment
from .errors import (
    AggregateValidationError,
    CommandStageError,
    ExpansionError,
    OptionsError,
)
from .io.storage import EnvFileStore
from .loader import export
from .parser import parse
from .schema import Schema, SchemaLoader
from .serializer import generate
from .telemetry.logger import RunLogger
from .validator import validate

app = typer.Typer(
    name="envpipe",
    no_args_is_help=True,
    help="Parse, validate, and generate .env documents.",
)


def _run_logger(verbose: bool) -> RunLogger | None:
    """Create a stage logger only when verbose output is requested."""

    return RunLogger(level="DEBUG") if verbose else None


def _read_document(env_file: Path, encoding: str) -> str:
    """Read a document and map a missing file to a stage error."""

    text = EnvFileStore().read_text(env_file, encoding)
    if text is None:
        raise CommandStageError(
            stage="read",
            detail=f"Env file not found: `{env_file}`.",
            hint="Pass an existing file path as the first argument.",
        )
    return text


def _load_schema(schema_path: Path | None) -> Schema | None:
    """Load a schema file when requested and map failures to stage errors."""

    if schema_path is None:
        return None
    try:
        return SchemaLoader.from_file(schema_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="schema",
            detail=f"Schema file not found: `{schema_path}`.",
            hint="Provide an existing path via `--schema <path.yaml>`.",
        ) from exc
    except OptionsError as exc:
        raise CommandStageError(
            stage="schema",
            detail=f"Invalid schema file `{schema_path}`: {exc}",
            hint="Use `{required: [...], variables: {NAME: {type, default}}}`.",
        ) from exc


def _parse_document(text: str, use_env: bool, empty_is_set: bool) -> dict[str, str]:
    """Parse document text and map expansion failures to stage errors."""

    lookup = ProcessEnvironment() if use_env else None
    try:
        return parse(text, lookup, empty_is_unset=not empty_is_set)
    except ExpansionError as exc:
        raise CommandStageError(
            stage="expand",
            detail=str(exc),
            hint="Remove the circular or deeply nested variable references.",
        ) from exc


def _validate_values(
    command_name: str, values: dict[str, str], schema: Schema
) -> dict[str, Any]:
    """Validate values, printing every violation before failing."""

    try:
        return validate(values, schema)
    except AggregateValidationError as exc:
        echo_validation_errors(exc)
        exit_with_command_error(
            command_name,
            CommandStageError(
                stage="validate",
                detail=f"{len(exc.errors)} schema violation(s).",
                hint="Fix the listed variables and rerun.",
            ),
        )


@app.command("parse")
def parse_command(
    env_file: Annotated[
        Path, typer.Argument(help="Path to the .env document.")
    ] = Path(".env"),
    schema_file: Annotated[
        Path | None,
        typer.Option("--schema", help="YAML/JSON schema used to validate and convert values."),
    ] = None,
    use_env: Annotated[
        bool,
        typer.Option(
            "--env/--no-env",
            help="Resolve unknown references from the process environment.",
        ),
    ] = True,
    empty_is_set: Annotated[
        bool,
        typer.Option(
            "--empty-is-set",
            help="Treat empty values as defined during expansion instead of falling through.",
        ),
    ] = False,
    encoding: Annotated[
        str, typer.Option("--encoding", help="Text encoding of the document.")
    ] = "utf-8",
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Emit stage logs to stderr.")
    ] = False,
) -> None:
    """Parse a document and print the resulting mapping as JSON."""

    run_logger = _run_logger(verbose)
    try:
        schema = _load_schema(schema_file)
        if run_logger is not None:
            run_logger.log_stage_start("parse", path=env_file)
        values: dict[str, Any] = _parse_document(
            _read_document(env_file, encoding), use_env, empty_is_set
        )
        if run_logger is not None:
            run_logger.log_stage_complete("parse", keys=len(values))
    except Exception as exc:
        if run_logger is not None:
            run_logger.log_stage_failure("parse", type(exc).__name__)
        exit_with_command_error("parse", exc)

    if schema is not None:
        values = _validate_values("parse", values, schema)
    echo_mapping(values)


@app.command("check")
def check_command(
    env_file: Annotated[Path, typer.Argument(help="Path to the .env document.")],
    schema_file: Annotated[
        Path,
        typer.Option("--schema", help="YAML/JSON schema to validate against."),
    ],
    use_env: Annotated[
        bool,
        typer.Option(
            "--env/--no-env",
            help="Resolve unknown references from the process environment.",
        ),
    ] = True,
    encoding: Annotated[
        str, typer.Option("--encoding", help="Text encoding of the document.")
    ] = "utf-8",
) -> None:
    """Validate a document against a schema and report every violation."""

    try:
        schema = _load_schema(schema_file)
        values = _parse_document(_read_document(env_file, encoding), use_env, False)
    except Exception as exc:
        exit_with_command_error("check", exc)

    validated = _validate_values("check", values, schema)
    typer.echo(f"OK ({len(validated)} keys)")


@app.command("generate")
def generate_command(
    env_file: Annotated[
        Path | None,
        typer.Argument(help="Document to re-serialize. Defaults to the process environment."),
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option("--include", "-i", help="Only emit this key (repeatable)."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Never emit this key (repeatable)."),
    ] = None,
    sort: Annotated[
        bool, typer.Option("--sort/--no-sort", help="Sort keys lexicographically.")
    ] = True,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write to this file instead of printing."),
    ] = None,
    encoding: Annotated[
        str, typer.Option("--encoding", help="Text encoding for reading and writing.")
    ] = "utf-8",
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Emit stage logs to stderr.")
    ] = False,
) -> None:
    """Serialize a document or the process environment to `.env` text."""

    run_logger = _run_logger(verbose)
    try:
        if env_file is None:
            source: dict[str, str] = ProcessEnvironment().snapshot()
        else:
            source = _parse_document(_read_document(env_file, encoding), True, False)

        if out is not None:
            written = export(
                out,
                source=source,
                include=include or None,
                exclude=exclude,
                sort=sort,
                encoding=encoding,
                run_logger=run_logger,
            )
            typer.echo(f"Wrote {written}")
            return
        text = generate(source, include=include or None, exclude=exclude, sort=sort)
    except Exception as exc:
        exit_with_command_error("generate", exc)

    typer.echo(text)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
