"""Load, populate, and export entry points around the pure core.

Responsibilities:
- Read a `.env` document through `EnvFileStore`, parse it with the process
  environment as external lookup, and validate it when a schema is set.
- Write loaded values into a `ProcessEnvironment`, honoring the override
  policy.
- Serialize a mapping (the process environment by default) to a file.

Key public functions:
- `load`, `populate`, `configure`, `export`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Collection, Mapping

from .config import DEFAULT_ENV_FILE, EnvOptions
from .environment import ProcessEnvironment
from .io.storage import EnvFileStore
from .parser import parse
from .serializer import generate, render_value
from .telemetry.logger import RunLogger
from .validator import validate


def load(
    options: EnvOptions | None = None,
    *,
    store: EnvFileStore | None = None,
    environment: ProcessEnvironment | None = None,
    run_logger: RunLogger | None = None,
) -> dict[str, Any]:
    """Read, parse, and optionally validate one `.env` document.

    A missing document yields an empty mapping.

    Raises:
        OptionsError: If options are invalid.
        ExpansionError: If expansion loops or nests too deeply.
        AggregateValidationError: If schema validation fails.
    """

    resolved_options = options or EnvOptions()
    resolved_options.validate()
    resolved_store = store or EnvFileStore()
    resolved_environment = environment or ProcessEnvironment()

    if run_logger is not None:
        run_logger.log_stage_start("load", path=resolved_options.path)
    try:
        text = resolved_store.read_text(resolved_options.path, resolved_options.encoding)
        if text is None:
            if run_logger is not None:
                run_logger.log_stage_skip("load", reason="not_found")
            return {}

        values: dict[str, Any] = parse(text, resolved_environment)
        schema = resolved_options.resolved_schema()
        if schema is not None:
            values = validate(values, schema)
    except Exception as exc:
        if run_logger is not None:
            run_logger.log_stage_failure("load", type(exc).__name__)
        raise

    if run_logger is not None:
        run_logger.log_stage_complete("load", keys=len(values))
    return values


def populate(
    values: Mapping[str, Any],
    environment: ProcessEnvironment | None = None,
    *,
    override: bool = False,
) -> list[str]:
    """Write values into the environment and return the names written.

    Existing names are left untouched unless `override` is true. Typed values
    are rendered the same way the serializer renders them.
    """

    target = environment or ProcessEnvironment()
    written: list[str] = []
    for name, value in values.items():
        if not override and target.has(name):
            continue
        target.set(name, render_value(value))
        written.append(name)
    return written


def configure(
    options: EnvOptions | None = None,
    *,
    store: EnvFileStore | None = None,
    environment: ProcessEnvironment | None = None,
    run_logger: RunLogger | None = None,
) -> dict[str, Any]:
    """Load a document and populate the environment with its values."""

    resolved_options = options or EnvOptions()
    resolved_environment = environment or ProcessEnvironment()
    values = load(
        resolved_options,
        store=store,
        environment=resolved_environment,
        run_logger=run_logger,
    )

    if run_logger is not None:
        run_logger.log_stage_start("populate", override=resolved_options.override)
    written = populate(values, resolved_environment, override=resolved_options.override)
    if run_logger is not None:
        run_logger.log_stage_complete(
            "populate", written=len(written), skipped=len(values) - len(written)
        )
    return values


def export(
    path: str | Path = DEFAULT_ENV_FILE,
    *,
    source: Mapping[str, Any] | None = None,
    include: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
    sort: bool = True,
    encoding: str = "utf-8",
    store: EnvFileStore | None = None,
    environment: ProcessEnvironment | None = None,
    run_logger: RunLogger | None = None,
) -> Path:
    """Serialize `source` (the environment when omitted) and write it to `path`."""

    resolved_source = (
        source if source is not None else (environment or ProcessEnvironment()).snapshot()
    )
    resolved_store = store or EnvFileStore()

    if run_logger is not None:
        run_logger.log_stage_start("export", path=path)
    text = generate(resolved_source, include=include, exclude=exclude, sort=sort)
    written = resolved_store.write_text(path, f"{text}\n" if text else "", encoding=encoding)
    if run_logger is not None:
        run_logger.log_stage_complete("export", keys=text.count("\n") + 1 if text else 0)
    return written
