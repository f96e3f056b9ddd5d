"""Integration tests for the parse, check, and generate CLI commands."""

import json
from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from envpipe.cli import app

SCHEMA_YAML = """
required: [DATABASE_URL]
variables:
  PORT:
    type: number
    default: 3000
  DEBUG:
    type: boolean
  HOSTS:
    type: array
""".strip()


def _write(path: Path, content: str) -> Path:
    """Write UTF-8 text and return the path."""

    path.write_text(content, encoding="utf-8")
    return path


def test_parse_command_prints_expanded_mapping_as_json(tmp_path: Path) -> None:
    """Parse should print the expanded document as sorted JSON."""

    env_file = _write(
        tmp_path / "app.env",
        "# settings\nHOST=db.local\nURL=postgres://${HOST}:5432\nQUOTED=\"a b\"\n",
    )
    runner = CliRunner()

    result = runner.invoke(app, ["parse", str(env_file), "--no-env"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "HOST": "db.local",
        "URL": "postgres://db.local:5432",
        "QUOTED": "a b",
    }


def test_parse_command_defaults_to_dot_env_in_working_directory(
    tmp_path: Path, monkeypatch: MonkeyPatch
) -> None:
    """Without a path argument the `.env` file in the working directory is read."""

    _write(tmp_path / ".env", "A=1\n")
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(app, ["parse", "--no-env"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"A": "1"}


def test_parse_command_resolves_references_from_process_environment(
    tmp_path: Path, monkeypatch: MonkeyPatch
) -> None:
    """Unknown names come from the process environment unless `--no-env` is set."""

    monkeypatch.setenv("ENVPIPE_CLI_ROOT", "/srv")
    env_file = _write(tmp_path / "app.env", "DATA=${ENVPIPE_CLI_ROOT}/data\n")
    runner = CliRunner()

    with_env = runner.invoke(app, ["parse", str(env_file)])
    without_env = runner.invoke(app, ["parse", str(env_file), "--no-env"])

    assert json.loads(with_env.stdout) == {"DATA": "/srv/data"}
    assert json.loads(without_env.stdout) == {"DATA": "/data"}


def test_parse_command_empty_is_set_flag(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    """`--empty-is-set` stops empty values from falling through to the environment."""

    monkeypatch.setenv("ENVPIPE_CLI_EMPTY", "outside")
    env_file = _write(tmp_path / "app.env", "ENVPIPE_CLI_EMPTY=\nREF=${ENVPIPE_CLI_EMPTY}\n")
    runner = CliRunner()

    default = runner.invoke(app, ["parse", str(env_file)])
    strict = runner.invoke(app, ["parse", str(env_file), "--empty-is-set"])

    assert json.loads(default.stdout)["REF"] == "outside"
    assert json.loads(strict.stdout)["REF"] == ""


def test_parse_command_with_schema_prints_typed_values(tmp_path: Path) -> None:
    """A schema converts values before printing."""

    env_file = _write(
        tmp_path / "app.env",
        "DATABASE_URL=postgres://db\nDEBUG=on\nHOSTS=a, b\nEXTRA=x\n",
    )
    schema_file = _write(tmp_path / "schema.yaml", SCHEMA_YAML)

    result = CliRunner().invoke(
        app, ["parse", str(env_file), "--schema", str(schema_file), "--no-env"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "DATABASE_URL": "postgres://db",
        "PORT": 3000,
        "DEBUG": True,
        "HOSTS": ["a", "b"],
        "EXTRA": "x",
    }


def test_parse_command_verbose_emits_stage_logs(tmp_path: Path) -> None:
    """Verbose mode logs stage events to stderr."""

    env_file = _write(tmp_path / "app.env", "A=1\n")

    result = CliRunner().invoke(app, ["parse", str(env_file), "--no-env", "-v"])

    assert result.exit_code == 0, result.output
    assert "stage=parse event=complete keys=1" in result.output


def test_check_command_reports_ok_with_key_count(tmp_path: Path) -> None:
    """Check should confirm a valid document."""

    env_file = _write(tmp_path / "app.env", "DATABASE_URL=postgres://db\nPORT=8080\n")
    schema_file = _write(tmp_path / "schema.yaml", SCHEMA_YAML)

    result = CliRunner().invoke(
        app, ["check", str(env_file), "--schema", str(schema_file), "--no-env"]
    )

    assert result.exit_code == 0, result.output
    assert "OK (2 keys)" in result.output


def test_generate_command_prints_sorted_filtered_document(tmp_path: Path) -> None:
    """Generate should re-serialize a document with filters applied."""

    env_file = _write(tmp_path / "app.env", "B=two words\nA=1\nSECRET=s\n")

    result = CliRunner().invoke(app, ["generate", str(env_file), "-x", "SECRET"])

    assert result.exit_code == 0, result.output
    assert result.stdout == 'A=1\nB="two words"\n'


def test_generate_command_keeps_source_order_and_includes(tmp_path: Path) -> None:
    """`--no-sort` keeps document order and `--include` limits the keys."""

    env_file = _write(tmp_path / "app.env", "C=3\nB=2\nA=1\n")

    result = CliRunner().invoke(
        app, ["generate", str(env_file), "--no-sort", "-i", "C", "-i", "A"]
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "C=3\nA=1\n"


def test_generate_command_serializes_process_environment(monkeypatch: MonkeyPatch) -> None:
    """Without a file the process environment is serialized."""

    monkeypatch.setenv("ENVPIPE_CLI_GENERATED", "yes please")

    result = CliRunner().invoke(app, ["generate", "-i", "ENVPIPE_CLI_GENERATED"])

    assert result.exit_code == 0, result.output
    assert result.stdout == 'ENVPIPE_CLI_GENERATED="yes please"\n'


def test_generate_command_writes_output_file(tmp_path: Path) -> None:
    """`--out` writes the document and reports the destination."""

    env_file = _write(tmp_path / "app.env", "B=2\nA=1\n")
    out_file = tmp_path / "nested" / "out.env"

    result = CliRunner().invoke(app, ["generate", str(env_file), "--out", str(out_file)])

    assert result.exit_code == 0, result.output
    assert f"Wrote {out_file}" in result.output
    assert out_file.read_text(encoding="utf-8") == "A=1\nB=2\n"
