"""Load options and their loaders.

Responsibilities:
- Define the recognised load options as a typed dataclass.
- Validate options before any file or environment access.
- Build options from mappings, YAML files, and environment variables.

Key types:
- `EnvOptions`: file path, override policy, encoding, and optional schema.
- `OptionsLoader`: static construction helpers for `EnvOptions`.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import OptionsError
from .parsing import normalize_optional_string, parse_permissive_boolean
from .schema import Schema, SchemaLoader

DEFAULT_ENV_FILE = ".env"
DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class EnvOptions:
    """Options for loading a `.env` document.

    Attributes:
        path: Document path, relative to the store root when not absolute.
        override: Whether populating replaces variables that already exist.
        encoding: Text encoding of the document.
        schema: Optional schema (mapping, `Schema`, or schema file path).
    """

    path: str | Path = DEFAULT_ENV_FILE
    override: bool = False
    encoding: str = DEFAULT_ENCODING
    schema: Schema | Mapping[str, Any] | str | Path | None = None

    def validate(self) -> None:
        """Validate option values before use."""

        if normalize_optional_string(self.path) is None:
            raise OptionsError("`path` must be a non-empty path.")
        if not isinstance(self.override, bool):
            raise OptionsError("`override` must be a boolean.")
        encoding = normalize_optional_string(self.encoding)
        if encoding is None:
            raise OptionsError("`encoding` must be a non-empty string.")
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            raise OptionsError(f"Unknown `encoding` value `{encoding}`.") from exc
        if self.schema is not None and not isinstance(
            self.schema, (Schema, Mapping, str, Path)
        ):
            raise OptionsError(
                "`schema` must be a mapping, a Schema, a schema file path, or None."
            )

    def resolved_schema(self) -> Schema | None:
        """Return the schema as a `Schema` instance, loading it when it is a path."""

        return SchemaLoader.coerce(self.schema)


class OptionsLoader:
    """Factory methods for creating `EnvOptions` from external sources."""

    _SUPPORTED_KEYS = frozenset({"path", "override", "encoding", "schema"})

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str = "Options") -> EnvOptions:
        """Create validated options from a plain mapping."""

        if not isinstance(payload, Mapping):
            raise OptionsError(f"{source_label} must be a mapping/object.")

        unknown = sorted(str(key) for key in set(payload) - OptionsLoader._SUPPORTED_KEYS)
        if unknown:
            raise OptionsError(
                f"{source_label} includes unsupported key(s): {', '.join(unknown)}."
            )

        path = normalize_optional_string(payload.get("path")) or DEFAULT_ENV_FILE
        encoding = normalize_optional_string(payload.get("encoding")) or DEFAULT_ENCODING
        override = OptionsLoader._optional_boolean(payload, "override", source_label)
        schema = payload.get("schema")

        options = EnvOptions(path=path, override=override, encoding=encoding, schema=schema)
        options.validate()
        return options

    @staticmethod
    def from_yaml(path: Path) -> EnvOptions:
        """Create validated options from a YAML file."""

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise OptionsError(f"YAML options `{path}` could not be parsed: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise OptionsError(f"YAML options `{path}` must contain a top-level mapping/object.")
        return OptionsLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> EnvOptions:
        """Create validated options from `ENVPIPE_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        path = normalize_optional_string(env_map.get("ENVPIPE_FILE")) or DEFAULT_ENV_FILE
        encoding = (
            normalize_optional_string(env_map.get("ENVPIPE_ENCODING")) or DEFAULT_ENCODING
        )
        schema = normalize_optional_string(env_map.get("ENVPIPE_SCHEMA"))
        override = False
        if "ENVPIPE_OVERRIDE" in env_map:
            parsed = parse_permissive_boolean(env_map.get("ENVPIPE_OVERRIDE"))
            if parsed is None:
                raise OptionsError(
                    "Environment variable `ENVPIPE_OVERRIDE` must be a boolean value "
                    "(`true`/`false`, `1`/`0`, `yes`/`no`)."
                )
            override = parsed

        options = EnvOptions(path=path, override=override, encoding=encoding, schema=schema)
        options.validate()
        return options

    @staticmethod
    def _optional_boolean(payload: Mapping[str, Any], key: str, source_label: str) -> bool:
        """Read an optional boolean field that defaults to `False`."""

        if key not in payload or payload[key] is None:
            return False
        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise OptionsError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
