"""Schema model and loaders.

Responsibilities:
- Define the declarative schema as typed, immutable dataclasses.
- Build schemas from plain mappings or from YAML/JSON documents, rejecting
  malformed shapes before validation starts.

Key types:
- `VariableSpec`: declared type and optional default of one variable.
- `Schema`: required keys plus per-variable specs.
- `SchemaLoader`: static construction helpers for `Schema`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from .errors import OptionsError


class _Missing:
    """Sentinel type for "no default declared"."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class VariableSpec:
    """Declared type and optional default for one variable.

    Attributes:
        type: Type name understood by `envpipe.converter.convert_type`.
        default: Value used when the variable is missing or empty; already in
            its final type. `MISSING` when no default is declared.
    """

    type: str = "string"
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        """Return whether a default (possibly `None`) was declared."""

        return self.default is not MISSING


@dataclass(frozen=True, slots=True)
class Schema:
    """Required keys and per-variable type rules.

    Attributes:
        required: Keys that must be present and non-empty.
        variables: Specs for keys that are converted or defaulted.
    """

    required: tuple[str, ...] = ()
    variables: Mapping[str, VariableSpec] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Schema:
        """Build a schema from `{required: [...], variables: {name: {type, default?}}}`."""

        return SchemaLoader.from_mapping(payload)


class SchemaLoader:
    """Factory methods for creating `Schema` from external sources."""

    _SUPPORTED_KEYS = frozenset({"required", "variables"})
    _SUPPORTED_SPEC_KEYS = frozenset({"type", "default"})

    @staticmethod
    def coerce(schema: Schema | Mapping[str, Any] | str | Path | None) -> Schema | None:
        """Return a `Schema` for any accepted schema source, or `None`."""

        if schema is None or isinstance(schema, Schema):
            return schema
        if isinstance(schema, Mapping):
            return SchemaLoader.from_mapping(schema)
        if isinstance(schema, (str, Path)):
            return SchemaLoader.from_file(Path(schema))
        raise OptionsError(
            f"Schema must be a mapping, a Schema, or a path, got {type(schema).__name__}."
        )

    @staticmethod
    def from_file(path: Path) -> Schema:
        """Create a schema from a `.yaml`, `.yml`, or `.json` file."""

        raw_text = path.read_text(encoding="utf-8")
        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            try:
                payload = yaml.safe_load(raw_text)
            except yaml.YAMLError as exc:
                raise OptionsError(f"Schema file `{path}` is not valid YAML: {exc}") from exc
        elif suffix == ".json":
            try:
                payload = json.loads(raw_text)
            except json.JSONDecodeError as exc:
                raise OptionsError(f"Schema file `{path}` is not valid JSON: {exc}") from exc
        else:
            raise OptionsError(
                f"Unsupported schema format `{path.suffix}`; use .yaml, .yml, or .json."
            )

        if payload is None:
            payload = {}
        return SchemaLoader.from_mapping(payload, source_label=f"Schema `{path}`")

    @staticmethod
    def from_mapping(payload: object, source_label: str = "Schema") -> Schema:
        """Create a schema from a plain mapping payload."""

        if not isinstance(payload, Mapping):
            raise OptionsError(f"{source_label} must be a mapping/object.")

        unknown = sorted(str(key) for key in set(payload) - SchemaLoader._SUPPORTED_KEYS)
        if unknown:
            raise OptionsError(
                f"{source_label} includes unsupported key(s): {', '.join(unknown)}."
            )

        required = SchemaLoader._required_keys(payload.get("required"), source_label)
        variables = SchemaLoader._variable_specs(payload.get("variables"), source_label)
        return Schema(required=required, variables=MappingProxyType(variables))

    @staticmethod
    def _required_keys(raw: object, source_label: str) -> tuple[str, ...]:
        """Read the `required` list of non-empty key names."""

        if raw is None:
            return ()
        if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
            raise OptionsError(f"{source_label} field `required` must be a list of names.")
        names: list[str] = []
        for item in raw:
            if not isinstance(item, str) or not item.strip():
                raise OptionsError(
                    f"{source_label} field `required` contains an invalid name: {item!r}."
                )
            names.append(item)
        return tuple(names)

    @staticmethod
    def _variable_specs(raw: object, source_label: str) -> dict[str, VariableSpec]:
        """Read the `variables` mapping of name to spec."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise OptionsError(f"{source_label} field `variables` must be a mapping/object.")

        specs: dict[str, VariableSpec] = {}
        for name, raw_spec in raw.items():
            if not isinstance(name, str) or not name.strip():
                raise OptionsError(f"{source_label} field `variables` contains a blank name.")
            if isinstance(raw_spec, VariableSpec):
                specs[name] = raw_spec
                continue
            if not isinstance(raw_spec, Mapping):
                raise OptionsError(
                    f"{source_label} variable `{name}` must be a mapping with a `type`."
                )
            unknown = sorted(
                str(key) for key in set(raw_spec) - SchemaLoader._SUPPORTED_SPEC_KEYS
            )
            if unknown:
                raise OptionsError(
                    f"{source_label} variable `{name}` includes unsupported key(s): "
                    f"{', '.join(unknown)}."
                )
            type_name = raw_spec.get("type", "string")
            if not isinstance(type_name, str) or not type_name.strip():
                raise OptionsError(
                    f"{source_label} variable `{name}` must declare a non-empty `type`."
                )
            specs[name] = VariableSpec(
                type=type_name,
                default=raw_spec["default"] if "default" in raw_spec else MISSING,
            )
        return specs
