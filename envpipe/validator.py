"""Schema validation and type coercion of parsed mappings.

Responsibilities:
- Check required keys and convert declared variables, collecting every
  violation instead of stopping at the first one.
- Apply declared defaults for missing or empty variables.
- Pass undeclared keys through unchanged.

Key types:
- `ValidationResult`: explicit ok/failed outcome of one validation pass.
- `check`: validation returning a `ValidationResult`.
- `validate`: validation returning the mapping or raising
  `AggregateValidationError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .converter import SUPPORTED_TYPES, convert_type, normalize_type_name
from .errors import (
    AggregateValidationError,
    InputError,
    RequiredMissingError,
    TypeConversionError,
    UnsupportedTypeError,
    ValidationIssue,
)
from .schema import Schema, SchemaLoader, VariableSpec


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of one validation pass.

    Attributes:
        values: Assembled mapping; only meaningful when `ok` is true.
        errors: Every violation found, in schema order.
    """

    values: dict[str, Any] = field(default_factory=dict)
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> dict[str, Any]:
        """Return the validated mapping or raise all collected violations at once."""

        if self.errors:
            raise AggregateValidationError(self.errors)
        return self.values


def _is_empty(value: object) -> bool:
    return value is None or value == ""


def _matches_type(value: object, type_name: str) -> bool:
    """Return whether an already-typed value satisfies the declared type."""

    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "boolean":
        return isinstance(value, bool)
    if type_name == "array":
        return isinstance(value, (list, tuple))
    return type_name == "json"


def _coerce(key: str, value: object, spec: VariableSpec) -> Any:
    """Convert one declared value, accepting values that are already typed."""

    if isinstance(value, str):
        return convert_type(value, spec.type, key)

    type_name = normalize_type_name(spec.type)
    if type_name not in SUPPORTED_TYPES:
        raise UnsupportedTypeError(
            key=key, value=value, type_name=spec.type, supported=SUPPORTED_TYPES
        )
    if not _matches_type(value, type_name):
        raise TypeConversionError(
            key=key,
            value=value,
            type_name=type_name,
            reason=f"unexpected {type(value).__name__} value",
        )
    return list(value) if isinstance(value, tuple) else value


def check(
    parsed: Mapping[str, Any],
    schema: Schema | Mapping[str, Any],
) -> ValidationResult:
    """Validate and coerce `parsed` against `schema` without raising for content.

    Raises:
        InputError: If `parsed` is not a mapping or `schema` has the wrong shape.
    """

    if not isinstance(parsed, Mapping):
        raise InputError(f"Parsed values must be a mapping, got {type(parsed).__name__}.")
    if isinstance(schema, (str, bytes)) or not isinstance(schema, (Schema, Mapping)):
        raise InputError(f"Schema must be a mapping, got {type(schema).__name__}.")
    resolved = SchemaLoader.coerce(schema)

    errors: list[ValidationIssue] = []
    for name in resolved.required:
        if _is_empty(parsed.get(name)):
            errors.append(RequiredMissingError(name))

    values: dict[str, Any] = {}
    for name, spec in resolved.variables.items():
        raw_value = parsed.get(name)
        if _is_empty(raw_value):
            if spec.has_default:
                values[name] = spec.default
            continue
        try:
            values[name] = _coerce(name, raw_value, spec)
        except TypeConversionError as exc:
            errors.append(exc)

    for name, raw_value in parsed.items():
        if name not in resolved.variables:
            values[name] = raw_value

    return ValidationResult(values=values, errors=tuple(errors))


def validate(
    parsed: Mapping[str, Any],
    schema: Schema | Mapping[str, Any],
) -> dict[str, Any]:
    """Validate and coerce `parsed` against `schema`.

    Args:
        parsed: Mapping produced by the parser (or an earlier validation).
        schema: `Schema` or `{required, variables}` mapping.

    Returns:
        Declared keys converted or defaulted, plus undeclared keys unchanged.

    Raises:
        InputError: If either argument has the wrong shape.
        AggregateValidationError: With every required-key and conversion
            violation found.
    """

    return check(parsed, schema).unwrap()
