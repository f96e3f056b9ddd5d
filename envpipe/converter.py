"""Typed coercion of raw string values.

Supported type names (case-insensitive): `string`, `number`, `boolean`,
`array`, and `json`.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Callable

from .errors import TypeConversionError, UnsupportedTypeError
from .parsing import FALSE_BOOLEAN_TOKENS, TRUE_BOOLEAN_TOKENS

SUPPORTED_TYPES = ("string", "number", "boolean", "array", "json")

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_SPECIAL_NUMBERS = {
    "infinity": math.inf,
    "-infinity": -math.inf,
    "nan": math.nan,
}


def _to_string(value: str, key: str | None) -> str:
    return value


def _to_number(value: str, key: str | None) -> int | float:
    text = value.strip()
    if not text:
        raise TypeConversionError(
            key=key, value=value, type_name="number", reason="empty value"
        )

    special = _SPECIAL_NUMBERS.get(text.lower())
    if special is not None:
        return special
    if _INTEGER_PATTERN.fullmatch(text):
        try:
            return int(text)
        except ValueError as exc:
            # Integer literals past the interpreter's digit limit.
            raise TypeConversionError(
                key=key, value=value, type_name="number", reason="number out of range"
            ) from exc
    if _DECIMAL_PATTERN.fullmatch(text):
        return float(text)
    raise TypeConversionError(
        key=key, value=value, type_name="number", reason="not a decimal number"
    )


def _to_boolean(value: str, key: str | None) -> bool:
    token = value.strip().lower()
    if token in TRUE_BOOLEAN_TOKENS:
        return True
    if token in FALSE_BOOLEAN_TOKENS:
        return False
    accepted = ", ".join(sorted(TRUE_BOOLEAN_TOKENS | FALSE_BOOLEAN_TOKENS))
    raise TypeConversionError(
        key=key,
        value=value,
        type_name="boolean",
        reason=f"expected one of: {accepted}",
    )


def _to_array(value: str, key: str | None) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _to_json(value: str, key: str | None) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise TypeConversionError(
            key=key, value=value, type_name="json", reason=exc.msg
        ) from exc
    except RecursionError as exc:
        raise TypeConversionError(
            key=key, value=value, type_name="json", reason="nesting too deep"
        ) from exc


_CONVERTERS: dict[str, Callable[[str, str | None], Any]] = {
    "string": _to_string,
    "number": _to_number,
    "boolean": _to_boolean,
    "array": _to_array,
    "json": _to_json,
}


def normalize_type_name(type_name: str) -> str:
    """Return the canonical lower-case spelling of a type name."""

    return str(type_name).strip().lower()


def convert_type(value: str, type_name: str, key: str | None = None) -> Any:
    """Convert a raw string to the declared type.

    Args:
        value: Raw string value.
        type_name: One of `SUPPORTED_TYPES`, in any letter case.
        key: Optional variable name used to tag conversion errors.

    Returns:
        The converted value (`str`, `int`/`float`, `bool`, `list[str]`, or any
        JSON value). A `json` value that decodes to a plain string is not
        JSON text itself, so converting that result again as `json` fails.

    Raises:
        TypeConversionError: If the value cannot be coerced.
        UnsupportedTypeError: If `type_name` is not supported.
    """

    converter = _CONVERTERS.get(normalize_type_name(type_name))
    if converter is None:
        raise UnsupportedTypeError(
            key=key, value=value, type_name=str(type_name), supported=SUPPORTED_TYPES
        )
    return converter(value, key)
