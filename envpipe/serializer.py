"""Serialization of mappings back to `.env` text.

The output is literal: values are quoted and escaped when needed, but
variable references are never re-encoded.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Collection, Mapping

_NEEDS_QUOTING = re.compile(r"[\s\"'${}\\]")
_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def render_value(value: Any) -> str:
    """Render a typed value as text that converts back to the same value."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, (list, tuple)):
        if all(isinstance(item, str) for item in value):
            return ",".join(value)
        return json.dumps(list(value), separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def quote_value(value: str) -> str:
    """Quote and escape `value` when it would not survive parsing verbatim."""

    if not _NEEDS_QUOTING.search(value):
        return value
    escaped = "".join(_ESCAPES.get(character, character) for character in value)
    return f'"{escaped}"'


def generate(
    source: Mapping[str, Any],
    *,
    include: Collection[str] | None = None,
    exclude: Collection[str] | None = None,
    sort: bool = True,
) -> str:
    """Serialize a mapping to `KEY=VALUE` lines.

    Args:
        source: Values to serialize.
        include: When given, only these keys are emitted.
        exclude: Keys that are never emitted.
        sort: Emit keys in lexicographic order instead of source order.

    Returns:
        Lines joined with `\\n`, without a trailing newline.
    """

    keys = [key for key in source if include is None or key in include]
    if exclude:
        keys = [key for key in keys if key not in exclude]
    if sort:
        keys.sort()
    return "\n".join(f"{key}={quote_value(render_value(source[key]))}" for key in keys)
