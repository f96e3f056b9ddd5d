"""Line-oriented parser for `.env`-style documents.

Responsibilities:
- Split raw text into assignments, honoring comments, blank lines, quoting,
  escape sequences, and backslash line continuation.
- Expand variable references against the values assigned so far.
- Reject documents whose definitions refer to each other in a loop.

Malformed lines (no `=`, blank key) are dropped without error.
"""

from __future__ import annotations

import re
from typing import Mapping

from .environment import ExternalLookup, as_lookup
from .errors import CircularReferenceError, InputError
from .expander import expand, iter_references

_LINE_SPLIT_PATTERN = re.compile(r"\r?\n")
_ESCAPE_PATTERN = re.compile(r"\\([nrt\\\"'])")
_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
_QUOTES = ('"', "'")

# key -> {forward name: definition chain from key to that name}
_ForwardReferences = dict[str, dict[str, tuple[str, ...]]]


def _ends_with_continuation(line: str) -> bool:
    """Return whether `line` ends with a single (unescaped) backslash."""

    return line.endswith("\\") and not line.endswith("\\\\")


def _unescape(value: str) -> str:
    return _ESCAPE_PATTERN.sub(lambda match: _ESCAPES[match.group(1)], value)


def unquote(value: str) -> str:
    """Strip matching surrounding quotes and unescape the quoted content.

    Values that are not fully wrapped in one kind of quote are returned as-is.
    """

    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return _unescape(value[1:-1])
    return value


def _track_forward_references(
    key: str,
    value: str,
    result: Mapping[str, str],
    pending: _ForwardReferences,
) -> dict[str, tuple[str, ...]]:
    """Record names `value` refers to before they are defined.

    References through already defined keys inherit those keys' forward
    references. A reference to a key that is still waiting on `key` closes
    a loop in the document.

    Raises:
        CircularReferenceError: If the definition of `key` closes a loop.
    """

    forward: dict[str, tuple[str, ...]] = {}
    for name in iter_references(value):
        if name in result:
            inherited = pending.get(name, {})
            if key in inherited and name != key:
                raise CircularReferenceError((key,) + inherited[key])
            for target, chain in inherited.items():
                if target != key:
                    forward.setdefault(target, chain if name == key else (key,) + chain)
        elif name != key:
            forward.setdefault(name, (key, name))
    return forward


def parse(
    content: str,
    lookup: ExternalLookup | Mapping[str, str] | None = None,
    *,
    empty_is_unset: bool = True,
) -> dict[str, str]:
    """Parse `.env`-style text into an ordered mapping of string values.

    Args:
        content: Raw document text with `\\n` or `\\r\\n` line endings.
        lookup: External values consulted for names the document has not
            defined (yet).
        empty_is_unset: Treat empty values as undefined during expansion.

    Returns:
        Mapping of keys to expanded values in first-assignment order.

    Raises:
        InputError: If `content` is not a string.
        CircularReferenceError: If expansion or the document itself loops.
        DepthExceededError: If expansion nests too deeply.
    """

    if not isinstance(content, str):
        raise InputError(f"Content must be a string, got {type(content).__name__}.")

    external = as_lookup(lookup)
    lines = _LINE_SPLIT_PATTERN.split(content)
    result: dict[str, str] = {}
    pending: _ForwardReferences = {}

    index = 0
    while index < len(lines):
        line = lines[index].strip()
        index += 1
        if not line or line.startswith("#"):
            continue

        while _ends_with_continuation(line) and index < len(lines):
            line = line[:-1] + lines[index].strip()
            index += 1

        if "=" not in line:
            continue
        raw_key, raw_value = line.split("=", 1)
        key = raw_key.strip()
        if not key:
            continue

        value = unquote(raw_value.strip())
        forward = _track_forward_references(key, value, result, pending)
        result[key] = expand(value, result, lookup=external, empty_is_unset=empty_is_unset)
        pending[key] = forward

    return result
