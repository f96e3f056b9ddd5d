"""Shared parsing helpers for option and value normalization."""

from __future__ import annotations


TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on", "enabled"})
FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off", "disabled"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in TRUE_BOOLEAN_TOKENS:
        return True
    if token in FALSE_BOOLEAN_TOKENS:
        return False
    return None
