"""Variable expansion for parsed values.

Responsibilities:
- Substitute `${NAME}` and `$NAME` references from the mapping built so far,
  falling back to an external lookup and finally to the empty string.
- Re-expand replacements that contain `$` with an immutable context so that
  cycles and runaway nesting are rejected.

Key types:
- `ExpansionContext`: reference chain and depth of one recursive expansion.
- `expand`: the recursive substitution function.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Mapping

from .environment import ExternalLookup
from .errors import CircularReferenceError, DepthExceededError

MAX_EXPANSION_DEPTH = 100

REFERENCE_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True, slots=True)
class ExpansionContext:
    """Recursion state threaded through one top-level expansion.

    Attributes:
        chain: Names currently being substituted, outermost first.
        depth: Number of nested re-expansions performed so far.
    """

    chain: tuple[str, ...] = ()
    depth: int = 0

    @property
    def visiting(self) -> frozenset[str]:
        """Return the set view of the names currently being substituted."""

        return frozenset(self.chain)

    def descend(self, name: str) -> ExpansionContext:
        """Return a copy that records `name` as visited one level deeper."""

        return ExpansionContext(chain=self.chain + (name,), depth=self.depth + 1)


def iter_references(value: str) -> Iterator[str]:
    """Yield referenced names in the order they appear in `value`."""

    for match in REFERENCE_PATTERN.finditer(value):
        yield match.group(1) or match.group(2)


def resolve_reference(
    name: str,
    parsed: Mapping[str, str],
    lookup: ExternalLookup | None,
    *,
    empty_is_unset: bool = True,
) -> str:
    """Resolve one name from parsed values, then the external lookup, then `""`."""

    if name in parsed:
        local = parsed[name]
        if local or not empty_is_unset:
            return local
    if lookup is not None:
        external = lookup.get(name)
        if external:
            return external
    return ""


def expand(
    value: str,
    parsed: Mapping[str, str],
    ctx: ExpansionContext | None = None,
    lookup: ExternalLookup | None = None,
    *,
    empty_is_unset: bool = True,
) -> str:
    """Substitute every variable reference in `value`.

    Args:
        value: Text that may contain `${NAME}` or `$NAME` references.
        parsed: Values assigned so far; never mutated.
        ctx: Recursion state; a fresh context is used when omitted.
        lookup: Optional external source for names missing from `parsed`.
        empty_is_unset: Treat an empty parsed value as undefined so that the
            lookup is consulted for it.

    Returns:
        The fully substituted text.

    Raises:
        CircularReferenceError: If a name is met again while it is being expanded.
        DepthExceededError: If nesting goes deeper than `MAX_EXPANSION_DEPTH`.
    """

    context = ctx if ctx is not None else ExpansionContext()
    if context.depth > MAX_EXPANSION_DEPTH:
        raise DepthExceededError(context.depth, MAX_EXPANSION_DEPTH)

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        if name in context.visiting:
            raise CircularReferenceError(context.chain + (name,))

        replacement = resolve_reference(
            name, parsed, lookup, empty_is_unset=empty_is_unset
        )
        if "$" not in replacement:
            return replacement
        return expand(
            replacement,
            parsed,
            context.descend(name),
            lookup,
            empty_is_unset=empty_is_unset,
        )

    return REFERENCE_PATTERN.sub(_substitute, value)
