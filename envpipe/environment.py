"""Read-only lookups and the process-wide environment store.

Key types:
- `ExternalLookup`: the capability the expander consults for names that are
  not defined in the document being parsed.
- `MappingLookup`: lookup over any mapping, handy for tests and snapshots.
- `ProcessEnvironment`: `get`/`set`/`has` over `os.environ` or an injected
  mutable mapping.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, MutableMapping, Protocol, runtime_checkable


@runtime_checkable
class ExternalLookup(Protocol):
    """Read-only key to string lookup."""

    def get(self, name: str) -> str | None:
        """Return the value for `name`, or `None` when it is not defined."""


@dataclass(frozen=True, slots=True)
class MappingLookup:
    """Expose a plain mapping through the `ExternalLookup` interface."""

    values: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str | None:
        return self.values.get(name)


class ProcessEnvironment:
    """Process-wide key/value store used by the load and populate adapters."""

    def __init__(self, environ: MutableMapping[str, str] | None = None) -> None:
        """Wrap `os.environ` unless another mutable mapping is injected."""

        self._environ = os.environ if environ is None else environ

    def get(self, name: str) -> str | None:
        return self._environ.get(name)

    def set(self, name: str, value: str) -> None:
        self._environ[name] = value

    def has(self, name: str) -> bool:
        return name in self._environ

    def snapshot(self) -> dict[str, str]:
        """Return a detached copy of the current environment."""

        return dict(self._environ)


def as_lookup(source: ExternalLookup | Mapping[str, str] | None) -> ExternalLookup | None:
    """Coerce a mapping into a lookup; pass lookups and `None` through."""

    if source is None or isinstance(source, (MappingLookup, ProcessEnvironment)):
        return source
    if isinstance(source, Mapping):
        return MappingLookup(source)
    return source
