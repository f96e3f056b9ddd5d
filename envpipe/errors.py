"""Domain exceptions for parsing, expansion, validation, and CLI diagnostics.

Key types:
- `InputError`: a caller passed the wrong argument shape.
- `CircularReferenceError`, `DepthExceededError`: fail-fast expansion errors.
- `RequiredMissingError`, `TypeConversionError`, `UnsupportedTypeError`:
  per-key validation issues collected by the validator.
- `AggregateValidationError`: every issue found during one validation pass.
- `CommandStageError`: stage-scoped failure rendered by the CLI.
"""

from __future__ import annotations

from typing import Iterable, Sequence


class EnvpipeError(Exception):
    """Base class for every error raised by envpipe."""


class InputError(EnvpipeError, TypeError):
    """Raised when an entry point receives an argument of the wrong shape."""


class OptionsError(InputError, ValueError):
    """Raised when load options or a schema document are invalid."""


class ExpansionError(EnvpipeError):
    """Base class for variable expansion failures."""


class CircularReferenceError(ExpansionError):
    """Raised when expansion revisits a name that is still being expanded."""

    def __init__(self, chain: Sequence[str]) -> None:
        """Initialize with the ordered reference chain ending at the repeated name."""

        self.chain = tuple(chain)
        super().__init__(f"Circular reference detected: {' -> '.join(self.chain)}")


class DepthExceededError(ExpansionError):
    """Raised when nested expansion goes deeper than the allowed limit."""

    def __init__(self, depth: int, limit: int) -> None:
        self.depth = depth
        self.limit = limit
        super().__init__(f"Maximum expansion depth exceeded ({depth} > {limit}).")


class ValidationIssue(EnvpipeError):
    """Base class for one per-key violation found by the validator."""

    key: str


class RequiredMissingError(ValidationIssue):
    """Raised (collected) when a required key is absent or empty."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Required environment variable `{key}` is missing or empty.")


class TypeConversionError(ValidationIssue, ValueError):
    """Raised when a raw value cannot be coerced to its declared type."""

    def __init__(
        self,
        *,
        key: str | None,
        value: object,
        type_name: str,
        reason: str,
    ) -> None:
        """Initialize a conversion error tagged with key, raw value, and type."""

        self.key = key or ""
        self.value = value
        self.type_name = type_name
        self.reason = reason
        label = f"`{key}`" if key else "value"
        super().__init__(f"Cannot convert {label} ({value!r}) to {type_name}: {reason}")


class UnsupportedTypeError(TypeConversionError):
    """Raised when a schema declares a type name the converter does not know."""

    def __init__(
        self,
        *,
        key: str | None,
        value: object,
        type_name: str,
        supported: Iterable[str],
    ) -> None:
        self.supported = tuple(supported)
        super().__init__(
            key=key,
            value=value,
            type_name=type_name,
            reason=f"unsupported type; supported: {', '.join(self.supported)}",
        )


class AggregateValidationError(EnvpipeError, ValueError):
    """Raised once per validation pass with every collected violation."""

    def __init__(self, errors: Sequence[ValidationIssue]) -> None:
        """Initialize with the ordered list of collected issues."""

        self.errors = list(errors)
        lines = "\n".join(f"- {error}" for error in self.errors)
        super().__init__(f"Environment validation failed:\n{lines}")

    @property
    def keys(self) -> list[str]:
        """Return the keys of the collected issues in reporting order."""

        return [error.key for error in self.errors]


class CommandStageError(RuntimeError):
    """Raised when a specific CLI stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
