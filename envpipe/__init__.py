"""Top-level package for envpipe.

This package turns `.env`-style text into validated, typed configuration
mappings and serializes mappings back to text. The main entry points are
`parse`, `validate`, and `generate`; `load`, `configure`, and `export`
wrap them with file and process-environment access.
"""

from .converter import convert_type
from .errors import (
    AggregateValidationError,
    CircularReferenceError,
    DepthExceededError,
    InputError,
    RequiredMissingError,
    TypeConversionError,
    UnsupportedTypeError,
)
from .loader import configure, export, load, populate
from .parser import parse
from .schema import Schema, VariableSpec
from .serializer import generate
from .validator import ValidationResult, check, validate

__all__ = [
    "AggregateValidationError",
    "CircularReferenceError",
    "DepthExceededError",
    "InputError",
    "RequiredMissingError",
    "Schema",
    "TypeConversionError",
    "UnsupportedTypeError",
    "ValidationResult",
    "VariableSpec",
    "__version__",
    "check",
    "configure",
    "convert_type",
    "export",
    "generate",
    "load",
    "parse",
    "populate",
    "validate",
]

__version__ = "0.1.0"
