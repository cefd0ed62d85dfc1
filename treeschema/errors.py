"""Failure records and exception types for treeschema.

Two kinds of problems are kept strictly apart:

- Failures are expected, data-driven mismatches between an object and a
  schema. They are plain Failure records, collected to completion and only
  surfaced together through ValidationFailedError.
- Errors are fatal: a malformed call (SchemaError) or an unexpected exception
  raised while traversing. They propagate immediately and abort the call.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


# Failure message catalogue
MISSING_VALUE = "missing value"
INVALID_SCHEMA = "invalid schema"
MUST_BE_STRING = "must be a string"
MUST_BE_ONE_OF = "must be one of "
MUST_BE_BOOLEAN = "must be true or false"
MUST_BE_NUMBER = "must be a number"
MUST_BE_OF_TYPE = "must be of type "
MUST_BE_ARRAY = "must be an array"


@dataclass(frozen=True)
class Failure:
    """A single field-level validation failure.

    Attributes:
        path: Slash-separated field path (e.g., "/children/0/age")
        message: Human-readable failure description

    Examples:
        >>> failure = Failure(path="/age", message="must be a number")
        >>> str(failure)
        '/age: must be a number'
    """
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    @property
    def is_missing(self) -> bool:
        """Whether this failure reports an absent required field."""
        return self.message == MISSING_VALUE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"path": self.path, "message": self.message}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Failure":
        """Create Failure from dict."""
        return cls(path=data["path"], message=data["message"])


class SchemaError(ValueError):
    """Raised when a schema or an object handed to it is unusable.

    Covers an empty or non-mapping schema definition and an empty object
    passed to validate().
    """


class PredicateFailure(ValueError):
    """Raised by a custom validator to reject a field value.

    Any ValueError raised by a validator is treated the same way; this class
    exists so validators can signal intent explicitly.

    Examples:
        >>> async def positive(value):
        ...     if value <= 0:
        ...         raise PredicateFailure("must be positive")
    """


class ValidationFailedError(Exception):
    """Raised when an object fails validation against a schema.

    Attributes:
        details: The Failure records, in schema declaration order
        failures: The same failures rendered as "path: message" strings
    """

    def __init__(self, details: Sequence[Failure], message: str = "Validation failed"):
        self.details: List[Failure] = list(details)
        self.failures: List[str] = [str(f) for f in self.details]
        super().__init__(message)


__all__ = [
    "Failure",
    "SchemaError",
    "PredicateFailure",
    "ValidationFailedError",
]
