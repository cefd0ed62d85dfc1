"""treeschema: schema-driven validation and type coercion for tree-shaped data.

treeschema checks dynamically-typed data (typically parsed JSON) against a
small declarative schema and provides:
- Validation that reports every field-level failure, in schema order
- Typeification that coerces values toward the declared types
- Custom per-field predicates, sync or async

Basic usage:
    >>> from treeschema import create_schema
    >>> schema = create_schema({
    ...     "name": {"type": str, "required": True},
    ...     "age": int,
    ... })
    >>> schema.typeify({"name": "Alice", "age": "30"})
    {'name': 'Alice', 'age': 30}
"""

__version__ = "0.1.0"
__author__ = "treeschema Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from treeschema.errors import Failure, PredicateFailure, SchemaError, ValidationFailedError
from treeschema.schema import Schema, create_schema
from treeschema.types import Marker
from treeschema.validation import ValidationResult

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Schema",
    "create_schema",
    "Marker",
    "Failure",
    "ValidationResult",
    "SchemaError",
    "PredicateFailure",
    "ValidationFailedError",
]
