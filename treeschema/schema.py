"""Schema facade for treeschema.

This module provides the Schema class that ties the resolver, the validation
engine and the typeifier together behind the public API.

Usage:
    >>> from treeschema import create_schema
    >>> schema = create_schema({
    ...     "name": {"type": str, "required": True},
    ...     "age": int,
    ... })
    >>> schema.typeify({"name": "Alice", "age": "30"})
    {'name': 'Alice', 'age': 30}
    >>> schema.validate_sync({"name": "Alice", "age": 30})
"""

import asyncio
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterable, Optional

from treeschema.errors import SchemaError, ValidationFailedError
from treeschema.resolver import SchemaResolver
from treeschema.typeify import Typeifier
from treeschema.validation import ValidationResult, Validator


class Schema:
    """A compiled, read-only schema.

    A Schema holds no per-call state and can be shared across concurrent
    validate() and typeify() calls.

    Attributes:
        definition: Read-only view of the schema map (field name to schema entry)

    Examples:
        >>> schema = Schema({"tags": {"type": [str]}})
        >>> schema.typeify({"tags": [1, "ok"]})
        {'tags': ['1', 'ok']}
    """

    def __init__(self, definition: Mapping):
        """Initialize the Schema.

        Args:
            definition: Mapping of field name to schema entry

        Raises:
            SchemaError: If the definition is empty or not a mapping
        """
        if not definition:
            raise SchemaError("Schema is empty")
        if not isinstance(definition, Mapping):
            raise SchemaError(f"Schema must be a mapping, got {type(definition).__name__}")
        self.definition = MappingProxyType(dict(definition))
        self._resolver = SchemaResolver()

    async def check(self, obj: Mapping, ignore_missing: bool = False) -> ValidationResult:
        """Validate an object and return the result without raising on failures.

        Args:
            obj: Object to validate
            ignore_missing: Whether to ignore missing required fields

        Returns:
            ValidationResult listing every failure in schema order

        Raises:
            SchemaError: If the object is empty or not a mapping
        """
        if not obj:
            raise SchemaError("Object is empty")
        if not isinstance(obj, Mapping):
            raise SchemaError(f"Object must be a mapping, got {type(obj).__name__}")

        validator = Validator(ignore_missing=ignore_missing, resolver=self._resolver)
        return await validator.validate(obj, self.definition)

    async def validate(self, obj: Mapping, ignore_missing: bool = False) -> None:
        """Validate an object against this schema.

        Args:
            obj: Object to validate
            ignore_missing: Whether to ignore missing required fields

        Raises:
            SchemaError: If the object is empty or not a mapping
            ValidationFailedError: If any field failed; ``failures`` holds the
                per-field "path: message" strings
        """
        result = await self.check(obj, ignore_missing=ignore_missing)
        if not result.is_valid:
            raise ValidationFailedError(result.failures)

    def validate_sync(self, obj: Mapping, ignore_missing: bool = False) -> None:
        """Blocking form of validate() for callers without an event loop."""
        return asyncio.run(self.validate(obj, ignore_missing=ignore_missing))

    def typeify(self, obj: Any, limit_types: Optional[Iterable[Any]] = None) -> Any:
        """Coerce an object's values toward the types this schema declares.

        This is useful for parsed JSON or form data where every value is a
        string but the schema expects booleans, numbers or dates.

        Only schema fields are carried into the result: object properties not
        present in the schema are dropped, and schema properties not present in
        the object are ignored. The input is left unmodified.

        If ``limit_types`` is set only those types are coerced. For example,
        to process dates only, pass ``[datetime]`` or ``[Marker.DATE]``.

        Args:
            obj: Object to typeify
            limit_types: Limit coercion to the given types

        Returns:
            A new dict with coerced values, or ``obj`` itself if it is falsy
            or not a mapping
        """
        if not obj or not isinstance(obj, Mapping):
            return obj

        typeifier = Typeifier(limit_types=limit_types, resolver=self._resolver)
        return typeifier.typeify(obj, self.definition)


def create_schema(definition: Mapping) -> Schema:
    """Build a Schema from a definition mapping.

    Raises:
        SchemaError: If the definition is empty or not a mapping
    """
    return Schema(definition)


__all__ = [
    "Schema",
    "create_schema",
]
