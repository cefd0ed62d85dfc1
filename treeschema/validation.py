"""Validation engine for treeschema.

This module provides a Validator that walks a schema tree in lock-step with an
object tree and collects every field-level failure rather than stopping at the
first one.

Field checks at one level run concurrently (asyncio tasks), as do the
elements of an array and the custom predicates of a field. Results are joined by
position, so the failure list always follows schema declaration order at every
level and ascending index order within arrays, whatever order the checks
complete in.
"""

import asyncio
import datetime
import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Iterable, List, Optional, Sequence

from treeschema.errors import (
    INVALID_SCHEMA,
    MISSING_VALUE,
    MUST_BE_ARRAY,
    MUST_BE_BOOLEAN,
    MUST_BE_NUMBER,
    MUST_BE_OF_TYPE,
    MUST_BE_ONE_OF,
    MUST_BE_STRING,
    Failure,
)
from treeschema.resolver import SchemaResolver
from treeschema.types import ArrayOf, FieldSpec, Marker, Nested, Predicate, Primitive

logger = logging.getLogger(__name__)


# Runtime container checks for the markers validated by instance type
CONTAINER_TYPES: Dict[Marker, Any] = {
    Marker.DATE: datetime.date,
    Marker.ARRAY: (list, tuple),
    Marker.OBJECT: Mapping,
}


def is_number(value: Any) -> bool:
    """Whether a value is a numeric primitive (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _flatten(outcomes: Iterable[List[Failure]]) -> List[Failure]:
    return [failure for outcome in outcomes for failure in outcome]


async def _gather_all(coros: Iterable[Awaitable[Any]]) -> List[Any]:
    """Run coroutines concurrently and return their results by position.

    If any of them raises, the others are cancelled before the error
    propagates.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating an object against a schema.

    Attributes:
        failures: Field-level failures in schema declaration order (empty if valid)

    Examples:
        >>> result = ValidationResult(failures=[])
        >>> result.is_valid
        True
        >>> ValidationResult([Failure("/age", "must be a number")]).messages
        ['/age: must be a number']
    """
    failures: List[Failure]

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def messages(self) -> List[str]:
        """Failures rendered as "path: message" strings."""
        return [str(f) for f in self.failures]

    @property
    def missing_fields(self) -> List[str]:
        """Paths of required fields that were absent."""
        return [f.path for f in self.failures if f.is_missing]

    @property
    def invalid_fields(self) -> List[str]:
        """Paths of fields that were present but failed a check."""
        return [f.path for f in self.failures if not f.is_missing]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "failures": [f.to_dict() for f in self.failures],
            "missingFields": self.missing_fields,
            "invalidFields": self.invalid_fields,
        }


class Validator:
    """Recursive validation engine.

    Attributes:
        ignore_missing: Suppress "missing value" failures for required fields

    Examples:
        >>> import asyncio
        >>> validator = Validator()
        >>> result = asyncio.run(validator.validate({"age": "x"}, {"age": int}))
        >>> result.messages
        ['/age: must be a number']
    """

    def __init__(self, ignore_missing: bool = False, resolver: Optional[SchemaResolver] = None) -> None:
        self.ignore_missing = ignore_missing
        self._resolver = resolver or SchemaResolver()

    async def validate(self, obj: Mapping, fields: Mapping, path: str = "") -> ValidationResult:
        """Validate an object against a schema map.

        Args:
            obj: The object to validate
            fields: Schema map of field name to schema entry
            path: Path of ``obj`` within the enclosing document

        Returns:
            ValidationResult with every failure found

        Raises:
            Exception: Whatever a custom predicate raises other than ValueError
        """
        failures = await self._validate_object(obj, fields, path)
        logger.debug(
            "Validated %d field(s) at %r: %d failure(s)", len(fields), path or "/", len(failures)
        )
        return ValidationResult(failures=failures)

    async def _validate_object(self, obj: Mapping, fields: Mapping, path: str) -> List[Failure]:
        outcomes = await _gather_all(
            (self._check_field(obj, key, entry, f"{path}/{key}") for key, entry in fields.items())
        )
        return _flatten(outcomes)

    async def _check_field(self, obj: Mapping, key: Any, entry: Any, path: str) -> List[Failure]:
        spec = self._resolver.resolve(entry)

        if spec.type is None:
            return [Failure(path, INVALID_SCHEMA)]

        if key not in obj:
            if spec.required and not self.ignore_missing:
                return [Failure(path, MISSING_VALUE)]
            return []

        value = obj[key]
        failures = await self._check_value(spec, value, path)
        failures.extend(await self._run_predicates(spec.validators, value, path))
        return failures

    async def _check_value(self, spec: FieldSpec, value: Any, path: str) -> List[Failure]:
        node = spec.type

        if isinstance(node, Primitive):
            failure = self._check_primitive(node.marker, spec.enum, value)
            return [Failure(path, failure)] if failure else []

        if isinstance(node, ArrayOf):
            if not isinstance(value, (list, tuple)):
                return [Failure(path, MUST_BE_ARRAY)]
            element_spec = self._resolver.resolve({"type": node.element})
            outcomes = await _gather_all(
                (self._check_value(element_spec, item, f"{path}/{index}") for index, item in enumerate(value))
            )
            return _flatten(outcomes)

        if isinstance(node, Nested):
            if not isinstance(value, Mapping):
                return [Failure(path, MUST_BE_OF_TYPE + Marker.OBJECT.value)]
            return await self._validate_object(value, node.fields, path)

        raise TypeError(f"Unsupported schema type node at {path}: {node!r}")

    @staticmethod
    def _check_primitive(marker: Marker, enum: Sequence[Any], value: Any) -> Optional[str]:
        """Return the failure message for a primitive mismatch, or None."""
        if marker is Marker.TEXT:
            if not isinstance(value, str):
                return MUST_BE_STRING
            if enum and value not in enum:
                return MUST_BE_ONE_OF + ", ".join(str(v) for v in enum)
            return None

        if marker is Marker.BOOLEAN:
            return None if isinstance(value, bool) else MUST_BE_BOOLEAN

        if marker is Marker.NUMBER:
            return None if is_number(value) else MUST_BE_NUMBER

        if isinstance(value, CONTAINER_TYPES[marker]):
            return None
        return MUST_BE_OF_TYPE + marker.value

    async def _run_predicates(self, predicates: Sequence[Predicate], value: Any, path: str) -> List[Failure]:
        outcomes = await _gather_all(self._run_predicate(p, value, path) for p in predicates)
        return [f for f in outcomes if f is not None]

    @staticmethod
    async def _run_predicate(predicate: Predicate, value: Any, path: str) -> Optional[Failure]:
        try:
            result = predicate(value)
            if inspect.isawaitable(result):
                await result
        except ValueError as exc:
            return Failure(path, str(exc))
        return None


__all__ = [
    "Validator",
    "ValidationResult",
    "is_number",
]
