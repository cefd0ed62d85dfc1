"""Core type definitions for treeschema.

This module defines the fundamental types shared by both traversals:
- Marker: Primitive type markers recognised in schema definitions
- Primitive / Nested / ArrayOf: Tagged-union nodes describing a field's type
- FieldSpec: A schema entry normalised by the resolver
- Predicate: Signature of custom per-field validators

A schema author never builds these directly. Schema definitions are plain
dicts whose entries are either bare markers (``str``, ``Marker.NUMBER``) or
descriptor dicts; the resolver folds both into a FieldSpec.
"""

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Union

from typing_extensions import TypeAlias


class Marker(str, Enum):
    """Primitive type markers.

    The value of each member is the display name used in failure messages
    (e.g. "must be of type Date").
    """
    TEXT = "String"
    BOOLEAN = "Boolean"
    NUMBER = "Number"
    DATE = "Date"
    ARRAY = "Array"
    OBJECT = "Object"


# Python types accepted as bare-type shorthand for each marker
PYTHON_TYPE_MARKERS: Dict[type, Marker] = {
    str: Marker.TEXT,
    bool: Marker.BOOLEAN,
    int: Marker.NUMBER,
    float: Marker.NUMBER,
    datetime.datetime: Marker.DATE,
    datetime.date: Marker.DATE,
    list: Marker.ARRAY,
    tuple: Marker.ARRAY,
    dict: Marker.OBJECT,
}

ALL_MARKERS = frozenset(Marker)


@dataclass(frozen=True)
class Primitive:
    """A field whose type is one of the primitive markers."""
    marker: Marker


@dataclass(frozen=True)
class Nested:
    """A field holding an embedded object described by its own schema map.

    Attributes:
        fields: Mapping of field name to (unresolved) schema entry
    """
    fields: Mapping[str, Any]


@dataclass(frozen=True)
class ArrayOf:
    """A field holding a sequence whose elements share one schema entry.

    The element entry is kept raw; it is resolved per element during traversal.
    """
    element: Any


TypeNode: TypeAlias = Union[Primitive, Nested, ArrayOf]

PredicateResult: TypeAlias = Union[None, Awaitable[None]]
Predicate: TypeAlias = Callable[[Any], PredicateResult]
"""Type alias for custom field validators.

A predicate receives the field's runtime value. It may be a plain function or
a coroutine function. Raising ValueError (or PredicateFailure) rejects the
value; the exception message becomes the failure message.
"""


@dataclass(frozen=True)
class FieldSpec:
    """A schema entry after resolution.

    Attributes:
        type: The classified type node, or None when the entry has no usable type
        required: Whether the field must be present in the object
        enum: Allowed values (only consulted for text fields)
        validators: Custom predicates run against the field's value

    Examples:
        >>> spec = FieldSpec(type=Primitive(Marker.TEXT), required=True)
        >>> spec.required
        True
        >>> spec.enum
        ()
    """
    type: Optional[TypeNode]
    required: bool = False
    enum: Tuple[Any, ...] = ()
    validators: Tuple[Predicate, ...] = ()


__all__ = [
    "Marker",
    "PYTHON_TYPE_MARKERS",
    "ALL_MARKERS",
    "Primitive",
    "Nested",
    "ArrayOf",
    "TypeNode",
    "Predicate",
    "FieldSpec",
]
