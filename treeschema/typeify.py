"""Best-effort type coercion for treeschema.

Typeifier walks a schema tree in lock-step with an object tree and builds a
new object whose values are coerced toward the declared types. It is meant
for parsed JSON, form posts and query strings, where values arrive as strings
but the schema expects numbers, booleans or dates.

Coercion is total: an attempt that fails keeps the original value and never
raises. The input object is never modified. Containers in the result are
always freshly built or deep-copied, and only schema-declared keys are
emitted at each level.
"""

import copy
import datetime
import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Optional

from dateutil import parser as date_parser

from treeschema.resolver import SchemaResolver
from treeschema.types import ArrayOf, Marker, Nested, Primitive, TypeNode
from treeschema.validation import is_number

logger = logging.getLogger(__name__)


FALSY_STRINGS = frozenset({"false", "0", "no"})
TRUTHY_STRINGS = frozenset({"true", "1", "yes"})

# Exceptions treated as a failed coercion attempt (dateutil's ParserError is a ValueError)
COERCION_ERRORS = (ValueError, TypeError, OverflowError, OSError)

# Immutable values passed through without copying
SCALAR_TYPES = (str, bytes, int, float, bool, datetime.date, datetime.time, datetime.timedelta)


def _keep(value: Any) -> Any:
    """Return an unchanged value, deep-copied when it may be a container.

    Values that cannot be deep-copied (locks, sockets, generators) are kept
    as they are.
    """
    if value is None or isinstance(value, SCALAR_TYPES):
        return value
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error) as exc:
        logger.debug("Kept %s without copying: %s", type(value).__name__, exc)
        return value


def to_text(value: Any) -> str:
    """String conversion used by text coercion.

    Booleans render as "true"/"false" so they coerce back to booleans, and
    dates render in ISO 8601.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = to_text(value).lower()
    if lowered in FALSY_STRINGS:
        return False
    if lowered in TRUTHY_STRINGS:
        return True
    raise ValueError(f"not a recognised boolean: {value!r}")


def to_number(value: Any) -> Any:
    """Parse a decimal number: float if the text holds a '.', int otherwise.

    Parsing uses Python's int() and float() on the whole string, so values
    with trailing text ("12px") are kept as they are, and so are exponent
    forms without a '.' ("1e3"), which go through int().
    """
    if is_number(value):
        return value
    text = to_text(value)
    number = float(text) if "." in text else int(text)
    if isinstance(number, float) and math.isnan(number):
        raise ValueError(f"not a number: {value!r}")
    return number


def to_date(value: Any) -> datetime.date:
    """Build a datetime from a date string or epoch milliseconds.

    Naive results are taken as UTC. Timestamps at or before the epoch are
    rejected.
    """
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        parsed = date_parser.parse(value)
    elif is_number(value):
        parsed = datetime.datetime.fromtimestamp(value / 1000, tz=datetime.timezone.utc)
    else:
        raise TypeError(f"cannot build a date from {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    if parsed.timestamp() <= 0:
        raise ValueError(f"non-positive timestamp: {value!r}")
    return parsed


COERCERS: Dict[Marker, Callable[[Any], Any]] = {
    Marker.TEXT: lambda value: value if isinstance(value, str) else to_text(value),
    Marker.BOOLEAN: to_boolean,
    Marker.NUMBER: to_number,
    Marker.DATE: to_date,
}


class Typeifier:
    """Recursive coercion engine.

    Attributes:
        limit_types: Markers eligible for coercion (default: all)

    Examples:
        >>> typeifier = Typeifier()
        >>> typeifier.typeify({"age": "42", "extra": 1}, {"age": int})
        {'age': 42}
        >>> Typeifier(limit_types=[bool]).typeify({"age": "42"}, {"age": int})
        {'age': '42'}
    """

    def __init__(self, limit_types: Optional[Iterable[Any]] = None, resolver: Optional[SchemaResolver] = None) -> None:
        self._resolver = resolver or SchemaResolver()
        self.limit_types = self._resolver.resolve_limit_types(limit_types)

    def typeify(self, obj: Mapping, fields: Mapping, path: str = "") -> Dict[Any, Any]:
        """Build a coerced copy of ``obj`` holding only the keys in ``fields``.

        Keys missing from ``obj`` and keys whose schema entry has no usable
        type are skipped; absent fields are never synthesized.
        """
        result: Dict[Any, Any] = {}
        for key, entry in fields.items():
            if key not in obj:
                continue
            spec = self._resolver.resolve(entry)
            if spec.type is None:
                continue
            result[key] = self._coerce(spec.type, obj[key], f"{path}/{key}")
        return result

    def _coerce(self, node: TypeNode, value: Any, path: str) -> Any:
        if value is None:
            return None

        if isinstance(node, Primitive):
            return self._coerce_primitive(node.marker, value, path)

        if isinstance(node, ArrayOf):
            if not isinstance(value, (list, tuple)):
                return _keep(value)
            element = self._resolver.resolve({"type": node.element}).type
            return [self._coerce(element, item, f"{path}/{index}") for index, item in enumerate(value)]

        if isinstance(node, Nested):
            if not isinstance(value, Mapping):
                return _keep(value)
            return self.typeify(value, node.fields, path)

        raise TypeError(f"Unsupported schema type node at {path}: {node!r}")

    def _coerce_primitive(self, marker: Marker, value: Any, path: str) -> Any:
        coercer = COERCERS.get(marker)
        if coercer is None or marker not in self.limit_types:
            return _keep(value)
        try:
            return coercer(value)
        except COERCION_ERRORS as exc:
            logger.debug("Left %s unchanged, not coercible to %s: %s", path, marker.value, exc)
            return _keep(value)


__all__ = [
    "Typeifier",
    "to_text",
    "to_boolean",
    "to_number",
    "to_date",
]
