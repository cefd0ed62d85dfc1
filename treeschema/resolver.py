"""Schema entry resolution shared by validation and typeification.

A schema entry can be written in shorthand (a bare marker such as ``str`` or
``Marker.DATE``, or a one-element list of one) or as a full descriptor dict.
SchemaResolver folds both forms into a FieldSpec whose ``type`` is one of the
tagged-union nodes from treeschema.types.

Resolution is applied one level at a time. Nested schema maps and array
element entries are kept raw and resolved only when a traversal reaches them.
"""

from collections.abc import Mapping
from typing import Any, FrozenSet, Iterable, Optional, Tuple

from treeschema.types import (
    ALL_MARKERS,
    PYTHON_TYPE_MARKERS,
    ArrayOf,
    FieldSpec,
    Marker,
    Nested,
    Primitive,
    TypeNode,
)


class SchemaResolver:
    """Normalizes schema entries into FieldSpec instances.

    Examples:
        >>> resolver = SchemaResolver()
        >>> resolver.resolve(int).type
        Primitive(marker=<Marker.NUMBER: 'Number'>)
        >>> resolver.resolve({"type": str, "required": True}).required
        True
    """

    @staticmethod
    def marker_for(value: Any) -> Optional[Marker]:
        """Return the Marker a bare-type value stands for, or None."""
        if isinstance(value, Marker):
            return value
        if isinstance(value, type):
            return PYTHON_TYPE_MARKERS.get(value)
        return None

    def is_bare(self, entry: Any) -> bool:
        """Whether an entry uses the shorthand form.

        True for a bare marker and for a one-element list or tuple whose sole
        member is a bare marker.
        """
        if self.marker_for(entry) is not None:
            return True
        return (
            isinstance(entry, (list, tuple))
            and len(entry) == 1
            and self.marker_for(entry[0]) is not None
        )

    def resolve(self, entry: Any) -> FieldSpec:
        """Resolve a schema entry into a FieldSpec.

        Never raises. An entry without a recognisable type resolves to a
        FieldSpec whose type is None; callers decide what that means.
        """
        if self.is_bare(entry) or isinstance(entry, (list, tuple)):
            return FieldSpec(type=self.classify(entry))

        if not isinstance(entry, Mapping):
            return FieldSpec(type=None)

        validators = entry.get("validators", entry.get("validate"))
        return FieldSpec(
            type=self.classify(entry.get("type")),
            required=bool(entry.get("required", False)),
            enum=self._as_tuple(entry.get("enum")),
            validators=self._as_tuple(validators),
        )

    def classify(self, type_value: Any) -> Optional[TypeNode]:
        """Classify the ``type`` of a descriptor into a tagged-union node."""
        marker = self.marker_for(type_value)
        if marker is not None:
            return Primitive(marker)
        if isinstance(type_value, (list, tuple)):
            if len(type_value) != 1 or self.classify(type_value[0]) is None:
                return None
            return ArrayOf(type_value[0])
        if isinstance(type_value, Mapping) and type_value:
            return Nested(type_value)
        return None

    def resolve_limit_types(self, limit_types: Optional[Iterable[Any]]) -> FrozenSet[Marker]:
        """Normalize a ``limit_types`` argument into a set of markers.

        None means every marker. Entries that are not bare markers are ignored.
        """
        if limit_types is None:
            return ALL_MARKERS
        markers = (self.marker_for(t) for t in limit_types)
        return frozenset(m for m in markers if m is not None)

    @staticmethod
    def _as_tuple(value: Any) -> Tuple[Any, ...]:
        if value is None:
            return ()
        if callable(value) and not isinstance(value, (list, tuple)):
            return (value,)
        if isinstance(value, (list, tuple)):
            return tuple(value)
        return ()


__all__ = [
    "SchemaResolver",
]
