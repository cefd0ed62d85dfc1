"""Test suite for treeschema.

This package contains tests for:
- Schema entry resolution (shorthand and descriptors)
- Validation engine (type checks, enums, nesting, ordering, predicates)
- Typeifier (coercions, limit_types, immutability)
- Schema facade and end-to-end intake flows
"""
