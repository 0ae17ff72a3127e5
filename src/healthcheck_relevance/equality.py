"""Structural comparison helpers for snapshot sub-trees."""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import Any, Optional

_TEXT = (str, bytes, bytearray)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, _TEXT)


def deep_equal(left: Any, right: Any) -> bool:
    """Return ``True`` if ``left`` and ``right`` are structurally equal.

    Mappings are compared by key set and then value by value, so key order
    never matters. Sequences are compared element by element in order; a
    list and a tuple holding the same elements are equal. Sets compare as
    sets. Booleans only equal booleans (``True`` is not ``1`` here).
    """

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if set(left) != set(right):
            return False
        return all(deep_equal(left[key], right[key]) for key in left)

    if isinstance(left, Set) or isinstance(right, Set):
        if not (isinstance(left, Set) and isinstance(right, Set)):
            return False
        return set(left) == set(right)

    if _is_sequence(left) or _is_sequence(right):
        if not (_is_sequence(left) and _is_sequence(right)):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def labels_equal(
    left: Optional[Mapping[str, str]], right: Optional[Mapping[str, str]]
) -> bool:
    """Exact key/value comparison of two label sets; ``None`` means no labels."""

    return dict(left or {}) == dict(right or {})


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a decoded manifest fragment."""

    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, Set):
        return frozenset(freeze(item) for item in value)
    if _is_sequence(value):
        return tuple(freeze(item) for item in value)
    return value
