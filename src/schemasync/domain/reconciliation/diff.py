"""Structural comparison of persisted and desired entity properties.

Only the tracked property set takes part. Both sides are normalized first so a
JSON round trip through the store (tuples become lists, enums become strings,
``None`` values are never stored) does not read as a change.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from schemasync.domain.model import EntityRef, Properties


def _normalize_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list | tuple):
        return [_normalize_value(item) for item in value]
    if isinstance(value, Mapping):
        return normalize_properties(value)
    return value


def normalize_properties(properties: Properties) -> dict[str, Any]:
    return {
        key: _normalize_value(value) for key, value in properties.items() if value is not None
    }


def changed_properties(existing: EntityRef, desired: Properties) -> frozenset[str]:
    """Return the property names whose values differ (including added/removed ones)."""

    before = normalize_properties(existing.properties)
    after = normalize_properties(desired)
    return frozenset(key for key in before.keys() | after.keys() if before.get(key) != after.get(key))


def has_difference(existing: EntityRef, desired: Properties) -> bool:
    return bool(changed_properties(existing, desired))
