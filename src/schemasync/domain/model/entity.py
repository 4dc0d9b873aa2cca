"""Read-side views of entities and relationships held by the graph store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID


type Properties = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class EntityRef:
    """A persisted entity as returned by the store.

    Equality and hashing use the identity fields only, so refs can be collected
    in sets regardless of their property payload.
    """

    id: UUID
    type_name: str
    qualified_name: str
    properties: Properties = field(default_factory=dict, compare=False, hash=False)
    classifications: Mapping[str, Properties] = field(
        default_factory=dict, compare=False, hash=False
    )
    version: int = field(default=1, compare=False, hash=False)

