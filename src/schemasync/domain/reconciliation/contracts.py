"""Result types shared by the reconciliation components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from schemasync.domain.model import EntityRef


class WriteOutcome(StrEnum):
    """What an upsert did to one entity."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class AttributeReconciliation:
    """Summary of one ``upsert_schema_attributes`` call."""

    created: list[UUID] = field(default_factory=list["UUID"])
    updated: list[UUID] = field(default_factory=list["UUID"])
    unchanged: list[UUID] = field(default_factory=list["UUID"])

    def record(self, entity_id: UUID, outcome: WriteOutcome) -> None:
        match outcome:
            case WriteOutcome.CREATED:
                self.created.append(entity_id)
            case WriteOutcome.UPDATED:
                self.updated.append(entity_id)
            case WriteOutcome.UNCHANGED:
                self.unchanged.append(entity_id)

    @property
    def written(self) -> int:
        return len(self.created) + len(self.updated)


class EndpointResolution(StrEnum):
    """Which branch of lineage endpoint resolution fired."""

    DIRECT = "direct"
    ASSET = "asset"
    CONTAINER = "container"


@dataclass(frozen=True, slots=True, kw_only=True)
class LineageEndpoint:
    qualified_name: str
    entity: EntityRef
    resolution: EndpointResolution


@dataclass(frozen=True, slots=True, kw_only=True)
class LineageLink:
    source: LineageEndpoint
    target: LineageEndpoint
    relationship_id: UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class RemovalResult:
    schema_type_id: UUID
    attribute_ids: frozenset[UUID] = frozenset()
