"""Ports for the entity graph store and the external source registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from schemasync.domain.model import (
        DeleteSemantic,
        EntityRef,
        ExternalSource,
        Properties,
        Provenance,
    )


@runtime_checkable
class EntityGraphStore(Protocol):
    """Persisted repository of typed entities and typed relationships.

    Every write is an independent operation; there is no transaction spanning
    several calls.
    """

    def find_by_qualified_name(self, type_name: str, qualified_name: str) -> EntityRef | None:
        """Return the active entity of ``type_name`` (or a subtype) with this natural key."""
        ...

    def get(self, entity_id: UUID) -> EntityRef | None: ...

    def create(
        self,
        type_name: str,
        properties: Properties,
        *,
        provenance: Provenance,
        classifications: dict[str, Properties] | None = None,
    ) -> UUID: ...

    def update(self, entity_id: UUID, properties: Properties, *, provenance: Provenance) -> None: ...

    def delete(
        self,
        entity_id: UUID,
        *,
        semantic: DeleteSemantic,
        provenance: Provenance,
    ) -> None:
        """Delete an entity and its relationships. Unknown or deleted ids are a no-op."""
        ...

    def get_related_entities(
        self,
        entity_id: UUID,
        relationship_type: str,
        from_type: str,
    ) -> set[EntityRef]:
        """Return the entities on the other end of ``relationship_type`` edges.

        ``from_type`` names the type of ``entity_id``'s end of the relationship.
        """
        ...

    def create_relationship(
        self,
        type_name: str,
        source_id: UUID,
        target_id: UUID,
        *,
        provenance: Provenance,
    ) -> UUID:
        """Create a directed relationship, reusing an identical active one."""
        ...


@runtime_checkable
class ExternalSourceRegistry(Protocol):
    """Resolves the upstream system used as the provenance tag on writes."""

    def resolve(self, name: str) -> ExternalSource: ...
