"""Reusable in-memory fakes for the reconciliation ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from schemasync.domain.errors import AuthorizationError, ExternalSourceNotFoundError, StoreError
from schemasync.domain.model import (
    Attribute,
    DeleteSemantic,
    EntityRef,
    ExternalSource,
    SchemaType,
    subtype_names,
)
from schemasync.domain.ports import Action, Authorizer, EntityGraphStore, ExternalSourceRegistry
from schemasync.domain.reconciliation import SchemaReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Iterable

    from schemasync.domain.model import Properties, Provenance

SOURCE_NAME = "warehouse-crawler"
USER_ID = "steward"


@dataclass(slots=True)
class _StoredEntity:
    id: UUID
    type_name: str
    properties: dict[str, Any]
    classifications: dict[str, dict[str, Any]]
    version: int = 1
    deleted: bool = False

    def ref(self) -> EntityRef:
        return EntityRef(
            id=self.id,
            type_name=self.type_name,
            qualified_name=self.properties["qualifiedName"],
            properties=dict(self.properties),
            classifications={name: dict(values) for name, values in self.classifications.items()},
            version=self.version,
        )


@dataclass(slots=True)
class _StoredRelationship:
    id: UUID
    type_name: str
    source_id: UUID
    target_id: UUID
    deleted: bool = False


class InMemoryEntityGraphStore(EntityGraphStore):
    """Dict-backed store that records every call and counts writes."""

    def __init__(self) -> None:
        self.entities: dict[UUID, _StoredEntity] = {}
        self.relationships: dict[UUID, _StoredRelationship] = {}
        self.calls: list[tuple[str, Any]] = []
        self.fail_on_delete: set[UUID] = set()

    # reads

    def find_by_qualified_name(self, type_name: str, qualified_name: str) -> EntityRef | None:
        self.calls.append(("find", (type_name, qualified_name)))
        names = subtype_names(type_name)
        for entity in self.entities.values():
            if entity.deleted or entity.type_name not in names:
                continue
            if entity.properties.get("qualifiedName") == qualified_name:
                return entity.ref()
        return None

    def get(self, entity_id: UUID) -> EntityRef | None:
        entity = self.entities.get(entity_id)
        if entity is None or entity.deleted:
            return None
        return entity.ref()

    def get_related_entities(
        self,
        entity_id: UUID,
        relationship_type: str,
        from_type: str,
    ) -> set[EntityRef]:
        self.calls.append(("related", (entity_id, relationship_type, from_type)))
        anchor = self.entities.get(entity_id)
        if anchor is None or anchor.deleted or anchor.type_name not in subtype_names(from_type):
            return set()
        related: set[EntityRef] = set()
        for relationship in self.relationships.values():
            if relationship.deleted or relationship.type_name != relationship_type:
                continue
            if relationship.source_id == entity_id:
                other = self.entities[relationship.target_id]
            elif relationship.target_id == entity_id:
                other = self.entities[relationship.source_id]
            else:
                continue
            if not other.deleted:
                related.add(other.ref())
        return related

    # writes

    def create(
        self,
        type_name: str,
        properties: Properties,
        *,
        provenance: Provenance,
        classifications: dict[str, Properties] | None = None,
    ) -> UUID:
        entity_id = uuid4()
        self.calls.append(("create", (str(type_name), properties["qualifiedName"], provenance)))
        self.entities[entity_id] = _StoredEntity(
            id=entity_id,
            type_name=str(type_name),
            properties=dict(properties),
            classifications={
                name: dict(values) for name, values in (classifications or {}).items()
            },
        )
        return entity_id

    def update(self, entity_id: UUID, properties: Properties, *, provenance: Provenance) -> None:
        self.calls.append(("update", (entity_id, provenance)))
        entity = self.entities.get(entity_id)
        if entity is None or entity.deleted:
            raise StoreError(f"Cannot update entity {entity_id}: not found")
        entity.properties = dict(properties)
        entity.version += 1

    def delete(
        self,
        entity_id: UUID,
        *,
        semantic: DeleteSemantic,
        provenance: Provenance,
    ) -> None:
        self.calls.append(("delete", (entity_id, semantic, provenance)))
        if entity_id in self.fail_on_delete:
            raise StoreError(f"Cannot delete entity {entity_id}")
        entity = self.entities.get(entity_id)
        if entity is None:
            return
        if semantic == DeleteSemantic.HARD:
            del self.entities[entity_id]
            for relationship_id, relationship in list(self.relationships.items()):
                if entity_id in (relationship.source_id, relationship.target_id):
                    del self.relationships[relationship_id]
        else:
            entity.deleted = True
            for relationship in self.relationships.values():
                if entity_id in (relationship.source_id, relationship.target_id):
                    relationship.deleted = True

    def create_relationship(
        self,
        type_name: str,
        source_id: UUID,
        target_id: UUID,
        *,
        provenance: Provenance,
    ) -> UUID:
        self.calls.append(("relate", (str(type_name), source_id, target_id, provenance)))
        for relationship in self.relationships.values():
            if (
                not relationship.deleted
                and relationship.type_name == type_name
                and relationship.source_id == source_id
                and relationship.target_id == target_id
            ):
                return relationship.id
        relationship_id = uuid4()
        self.relationships[relationship_id] = _StoredRelationship(
            id=relationship_id,
            type_name=str(type_name),
            source_id=source_id,
            target_id=target_id,
        )
        return relationship_id

    # helpers for assertions

    def calls_named(self, name: str) -> list[Any]:
        return [args for call, args in self.calls if call == name]

    @property
    def write_count(self) -> int:
        return sum(1 for call, _ in self.calls if call in {"create", "update", "delete", "relate"})

    def reset_calls(self) -> None:
        self.calls.clear()

    def active_relationships(self, type_name: str) -> list[_StoredRelationship]:
        return [
            relationship
            for relationship in self.relationships.values()
            if relationship.type_name == type_name and not relationship.deleted
        ]

    def seed(self, type_name: str, qualified_name: str, **properties: Any) -> UUID:
        entity_id = uuid4()
        self.entities[entity_id] = _StoredEntity(
            id=entity_id,
            type_name=type_name,
            properties={"qualifiedName": qualified_name, **properties},
            classifications={},
        )
        return entity_id

    def seed_relationship(self, type_name: str, source_id: UUID, target_id: UUID) -> UUID:
        relationship_id = uuid4()
        self.relationships[relationship_id] = _StoredRelationship(
            id=relationship_id,
            type_name=type_name,
            source_id=source_id,
            target_id=target_id,
        )
        return relationship_id


class FakeExternalSourceRegistry(ExternalSourceRegistry):
    def __init__(self, names: Iterable[str] = (SOURCE_NAME,)) -> None:
        self.sources = {name: ExternalSource(name=name) for name in names}
        self.resolved: list[str] = []

    def resolve(self, name: str) -> ExternalSource:
        self.resolved.append(name)
        try:
            return self.sources[name]
        except KeyError:
            raise ExternalSourceNotFoundError(name) from None


class RecordingAuthorizer(Authorizer):
    def __init__(self, *, denied: Iterable[Action] = ()) -> None:
        self.denied = frozenset(denied)
        self.checks: list[tuple[str, Action]] = []

    def authorize(self, user_id: str, action: Action) -> None:
        self.checks.append((user_id, action))
        if action in self.denied:
            raise AuthorizationError(user_id, action)


@dataclass(slots=True)
class EngineHarness:
    store: InMemoryEntityGraphStore = field(default_factory=InMemoryEntityGraphStore)
    registry: FakeExternalSourceRegistry = field(default_factory=FakeExternalSourceRegistry)
    authorizer: RecordingAuthorizer = field(default_factory=RecordingAuthorizer)

    def engine(self, **kwargs: Any) -> SchemaReconciliationEngine:
        return SchemaReconciliationEngine.build(
            store=self.store,
            registry=self.registry,
            authorizer=self.authorizer,
            **kwargs,
        )


def make_attribute(qualified_name: str, position: int = 0, **overrides: Any) -> Attribute:
    display_name = overrides.pop("display_name", qualified_name.rsplit(".", 1)[-1])
    return Attribute(
        qualified_name=qualified_name,
        display_name=display_name,
        position=position,
        **overrides,
    )


def make_orders_schema(**overrides: Any) -> SchemaType:
    """``schema.orders`` with ``id`` at position 0 and ``total`` at position 1."""

    attributes = overrides.pop(
        "attributes",
        [
            make_attribute("schema.orders.id", 0, data_type="INTEGER"),
            make_attribute("schema.orders.total", 1, data_type="DECIMAL"),
        ],
    )
    return SchemaType(
        qualified_name=overrides.pop("qualified_name", "schema.orders"),
        display_name=overrides.pop("display_name", "Orders"),
        attributes=attributes,
        **overrides,
    )
