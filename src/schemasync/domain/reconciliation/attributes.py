"""Upsert of the attributes owned by one schema type.

Each attribute is its own unit of work: a failure leaves the attributes handled
before it in place and propagates the error. Attributes that exist in the store
but are missing from the desired list are left alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schemasync.domain.errors import InvalidInputError
from schemasync.domain.model import EntityTypeName, RelationshipType, is_subtype

from .contracts import AttributeReconciliation, WriteOutcome
from .diff import changed_properties
from .properties import (
    SCHEMA_TYPE_ENTITY,
    attribute_classifications,
    attribute_entity_type,
    attribute_properties,
)

if TYPE_CHECKING:
    from uuid import UUID

    from schemasync.domain.model import Attribute, EntityRef, Provenance, SchemaType
    from schemasync.domain.ports import EntityGraphStore

    from .identity import IdentityResolver

log = logging.getLogger(__name__)


@dataclass(slots=True)
class AttributeReconciler:
    store: EntityGraphStore
    identity: IdentityResolver

    def upsert_schema_attributes(
        self,
        user_id: str,
        schema_type: SchemaType,
        schema_type_id: UUID,
        *,
        provenance: Provenance,
    ) -> AttributeReconciliation:
        result = AttributeReconciliation()
        for attribute in schema_type.attributes:
            attribute_id, outcome = self.upsert_attribute(
                user_id,
                attribute,
                schema_type_id,
                provenance=provenance,
            )
            result.record(attribute_id, outcome)

        log.info(
            "Reconciled attributes of %s: created=%s, updated=%s, unchanged=%s",
            schema_type.qualified_name,
            len(result.created),
            len(result.updated),
            len(result.unchanged),
        )
        return result

    def upsert_attribute(
        self,
        user_id: str,
        attribute: Attribute,
        schema_type_id: UUID,
        *,
        provenance: Provenance,
    ) -> tuple[UUID, WriteOutcome]:
        existing = self.identity.find_schema_attribute(user_id, attribute.qualified_name)
        desired = attribute_properties(attribute)

        if existing is None:
            return self._create(attribute, schema_type_id, provenance=provenance), WriteOutcome.CREATED

        relinked = self._ensure_parent(existing, schema_type_id, provenance=provenance)
        changed = changed_properties(existing, desired)
        if not changed:
            if relinked:
                return existing.id, WriteOutcome.UPDATED
            log.debug("Attribute %s unchanged", attribute.qualified_name)
            return existing.id, WriteOutcome.UNCHANGED

        self.store.update(existing.id, desired, provenance=provenance)
        log.info(
            "Updated attribute %s (%s): %s",
            attribute.qualified_name,
            existing.id,
            ", ".join(sorted(changed)),
        )
        return existing.id, WriteOutcome.UPDATED

    def _create(
        self,
        attribute: Attribute,
        schema_type_id: UUID,
        *,
        provenance: Provenance,
    ) -> UUID:
        entity_type = attribute_entity_type(attribute)
        attribute_id = self.store.create(
            entity_type,
            attribute_properties(attribute),
            provenance=provenance,
            classifications=attribute_classifications(
                attribute, schema_type_name=SCHEMA_TYPE_ENTITY
            ),
        )
        self.store.create_relationship(
            RelationshipType.ATTRIBUTE_FOR_SCHEMA,
            schema_type_id,
            attribute_id,
            provenance=provenance,
        )
        log.info(
            "Created %s %s (%s) at position %s",
            entity_type,
            attribute.qualified_name,
            attribute_id,
            attribute.position,
        )
        return attribute_id

    def _ensure_parent(
        self,
        existing: EntityRef,
        schema_type_id: UUID,
        *,
        provenance: Provenance,
    ) -> bool:
        """Link an attribute left without a parent by an earlier, interrupted create."""

        parents = self.store.get_related_entities(
            existing.id,
            RelationshipType.ATTRIBUTE_FOR_SCHEMA,
            EntityTypeName.SCHEMA_ATTRIBUTE,
        )
        if parents:
            return False
        self.store.create_relationship(
            RelationshipType.ATTRIBUTE_FOR_SCHEMA,
            schema_type_id,
            existing.id,
            provenance=provenance,
        )
        log.info("Linked orphaned attribute %s to %s", existing.qualified_name, schema_type_id)
        return True

    def require_schema_type(self, schema_type_id: UUID, method_name: str) -> EntityRef:
        """Return the persisted schema type that attributes will be attached to."""

        schema_type = self.store.get(schema_type_id)
        if schema_type is None or not is_subtype(schema_type.type_name, EntityTypeName.SCHEMA_TYPE):
            raise InvalidInputError(
                f"{method_name}: {schema_type_id} is not a persisted schema type",
                parameter="schemaTypeGUID",
            )
        return schema_type
