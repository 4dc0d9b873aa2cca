"""Cascading removal of a schema type.

The store's entity delete does not cascade to attributes, so they are enumerated
and deleted one by one before the schema type itself. There is no atomicity: a
failure partway leaves the attributes already deleted as they are. Re-running the
removal is safe because deleting an unknown or deleted id is a no-op. An id that
belongs to anything other than a schema type is rejected before any delete.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from schemasync.domain.errors import InvalidInputError
from schemasync.domain.model import (
    DeleteSemantic,
    EntityTypeName,
    Provenance,
    RelationshipType,
    is_subtype,
)
from schemasync.domain.ports import Action

from .contracts import RemovalResult
from .validation import validate_delete_semantic, validate_guid, validate_name, validate_user_id

if TYPE_CHECKING:
    from uuid import UUID

    from schemasync.domain.ports import Authorizer, EntityGraphStore, ExternalSourceRegistry

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CascadeRemover:
    store: EntityGraphStore
    registry: ExternalSourceRegistry
    authorizer: Authorizer
    supported_semantics: frozenset[DeleteSemantic] = field(
        default=frozenset({DeleteSemantic.SOFT, DeleteSemantic.HARD})
    )

    def attribute_ids_for(self, schema_type_id: UUID) -> frozenset[UUID]:
        related = self.store.get_related_entities(
            schema_type_id,
            RelationshipType.ATTRIBUTE_FOR_SCHEMA,
            EntityTypeName.SCHEMA_TYPE,
        )
        return frozenset(entity.id for entity in related)

    def remove_schema_type(
        self,
        user_id: str,
        schema_type_id: UUID | str,
        external_source_name: str,
        delete_semantic: DeleteSemantic | str,
    ) -> RemovalResult:
        method_name = "remove_schema_type"
        semantic = validate_delete_semantic(delete_semantic, self.supported_semantics, method_name)
        validate_user_id(user_id, method_name)
        resolved_id = validate_guid(schema_type_id, "schemaTypeGUID", method_name)
        validate_name(external_source_name, "externalSourceName", method_name)
        self.authorizer.authorize(user_id, Action.DELETE)

        source = self.registry.resolve(external_source_name)
        provenance = Provenance.for_source(source, user_id=user_id)

        existing = self.store.get(resolved_id)
        if existing is None:
            log.debug("Schema type %s not found; nothing to remove", resolved_id)
            return RemovalResult(schema_type_id=resolved_id)
        if not is_subtype(existing.type_name, EntityTypeName.SCHEMA_TYPE):
            raise InvalidInputError(
                f"{method_name}: {resolved_id} is a {existing.type_name}, not a schema type",
                parameter="schemaTypeGUID",
            )

        attribute_ids = self.attribute_ids_for(resolved_id)
        for attribute_id in attribute_ids:
            self.store.delete(attribute_id, semantic=semantic, provenance=provenance)
        self.store.delete(resolved_id, semantic=semantic, provenance=provenance)

        log.info(
            "Removed schema type %s and %s attribute(s) (%s delete)",
            resolved_id,
            len(attribute_ids),
            semantic,
        )
        return RemovalResult(schema_type_id=resolved_id, attribute_ids=attribute_ids)
