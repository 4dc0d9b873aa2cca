"""Upsert of a schema type and its attribute list."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schemasync.domain.model import Provenance
from schemasync.domain.ports import Action

from .diff import changed_properties
from .properties import SCHEMA_TYPE_ENTITY, attribute_entity_type, schema_type_properties
from .validation import validate_name, validate_schema_type, validate_user_id

if TYPE_CHECKING:
    from uuid import UUID

    from schemasync.domain.model import SchemaType
    from schemasync.domain.ports import Authorizer, EntityGraphStore, ExternalSourceRegistry

    from .attributes import AttributeReconciler
    from .identity import IdentityResolver

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SchemaTypeReconciler:
    store: EntityGraphStore
    registry: ExternalSourceRegistry
    authorizer: Authorizer
    identity: IdentityResolver
    attributes: AttributeReconciler

    def upsert_schema_type(
        self,
        user_id: str,
        schema_type: SchemaType,
        external_source_name: str,
    ) -> UUID:
        """Create or update ``schema_type`` and reconcile all of its attributes.

        The type entity is written only when its tracked properties changed; the
        attributes are reconciled on every call regardless. Returns the schema
        type id, which stays stable across calls for the same qualified name.
        """

        method_name = "upsert_schema_type"
        validate_user_id(user_id, method_name)
        validate_schema_type(schema_type, method_name)
        validate_name(external_source_name, "externalSourceName", method_name)
        for attribute in schema_type.attributes:
            attribute_entity_type(attribute)
        self.authorizer.authorize(user_id, Action.WRITE)

        source = self.registry.resolve(external_source_name)
        provenance = Provenance.for_source(source, user_id=user_id)

        existing = self.identity.find_schema_type(user_id, schema_type.qualified_name)
        desired = schema_type_properties(schema_type)

        if existing is None:
            schema_type_id = self.store.create(SCHEMA_TYPE_ENTITY, desired, provenance=provenance)
            log.info("Created schema type %s (%s)", schema_type.qualified_name, schema_type_id)
        else:
            schema_type_id = existing.id
            changed = changed_properties(existing, desired)
            if changed:
                self.store.update(schema_type_id, desired, provenance=provenance)
                log.info(
                    "Updated schema type %s (%s): %s",
                    schema_type.qualified_name,
                    schema_type_id,
                    ", ".join(sorted(changed)),
                )
            else:
                log.debug("Schema type %s unchanged", schema_type.qualified_name)

        self.attributes.upsert_schema_attributes(
            user_id,
            schema_type,
            schema_type_id,
            provenance=provenance,
        )
        return schema_type_id
