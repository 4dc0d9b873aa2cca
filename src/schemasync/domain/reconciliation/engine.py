"""Façade over the reconciliation components.

The engine composes the components around one store, registry and authorizer
but holds no state between calls: every operation re-reads what it needs from
the store. Callers that need single-writer semantics per qualified name must
serialize outside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from schemasync.domain.model import DeleteSemantic, Provenance
from schemasync.domain.ports import Action

from .attributes import AttributeReconciler
from .identity import IdentityResolver
from .lineage import RelationshipLinker
from .removal import CascadeRemover
from .schema_types import SchemaTypeReconciler
from .validation import validate_name, validate_schema_type, validate_user_id

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from schemasync.domain.model import EntityRef, SchemaType
    from schemasync.domain.ports import Authorizer, EntityGraphStore, ExternalSourceRegistry

    from .contracts import AttributeReconciliation, LineageLink, RemovalResult


@dataclass(slots=True)
class SchemaReconciliationEngine:
    """Upsert, link and remove tabular schemas against an entity graph store."""

    identity: IdentityResolver
    schema_types: SchemaTypeReconciler
    attributes: AttributeReconciler
    linker: RelationshipLinker
    remover: CascadeRemover

    @classmethod
    def build(
        cls,
        *,
        store: EntityGraphStore,
        registry: ExternalSourceRegistry,
        authorizer: Authorizer,
        supported_delete_semantics: Iterable[DeleteSemantic] = (
            DeleteSemantic.SOFT,
            DeleteSemantic.HARD,
        ),
    ) -> SchemaReconciliationEngine:
        identity = IdentityResolver(store=store, authorizer=authorizer)
        attributes = AttributeReconciler(store=store, identity=identity)
        return cls(
            identity=identity,
            schema_types=SchemaTypeReconciler(
                store=store,
                registry=registry,
                authorizer=authorizer,
                identity=identity,
                attributes=attributes,
            ),
            attributes=attributes,
            linker=RelationshipLinker(
                store=store,
                registry=registry,
                authorizer=authorizer,
                identity=identity,
            ),
            remover=CascadeRemover(
                store=store,
                registry=registry,
                authorizer=authorizer,
                supported_semantics=frozenset(supported_delete_semantics),
            ),
        )

    def upsert_schema_type(
        self,
        user_id: str,
        schema_type: SchemaType,
        external_source_name: str,
    ) -> UUID:
        return self.schema_types.upsert_schema_type(user_id, schema_type, external_source_name)

    def upsert_schema_attributes(
        self,
        user_id: str,
        schema_type: SchemaType,
        schema_type_id: UUID,
        external_source_name: str,
    ) -> AttributeReconciliation:
        """Reconcile only the attributes of an already persisted schema type."""

        method_name = "upsert_schema_attributes"
        validate_user_id(user_id, method_name)
        validate_schema_type(schema_type, method_name)
        validate_name(external_source_name, "externalSourceName", method_name)
        self.schema_types.authorizer.authorize(user_id, Action.WRITE)
        self.attributes.require_schema_type(schema_type_id, method_name)
        source = self.schema_types.registry.resolve(external_source_name)
        return self.attributes.upsert_schema_attributes(
            user_id,
            schema_type,
            schema_type_id,
            provenance=Provenance.for_source(source, user_id=user_id),
        )

    def find_schema_type(self, user_id: str, qualified_name: str) -> EntityRef | None:
        method_name = "find_schema_type"
        validate_user_id(user_id, method_name)
        validate_name(qualified_name, "qualifiedName", method_name)
        return self.identity.find_schema_type(user_id, qualified_name)

    def find_schema_attribute(self, user_id: str, qualified_name: str) -> EntityRef | None:
        method_name = "find_schema_attribute"
        validate_user_id(user_id, method_name)
        validate_name(qualified_name, "qualifiedName", method_name)
        return self.identity.find_schema_attribute(user_id, qualified_name)

    def add_lineage_mapping(
        self,
        user_id: str,
        source_qualified_name: str,
        target_qualified_name: str,
        external_source_name: str,
    ) -> LineageLink:
        return self.linker.add_lineage_mapping(
            user_id,
            source_qualified_name,
            target_qualified_name,
            external_source_name,
        )

    def remove_schema_type(
        self,
        user_id: str,
        schema_type_id: UUID | str,
        external_source_name: str,
        delete_semantic: DeleteSemantic | str = DeleteSemantic.SOFT,
    ) -> RemovalResult:
        return self.remover.remove_schema_type(
            user_id,
            schema_type_id,
            external_source_name,
            delete_semantic,
        )
