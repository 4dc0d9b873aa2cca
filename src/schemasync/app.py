"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import UUID

from schemasync.adapters.authorization import AllowAllAuthorizer, AllowListAuthorizer
from schemasync.adapters.sqlalchemy.session import (
    build_entity_graph_store,
    build_external_source_registry,
    is_started,
    startup,
)
from schemasync.common import KeyedLocks
from schemasync.config import (
    MissingConfigurationError,
    ReconciliationConfig,
    get_reconciliation_config,
)
from schemasync.config.reconciliation import EXTERNAL_SOURCE_ENV
from schemasync.domain.model import DeleteSemantic
from schemasync.domain.reconciliation import SchemaReconciliationEngine
from schemasync.domain.reconciliation.validation import validate_name

if TYPE_CHECKING:
    from schemasync.adapters.sqlalchemy.repositories import SqlAlchemyExternalSourceRegistry
    from schemasync.domain.model import EntityRef, ExternalSource, SchemaType
    from schemasync.domain.ports import Authorizer, EntityGraphStore, ExternalSourceRegistry
    from schemasync.domain.reconciliation import (
        AttributeReconciliation,
        LineageLink,
        RemovalResult,
    )


log = getLogger(__name__)


@dataclass(slots=True)
class SchemaSyncService:
    """Serialize engine calls per qualified name and fill in configured defaults.

    The engine itself is stateless; two callers reconciling the same schema type
    (or the same attribute) through one service never interleave.
    """

    engine: SchemaReconciliationEngine
    default_external_source: str | None = None
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    def _source(self, external_source_name: str | None) -> str:
        name = external_source_name or self.default_external_source
        if not name:
            raise MissingConfigurationError(
                f"No external source given and {EXTERNAL_SOURCE_ENV} is not set",
                variables=(EXTERNAL_SOURCE_ENV,),
            )
        return name

    def upsert_schema_type(
        self,
        user_id: str,
        schema_type: SchemaType,
        external_source_name: str | None = None,
    ) -> UUID:
        source = self._source(external_source_name)
        keys = [schema_type.qualified_name]
        keys.extend(attribute.qualified_name for attribute in schema_type.attributes)
        with self.locks.hold(*(key for key in keys if key)):
            schema_type_id = self.engine.upsert_schema_type(user_id, schema_type, source)
        log.info(
            "Reconciled schema type %s (%s) with %d attribute(s) from %s",
            schema_type.qualified_name,
            schema_type_id,
            len(schema_type.attributes),
            source,
        )
        return schema_type_id

    def upsert_schema_attributes(
        self,
        user_id: str,
        schema_type: SchemaType,
        schema_type_id: UUID,
        external_source_name: str | None = None,
    ) -> AttributeReconciliation:
        source = self._source(external_source_name)
        keys = [attribute.qualified_name for attribute in schema_type.attributes]
        with self.locks.hold(*(key for key in keys if key)):
            return self.engine.upsert_schema_attributes(
                user_id, schema_type, schema_type_id, source
            )

    def find_schema_type(self, user_id: str, qualified_name: str) -> EntityRef | None:
        return self.engine.find_schema_type(user_id, qualified_name)

    def find_schema_attribute(self, user_id: str, qualified_name: str) -> EntityRef | None:
        return self.engine.find_schema_attribute(user_id, qualified_name)

    def add_lineage_mapping(
        self,
        user_id: str,
        source_qualified_name: str,
        target_qualified_name: str,
        external_source_name: str | None = None,
    ) -> LineageLink:
        source = self._source(external_source_name)
        keys = (source_qualified_name, target_qualified_name)
        with self.locks.hold(*(key for key in keys if key)):
            link = self.engine.add_lineage_mapping(
                user_id, source_qualified_name, target_qualified_name, source
            )
        log.info(
            "Linked %s -> %s (%s -> %s)",
            source_qualified_name,
            target_qualified_name,
            link.source.resolution,
            link.target.resolution,
        )
        return link

    def remove_schema_type(
        self,
        user_id: str,
        schema_type_id: UUID | str,
        external_source_name: str | None = None,
        delete_semantic: DeleteSemantic | str = DeleteSemantic.SOFT,
    ) -> RemovalResult:
        source = self._source(external_source_name)
        with self.locks.hold(*self._removal_keys(schema_type_id)):
            result = self.engine.remove_schema_type(
                user_id, schema_type_id, source, delete_semantic
            )
        log.info(
            "Removed schema type %s and %d attribute(s)",
            result.schema_type_id,
            len(result.attribute_ids),
        )
        return result

    def _removal_keys(self, schema_type_id: UUID | str) -> tuple[str, ...]:
        # Removal is addressed by id; lock the qualified name too so it excludes upserts.
        try:
            entity_id = schema_type_id if isinstance(schema_type_id, UUID) else UUID(schema_type_id)
        except ValueError:
            return ()
        existing = self.engine.identity.store.get(entity_id)
        if existing is None:
            return (str(entity_id),)
        return (str(entity_id), existing.qualified_name)


def _authorizer_for(config: ReconciliationConfig) -> Authorizer:
    if config.allowed_users is None:
        return AllowAllAuthorizer()
    return AllowListAuthorizer(config.allowed_users)


def build_service(
    *,
    store: EntityGraphStore | None = None,
    registry: ExternalSourceRegistry | None = None,
    authorizer: Authorizer | None = None,
    config: ReconciliationConfig | None = None,
) -> SchemaSyncService:
    """Wire the reconciliation engine to the configured adapters."""

    effective_config = config or get_reconciliation_config()
    if store is None or registry is None:
        if not is_started():
            startup()
        store = store or build_entity_graph_store()
        registry = registry or build_external_source_registry()

    engine = SchemaReconciliationEngine.build(
        store=store,
        registry=registry,
        authorizer=authorizer or _authorizer_for(effective_config),
        supported_delete_semantics=effective_config.supported_delete_semantics,
    )
    log.debug(
        "Built schema sync service: default source=%s, delete semantics=%s",
        effective_config.external_source_name,
        sorted(effective_config.supported_delete_semantics),
    )
    return SchemaSyncService(
        engine=engine,
        default_external_source=effective_config.external_source_name,
    )


def register_external_source(
    name: str,
    *,
    registry: SqlAlchemyExternalSourceRegistry | None = None,
) -> ExternalSource:
    """Register ``name`` as a provenance source, returning the existing one if present."""

    validate_name(name, "externalSourceName", "register_external_source")
    if registry is None:
        if not is_started():
            startup()
        registry = build_external_source_registry()
    return registry.register(name)
