"""Lineage mapping between two previously reconciled elements.

Endpoints are looked up as ``Referenceable``. A tabular schema type is a
container rather than an addressable asset, so when one is found the asset it is
attached to (through ``AssetSchemaType``) becomes the endpoint instead. Without
an attached asset the container itself is used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schemasync.domain.errors import ReferenceableNotFoundError
from schemasync.domain.model import EntityTypeName, Provenance, RelationshipType
from schemasync.domain.ports import Action

from .contracts import EndpointResolution, LineageEndpoint, LineageLink
from .validation import validate_name, validate_user_id

if TYPE_CHECKING:
    from schemasync.domain.model import EntityRef
    from schemasync.domain.ports import Authorizer, EntityGraphStore, ExternalSourceRegistry

    from .identity import IdentityResolver

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RelationshipLinker:
    store: EntityGraphStore
    registry: ExternalSourceRegistry
    authorizer: Authorizer
    identity: IdentityResolver

    def resolve_endpoint(self, user_id: str, qualified_name: str) -> LineageEndpoint | None:
        entity = self.identity.find_referenceable(user_id, qualified_name)
        if entity is None:
            return None

        if entity.type_name.lower() != EntityTypeName.TABULAR_SCHEMA_TYPE.lower():
            return LineageEndpoint(
                qualified_name=qualified_name,
                entity=entity,
                resolution=EndpointResolution.DIRECT,
            )

        asset = self._owning_asset(entity)
        if asset is None:
            return LineageEndpoint(
                qualified_name=qualified_name,
                entity=entity,
                resolution=EndpointResolution.CONTAINER,
            )
        log.debug("Lineage endpoint %s redirected to asset %s", qualified_name, asset.qualified_name)
        return LineageEndpoint(
            qualified_name=qualified_name,
            entity=asset,
            resolution=EndpointResolution.ASSET,
        )

    def add_lineage_mapping(
        self,
        user_id: str,
        source_qualified_name: str,
        target_qualified_name: str,
        external_source_name: str,
    ) -> LineageLink:
        method_name = "add_lineage_mapping"
        validate_user_id(user_id, method_name)
        validate_name(source_qualified_name, "sourceQualifiedName", method_name)
        validate_name(target_qualified_name, "targetQualifiedName", method_name)
        validate_name(external_source_name, "externalSourceName", method_name)
        self.authorizer.authorize(user_id, Action.WRITE)

        source = self.resolve_endpoint(user_id, source_qualified_name)
        target = self.resolve_endpoint(user_id, target_qualified_name)
        if source is None:
            raise ReferenceableNotFoundError(source_qualified_name)
        if target is None:
            raise ReferenceableNotFoundError(target_qualified_name)

        external_source = self.registry.resolve(external_source_name)
        relationship_id = self.store.create_relationship(
            RelationshipType.LINEAGE_MAPPING,
            source.entity.id,
            target.entity.id,
            provenance=Provenance.for_source(external_source, user_id=user_id),
        )
        log.info(
            "Linked %s -> %s (%s, %s -> %s)",
            source_qualified_name,
            target_qualified_name,
            relationship_id,
            source.resolution,
            target.resolution,
        )
        return LineageLink(source=source, target=target, relationship_id=relationship_id)

    def _owning_asset(self, schema_type: EntityRef) -> EntityRef | None:
        assets = self.store.get_related_entities(
            schema_type.id,
            RelationshipType.ASSET_SCHEMA_TYPE,
            EntityTypeName.TABULAR_SCHEMA_TYPE,
        )
        if not assets:
            return None
        if len(assets) > 1:
            log.warning(
                "Schema type %s is attached to %s assets; using the first by qualified name",
                schema_type.qualified_name,
                len(assets),
            )
        return min(assets, key=lambda asset: asset.qualified_name)
