"""Natural-key lookup of persisted entities. Never creates anything."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from schemasync.domain.model import EntityTypeName
from schemasync.domain.ports import Action

if TYPE_CHECKING:
    from schemasync.domain.model import EntityRef
    from schemasync.domain.ports import Authorizer, EntityGraphStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class IdentityResolver:
    store: EntityGraphStore
    authorizer: Authorizer

    def find(self, user_id: str, qualified_name: str, type_name: str) -> EntityRef | None:
        """Return the entity of ``type_name`` (or a subtype) keyed by ``qualified_name``.

        Absence is not an error. ``AuthorizationError`` and ``StoreError`` propagate.
        """

        self.authorizer.authorize(user_id, Action.READ)
        entity = self.store.find_by_qualified_name(type_name, qualified_name)
        if entity is None:
            log.debug("No %s found for %s", type_name, qualified_name)
        return entity

    def find_schema_type(self, user_id: str, qualified_name: str) -> EntityRef | None:
        return self.find(user_id, qualified_name, EntityTypeName.SCHEMA_TYPE)

    def find_schema_attribute(self, user_id: str, qualified_name: str) -> EntityRef | None:
        return self.find(user_id, qualified_name, EntityTypeName.SCHEMA_ATTRIBUTE)

    def find_referenceable(self, user_id: str, qualified_name: str) -> EntityRef | None:
        return self.find(user_id, qualified_name, EntityTypeName.REFERENCEABLE)
