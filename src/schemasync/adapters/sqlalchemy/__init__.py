"""SQLAlchemy adapter package for schemasync."""

from __future__ import annotations

from .mappings import (
    entity_table,
    external_source_table,
    mapper_registry,
    relationship_table,
    start_mappers,
)
from .repositories import (
    SUPPORTED_DELETE_SEMANTICS,
    SqlAlchemyEntityGraphStore,
    SqlAlchemyExternalSourceRegistry,
)

__all__ = [
    "SUPPORTED_DELETE_SEMANTICS",
    "SqlAlchemyEntityGraphStore",
    "SqlAlchemyExternalSourceRegistry",
    "entity_table",
    "external_source_table",
    "mapper_registry",
    "relationship_table",
    "start_mappers",
]
