"""Public domain model surface."""

from __future__ import annotations

from schemasync.domain.model.entity import EntityRef, Properties
from schemasync.domain.model.enums import (
    ClassificationName,
    DeleteSemantic,
    EntityTypeName,
    RelationshipType,
    SortOrder,
)
from schemasync.domain.model.provenance import ExternalSource, Provenance
from schemasync.domain.model.schema import Attribute, SchemaType
from schemasync.domain.model.typedefs import (
    TypeDef,
    ancestors_of,
    is_subtype,
    subtype_names,
    typedef_for,
    typedef_for_guid,
)

__all__ = [  # noqa: RUF022
    # graph views
    "EntityRef",
    "Properties",
    # desired state
    "Attribute",
    "SchemaType",
    # provenance
    "ExternalSource",
    "Provenance",
    # type system
    "TypeDef",
    "ancestors_of",
    "is_subtype",
    "subtype_names",
    "typedef_for",
    "typedef_for_guid",
    # enums
    "ClassificationName",
    "DeleteSemantic",
    "EntityTypeName",
    "RelationshipType",
    "SortOrder",
]
