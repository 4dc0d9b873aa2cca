"""Single-inheritance type definitions for graph store entities.

Lookups by a type name match the type itself and every subtype, so a search for
``Referenceable`` sees everything while ``SchemaType`` sees only schema types.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from typing import Final
from uuid import UUID, uuid5

from schemasync.domain.model.enums import EntityTypeName

TYPEDEF_NAMESPACE: Final[UUID] = UUID("6f0d5c0e-3c57-4a0b-9d0e-9f1c7a4e2b10")


@dataclass(frozen=True, slots=True)
class TypeDef:
    name: str
    guid: UUID
    supertype: str | None = None


def _typedef(name: EntityTypeName, supertype: EntityTypeName | None = None) -> TypeDef:
    return TypeDef(
        name=name.value,
        guid=uuid5(TYPEDEF_NAMESPACE, name.value),
        supertype=supertype.value if supertype is not None else None,
    )


TYPEDEFS: Final[tuple[TypeDef, ...]] = (
    _typedef(EntityTypeName.REFERENCEABLE),
    _typedef(EntityTypeName.ASSET, EntityTypeName.REFERENCEABLE),
    _typedef(EntityTypeName.DATA_SET, EntityTypeName.ASSET),
    _typedef(EntityTypeName.DATA_FILE, EntityTypeName.DATA_SET),
    _typedef(EntityTypeName.CSV_FILE, EntityTypeName.DATA_FILE),
    _typedef(EntityTypeName.DATA_STORE, EntityTypeName.ASSET),
    _typedef(EntityTypeName.DATABASE, EntityTypeName.DATA_STORE),
    _typedef(EntityTypeName.PROCESS, EntityTypeName.ASSET),
    _typedef(EntityTypeName.SCHEMA_ELEMENT, EntityTypeName.REFERENCEABLE),
    _typedef(EntityTypeName.SCHEMA_TYPE, EntityTypeName.SCHEMA_ELEMENT),
    _typedef(EntityTypeName.COMPLEX_SCHEMA_TYPE, EntityTypeName.SCHEMA_TYPE),
    _typedef(EntityTypeName.TABULAR_SCHEMA_TYPE, EntityTypeName.COMPLEX_SCHEMA_TYPE),
    _typedef(EntityTypeName.SCHEMA_ATTRIBUTE, EntityTypeName.SCHEMA_ELEMENT),
    _typedef(EntityTypeName.TABULAR_COLUMN, EntityTypeName.SCHEMA_ATTRIBUTE),
    _typedef(EntityTypeName.TABULAR_FILE_COLUMN, EntityTypeName.TABULAR_COLUMN),
    _typedef(EntityTypeName.RELATIONAL_COLUMN, EntityTypeName.TABULAR_COLUMN),
)

TYPEDEF_BY_NAME: Final[dict[str, TypeDef]] = {typedef.name: typedef for typedef in TYPEDEFS}
TYPEDEF_BY_GUID: Final[dict[UUID, TypeDef]] = {typedef.guid: typedef for typedef in TYPEDEFS}


def typedef_for(name: str) -> TypeDef | None:
    return TYPEDEF_BY_NAME.get(name)


def typedef_for_guid(guid: UUID) -> TypeDef | None:
    return TYPEDEF_BY_GUID.get(guid)


def ancestors_of(name: str) -> tuple[str, ...]:
    """Return ``name`` followed by its supertypes up to the root."""

    lineage: list[str] = []
    current = TYPEDEF_BY_NAME.get(name)
    while current is not None:
        lineage.append(current.name)
        current = TYPEDEF_BY_NAME.get(current.supertype) if current.supertype else None
    return tuple(lineage)


def is_subtype(name: str, ancestor: str) -> bool:
    return ancestor in ancestors_of(name)


@cache
def subtype_names(name: str) -> frozenset[str]:
    """Return ``name`` and every registered type that inherits from it."""

    return frozenset(typedef.name for typedef in TYPEDEFS if is_subtype(typedef.name, name))
