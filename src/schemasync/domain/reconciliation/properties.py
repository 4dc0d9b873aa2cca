"""Pure builders from typed desired state to the store's property maps.

String property keys exist only here, at the store boundary. The tracked
property set of each entity kind is exactly what these functions emit; anything
else (classifications, relationships) is reconciled separately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from schemasync.domain.errors import InvalidInputError
from schemasync.domain.model import (
    ClassificationName,
    EntityTypeName,
    is_subtype,
    typedef_for,
    typedef_for_guid,
)

if TYPE_CHECKING:
    from schemasync.domain.model import Attribute, Properties, SchemaType

SCHEMA_TYPE_ENTITY: Final[str] = EntityTypeName.TABULAR_SCHEMA_TYPE.value
DEFAULT_ATTRIBUTE_ENTITY: Final[str] = EntityTypeName.TABULAR_COLUMN.value


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def schema_type_properties(schema_type: SchemaType) -> dict[str, Any]:
    return _without_none(
        {
            "qualifiedName": schema_type.qualified_name,
            "displayName": schema_type.display_name,
            "versionNumber": schema_type.version_number,
            "author": schema_type.author,
            "usage": schema_type.usage,
            "encodingStandard": schema_type.encoding_standard,
            "isDeprecated": False,
        }
    )


def attribute_properties(attribute: Attribute) -> dict[str, Any]:
    return _without_none(
        {
            "qualifiedName": attribute.qualified_name,
            "displayName": attribute.display_name,
            "description": attribute.description,
            "position": attribute.position,
            "minCardinality": attribute.min_cardinality,
            "maxCardinality": attribute.max_cardinality,
            "isDeprecated": attribute.is_deprecated,
            "defaultValueOverride": attribute.default_value_override,
            "allowsDuplicateValues": attribute.allows_duplicate_values,
            "orderedValues": attribute.ordered_values,
            "sortOrder": attribute.sort_order.value,
            "minimumLength": attribute.minimum_length,
            "length": attribute.length,
            "precision": attribute.precision,
            "isNullable": attribute.is_nullable,
            "nativeClass": attribute.native_class,
            "aliases": list(attribute.aliases),
        }
    )


def attribute_classifications(
    attribute: Attribute,
    *,
    schema_type_name: str,
) -> dict[str, Properties]:
    """Return the embedded-type classification written when an attribute is created."""

    embedded = _without_none({"schemaTypeName": schema_type_name, "dataType": attribute.data_type})
    return {ClassificationName.TYPE_EMBEDDED_ATTRIBUTE.value: embedded}


def attribute_entity_type(attribute: Attribute) -> str:
    """Return the storage type for an attribute, honouring a guid/name override."""

    by_guid = None
    if attribute.type_guid is not None:
        by_guid = typedef_for_guid(attribute.type_guid)
        if by_guid is None:
            raise InvalidInputError(
                f"Unknown attribute type guid {attribute.type_guid} for {attribute.qualified_name!r}",
                parameter="typeGuid",
            )

    by_name = None
    if attribute.type_name is not None:
        by_name = typedef_for(attribute.type_name)
        if by_name is None:
            raise InvalidInputError(
                f"Unknown attribute type {attribute.type_name!r} for {attribute.qualified_name!r}",
                parameter="typeName",
            )

    if by_guid is not None and by_name is not None and by_guid != by_name:
        raise InvalidInputError(
            f"Attribute {attribute.qualified_name!r}: typeGuid and typeName disagree "
            f"({by_guid.name} != {by_name.name})",
            parameter="typeGuid",
        )

    chosen = by_name or by_guid
    if chosen is None:
        return DEFAULT_ATTRIBUTE_ENTITY
    if not is_subtype(chosen.name, EntityTypeName.SCHEMA_ATTRIBUTE):
        raise InvalidInputError(
            f"Attribute {attribute.qualified_name!r}: {chosen.name} is not a schema attribute type",
            parameter="typeName",
        )
    return chosen.name
