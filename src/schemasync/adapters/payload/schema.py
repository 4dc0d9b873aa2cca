"""JSON payload describing a tabular schema to reconcile.

Keys follow the camelCase names used by the entity properties, e.g.::

    {
      "qualifiedName": "schema.orders",
      "displayName": "Orders",
      "attributes": [
        {"qualifiedName": "schema.orders.id", "displayName": "id", "position": 0}
      ]
    }
"""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field

from schemasync.domain.model import SortOrder


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class AttributePayload(PayloadModel):
    qualified_name: str = Field(alias="qualifiedName", min_length=1)
    display_name: str = Field(alias="displayName")
    description: str | None = None
    position: int = Field(default=0, ge=0)
    min_cardinality: int = Field(default=0, alias="minCardinality", ge=0)
    max_cardinality: int = Field(default=1, alias="maxCardinality")
    is_deprecated: bool = Field(default=False, alias="isDeprecated")
    default_value_override: str | None = Field(default=None, alias="defaultValueOverride")
    allows_duplicate_values: bool = Field(default=False, alias="allowsDuplicateValues")
    ordered_values: bool = Field(default=False, alias="orderedValues")
    sort_order: SortOrder = Field(default=SortOrder.UNKNOWN, alias="sortOrder")
    minimum_length: int = Field(default=0, alias="minimumLength", ge=0)
    length: int = Field(default=0, ge=0)
    precision: int = Field(default=0, ge=0)
    is_nullable: bool = Field(default=True, alias="isNullable")
    native_class: str | None = Field(default=None, alias="nativeClass")
    aliases: list[str] = Field(default_factory=list[str])
    data_type: str | None = Field(default=None, alias="dataType")
    type_guid: UUID | None = Field(default=None, alias="typeGuid")
    type_name: str | None = Field(default=None, alias="typeName")


class SchemaTypePayload(PayloadModel):
    qualified_name: str = Field(alias="qualifiedName", min_length=1)
    display_name: str = Field(alias="displayName")
    version_number: str | None = Field(default=None, alias="versionNumber")
    author: str | None = None
    usage: str | None = None
    encoding_standard: str | None = Field(default=None, alias="encodingStandard")
    attributes: list[AttributePayload] = Field(default_factory=list[AttributePayload])
