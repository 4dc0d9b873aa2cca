"""Desired-state descriptions of tabular schemas supplied by callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from schemasync.domain.model.enums import SortOrder

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(slots=True, kw_only=True)
class Attribute:
    """One column of a schema type.

    ``position`` orders the attribute among the siblings of its owning type only;
    ``qualified_name`` is unique across the whole store.
    """

    qualified_name: str
    display_name: str
    description: str | None = None
    position: int = 0
    min_cardinality: int = 0
    max_cardinality: int = 1
    is_deprecated: bool = False
    default_value_override: str | None = None
    allows_duplicate_values: bool = False
    ordered_values: bool = False
    sort_order: SortOrder = SortOrder.UNKNOWN
    minimum_length: int = 0
    length: int = 0
    precision: int = 0
    is_nullable: bool = True
    native_class: str | None = None
    aliases: list[str] = field(default_factory=list[str])
    data_type: str | None = None
    type_guid: UUID | None = None
    type_name: str | None = None


@dataclass(slots=True, kw_only=True)
class SchemaType:
    """A structured record shape with its ordered attributes."""

    qualified_name: str
    display_name: str
    version_number: str | None = None
    author: str | None = None
    usage: str | None = None
    encoding_standard: str | None = None
    attributes: list[Attribute] = field(default_factory=list["Attribute"])
