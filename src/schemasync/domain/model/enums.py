"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityTypeName(StrEnum):
    """Entity type names known to the graph store type system."""

    REFERENCEABLE = "Referenceable"

    ASSET = "Asset"
    DATA_SET = "DataSet"
    DATA_FILE = "DataFile"
    CSV_FILE = "CSVFile"
    DATA_STORE = "DataStore"
    DATABASE = "Database"
    PROCESS = "Process"

    SCHEMA_ELEMENT = "SchemaElement"
    SCHEMA_TYPE = "SchemaType"
    COMPLEX_SCHEMA_TYPE = "ComplexSchemaType"
    TABULAR_SCHEMA_TYPE = "TabularSchemaType"

    SCHEMA_ATTRIBUTE = "SchemaAttribute"
    TABULAR_COLUMN = "TabularColumn"
    TABULAR_FILE_COLUMN = "TabularFileColumn"
    RELATIONAL_COLUMN = "RelationalColumn"


class RelationshipType(StrEnum):
    ASSET_SCHEMA_TYPE = "AssetSchemaType"
    ATTRIBUTE_FOR_SCHEMA = "AttributeForSchema"
    LINEAGE_MAPPING = "LineageMapping"


class ClassificationName(StrEnum):
    TYPE_EMBEDDED_ATTRIBUTE = "TypeEmbeddedAttribute"


class SortOrder(StrEnum):
    UNKNOWN = "unknown"
    ASCENDING = "ascending"
    DESCENDING = "descending"
    UNSORTED = "unsorted"
    OTHER = "other"


class DeleteSemantic(StrEnum):
    """How removal is carried out by the store."""

    SOFT = "soft"
    HARD = "hard"
    MEMENTO = "memento"
