"""JSON payload adapter for schema descriptions."""

from __future__ import annotations

from .schema import AttributePayload, SchemaTypePayload
from .translator import parse_schema_type, translate_attribute, translate_schema_type

__all__ = [
    "AttributePayload",
    "SchemaTypePayload",
    "parse_schema_type",
    "translate_attribute",
    "translate_schema_type",
]
