"""Translate JSON payloads into domain schema descriptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from schemasync.domain.errors import InvalidInputError
from schemasync.domain.model import Attribute, SchemaType

from .schema import SchemaTypePayload

if TYPE_CHECKING:
    from .schema import AttributePayload


def parse_schema_type(raw: str | bytes) -> SchemaTypePayload:
    """Validate a raw JSON document, reporting failures as ``InvalidInputError``."""

    try:
        return SchemaTypePayload.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid schema type payload: {exc}") from exc


def translate_attribute(payload: AttributePayload) -> Attribute:
    return Attribute(
        qualified_name=payload.qualified_name,
        display_name=payload.display_name,
        description=payload.description,
        position=payload.position,
        min_cardinality=payload.min_cardinality,
        max_cardinality=payload.max_cardinality,
        is_deprecated=payload.is_deprecated,
        default_value_override=payload.default_value_override,
        allows_duplicate_values=payload.allows_duplicate_values,
        ordered_values=payload.ordered_values,
        sort_order=payload.sort_order,
        minimum_length=payload.minimum_length,
        length=payload.length,
        precision=payload.precision,
        is_nullable=payload.is_nullable,
        native_class=payload.native_class,
        aliases=list(payload.aliases),
        data_type=payload.data_type,
        type_guid=payload.type_guid,
        type_name=payload.type_name,
    )


def translate_schema_type(payload: SchemaTypePayload) -> SchemaType:
    return SchemaType(
        qualified_name=payload.qualified_name,
        display_name=payload.display_name,
        version_number=payload.version_number,
        author=payload.author,
        usage=payload.usage,
        encoding_standard=payload.encoding_standard,
        attributes=[translate_attribute(attribute) for attribute in payload.attributes],
    )
