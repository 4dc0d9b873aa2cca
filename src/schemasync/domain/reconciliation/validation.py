"""Presence checks performed before any store access."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from schemasync.domain.errors import InvalidInputError, UnsupportedOperationError
from schemasync.domain.model import DeleteSemantic

if TYPE_CHECKING:
    from collections.abc import Collection

    from schemasync.domain.model import SchemaType


def validate_user_id(user_id: str | None, method_name: str) -> str:
    if user_id is None or not user_id.strip():
        raise InvalidInputError(f"{method_name}: userId must not be empty", parameter="userId")
    return user_id


def validate_name(value: str | None, parameter: str, method_name: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{method_name}: {parameter} must not be empty", parameter=parameter)
    return value


def validate_guid(value: UUID | str | None, parameter: str, method_name: str) -> UUID:
    if isinstance(value, UUID):
        return value
    if value is None or not value.strip():
        raise InvalidInputError(f"{method_name}: {parameter} must not be empty", parameter=parameter)
    try:
        return UUID(value)
    except ValueError as exc:
        raise InvalidInputError(
            f"{method_name}: {parameter} is not a valid guid: {value!r}", parameter=parameter
        ) from exc


def validate_delete_semantic(
    semantic: DeleteSemantic | str,
    supported: Collection[DeleteSemantic],
    method_name: str,
) -> DeleteSemantic:
    try:
        resolved = DeleteSemantic(semantic)
    except ValueError:
        resolved = None
    if resolved is None or resolved not in supported:
        supported_list = ", ".join(sorted(item.value for item in supported)) or "none"
        raise UnsupportedOperationError(
            f"{method_name}: delete semantic {str(semantic)!r} is not supported "
            f"(supported: {supported_list})",
            parameter="deleteSemantic",
        )
    return resolved


def validate_schema_type(schema_type: SchemaType, method_name: str) -> None:
    validate_name(schema_type.qualified_name, "qualifiedName", method_name)
    validate_name(schema_type.display_name, "displayName", method_name)
    for attribute in schema_type.attributes:
        validate_name(attribute.qualified_name, "attribute.qualifiedName", method_name)
