"""SQLAlchemy mapping metadata for the entity graph store."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    Uuid,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from schemasync.domain.model import ExternalSource

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

external_source_table = Table(
    "external_source",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False, unique=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
)

entity_table = Table(
    "entity",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("type_name", String, nullable=False),
    Column("qualified_name", String, nullable=False),
    Column("properties", JSON, nullable=False),
    Column("classifications", JSON, nullable=False),
    Column("version", Integer, nullable=False, default=1),
    Column(
        "external_source_id",
        UUIDColumnType,
        ForeignKey("external_source.id"),
        nullable=True,
    ),
    Column("external_source_name", String, nullable=True),
    Column("created_by", String, nullable=True),
    Column("updated_by", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("deleted_at", UTCDateTime(), nullable=True),
    Index("ix_entity_type_name", "type_name"),
)

# natural key uniqueness among active entities
Index(
    "uq_entity_active_qualified_name",
    entity_table.c.qualified_name,
    unique=True,
    sqlite_where=entity_table.c.deleted_at.is_(None),
    postgresql_where=entity_table.c.deleted_at.is_(None),
)

relationship_table = Table(
    "entity_relationship",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("type_name", String, nullable=False),
    Column(
        "source_id",
        UUIDColumnType,
        ForeignKey("entity.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "target_id",
        UUIDColumnType,
        ForeignKey("entity.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "external_source_id",
        UUIDColumnType,
        ForeignKey("external_source.id"),
        nullable=True,
    ),
    Column("external_source_name", String, nullable=True),
    Column("created_by", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column("deleted_at", UTCDateTime(), nullable=True),
    Index("ix_entity_relationship_source", "type_name", "source_id"),
    Index("ix_entity_relationship_target", "type_name", "target_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        ExternalSource,
        external_source_table,
    )

    configure_mappers()
    return mapper_registry
