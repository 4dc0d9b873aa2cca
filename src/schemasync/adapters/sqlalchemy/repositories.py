"""Entity graph store and external source registry backed by SQLAlchemy.

Every public call runs in its own short transaction, so writes are independent
of each other: nothing spans two calls.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import and_, delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from schemasync.adapters.sqlalchemy.mappings import (
    entity_table,
    external_source_table,
    relationship_table,
)
from schemasync.domain.errors import (
    DuplicateEntityError,
    ExternalSourceNotFoundError,
    StoreError,
    UnsupportedOperationError,
)
from schemasync.domain.model import (
    DeleteSemantic,
    EntityRef,
    ExternalSource,
    subtype_names,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from uuid import UUID

    from sqlalchemy import RowMapping
    from sqlalchemy.orm import Session, sessionmaker

    from schemasync.domain.model import Properties, Provenance

log = logging.getLogger(__name__)

SUPPORTED_DELETE_SEMANTICS: Final[frozenset[DeleteSemantic]] = frozenset(
    {DeleteSemantic.SOFT, DeleteSemantic.HARD}
)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _type_names(type_name: str) -> list[str]:
    names = subtype_names(type_name) or frozenset({str(type_name)})
    return sorted(names)


def _entity_ref(row: RowMapping) -> EntityRef:
    return EntityRef(
        id=row["id"],
        type_name=row["type_name"],
        qualified_name=row["qualified_name"],
        properties=dict(row["properties"] or {}),
        classifications=dict(row["classifications"] or {}),
        version=row["version"],
    )


class _SqlAlchemyRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Run one transaction, translating backend failures into ``StoreError``."""

        try:
            with self.session_factory.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(f"Entity graph store failure: {exc}") from exc


class SqlAlchemyEntityGraphStore(_SqlAlchemyRepository):
    supported_delete_semantics = SUPPORTED_DELETE_SEMANTICS

    def find_by_qualified_name(self, type_name: str, qualified_name: str) -> EntityRef | None:
        stmt = (
            select(entity_table)
            .where(entity_table.c.qualified_name == qualified_name)
            .where(entity_table.c.type_name.in_(_type_names(type_name)))
            .where(entity_table.c.deleted_at.is_(None))
            .limit(2)
        )
        with self._session() as session:
            rows = session.execute(stmt).mappings().all()
        if not rows:
            return None
        if len(rows) > 1:
            raise DuplicateEntityError(type_name, qualified_name)
        return _entity_ref(rows[0])

    def get(self, entity_id: UUID) -> EntityRef | None:
        stmt = (
            select(entity_table)
            .where(entity_table.c.id == entity_id)
            .where(entity_table.c.deleted_at.is_(None))
        )
        with self._session() as session:
            row = session.execute(stmt).mappings().one_or_none()
        return _entity_ref(row) if row is not None else None

    def create(
        self,
        type_name: str,
        properties: Properties,
        *,
        provenance: Provenance,
        classifications: dict[str, Properties] | None = None,
    ) -> UUID:
        qualified_name = properties.get("qualifiedName")
        if not isinstance(qualified_name, str) or not qualified_name:
            raise StoreError(f"Cannot create {type_name} without a qualifiedName property")

        entity_id = uuid.uuid4()
        stmt = insert(entity_table).values(
            id=entity_id,
            type_name=str(type_name),
            qualified_name=qualified_name,
            properties=dict(properties),
            classifications={
                name: dict(values) for name, values in (classifications or {}).items()
            },
            version=1,
            external_source_id=provenance.source_id,
            external_source_name=provenance.source_name,
            created_by=provenance.user_id,
            created_at=_utcnow(),
        )
        with self._session() as session:
            try:
                session.execute(stmt)
            except IntegrityError as exc:
                raise DuplicateEntityError(type_name, qualified_name) from exc
        log.debug("Stored %s %s as %s", type_name, qualified_name, entity_id)
        return entity_id

    def update(self, entity_id: UUID, properties: Properties, *, provenance: Provenance) -> None:
        stmt = (
            update(entity_table)
            .where(entity_table.c.id == entity_id)
            .where(entity_table.c.deleted_at.is_(None))
            .values(
                properties=dict(properties),
                version=entity_table.c.version + 1,
                external_source_id=provenance.source_id,
                external_source_name=provenance.source_name,
                updated_by=provenance.user_id,
                updated_at=_utcnow(),
            )
        )
        with self._session() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise StoreError(f"Cannot update entity {entity_id}: not found")

    def delete(
        self,
        entity_id: UUID,
        *,
        semantic: DeleteSemantic,
        provenance: Provenance,
    ) -> None:
        if semantic not in self.supported_delete_semantics:
            raise UnsupportedOperationError(
                f"Delete semantic {semantic} is not supported by the SQL store",
                parameter="deleteSemantic",
            )

        touches_entity = or_(
            relationship_table.c.source_id == entity_id,
            relationship_table.c.target_id == entity_id,
        )
        with self._session() as session:
            if semantic == DeleteSemantic.HARD:
                session.execute(delete(relationship_table).where(touches_entity))
                result = session.execute(delete(entity_table).where(entity_table.c.id == entity_id))
            else:
                now = _utcnow()
                session.execute(
                    update(relationship_table)
                    .where(touches_entity)
                    .where(relationship_table.c.deleted_at.is_(None))
                    .values(deleted_at=now)
                )
                result = session.execute(
                    update(entity_table)
                    .where(entity_table.c.id == entity_id)
                    .where(entity_table.c.deleted_at.is_(None))
                    .values(deleted_at=now, updated_at=now, updated_by=provenance.user_id)
                )
        if result.rowcount == 0:
            log.debug("Delete of %s was a no-op", entity_id)

    def get_related_entities(
        self,
        entity_id: UUID,
        relationship_type: str,
        from_type: str,
    ) -> set[EntityRef]:
        anchor_stmt = (
            select(entity_table.c.type_name)
            .where(entity_table.c.id == entity_id)
            .where(entity_table.c.deleted_at.is_(None))
        )
        related_stmt = (
            select(entity_table)
            .join(
                relationship_table,
                or_(
                    and_(
                        relationship_table.c.source_id == entity_id,
                        relationship_table.c.target_id == entity_table.c.id,
                    ),
                    and_(
                        relationship_table.c.target_id == entity_id,
                        relationship_table.c.source_id == entity_table.c.id,
                    ),
                ),
            )
            .where(relationship_table.c.type_name == str(relationship_type))
            .where(relationship_table.c.deleted_at.is_(None))
            .where(entity_table.c.deleted_at.is_(None))
        )
        with self._session() as session:
            anchor_type = session.execute(anchor_stmt).scalar_one_or_none()
            if anchor_type is None or anchor_type not in _type_names(from_type):
                return set()
            rows = session.execute(related_stmt).mappings().all()
        return {_entity_ref(row) for row in rows}

    def create_relationship(
        self,
        type_name: str,
        source_id: UUID,
        target_id: UUID,
        *,
        provenance: Provenance,
    ) -> UUID:
        existing_stmt = (
            select(relationship_table.c.id)
            .where(relationship_table.c.type_name == str(type_name))
            .where(relationship_table.c.source_id == source_id)
            .where(relationship_table.c.target_id == target_id)
            .where(relationship_table.c.deleted_at.is_(None))
            .limit(1)
        )
        endpoints_stmt = (
            select(entity_table.c.id)
            .where(entity_table.c.id.in_([source_id, target_id]))
            .where(entity_table.c.deleted_at.is_(None))
        )
        with self._session() as session:
            existing_id = session.execute(existing_stmt).scalar_one_or_none()
            if existing_id is not None:
                log.debug("%s %s -> %s already exists", type_name, source_id, target_id)
                return existing_id

            found = set(session.execute(endpoints_stmt).scalars().all())
            missing = {source_id, target_id} - found
            if missing:
                raise StoreError(
                    f"Cannot relate {source_id} -> {target_id}: missing entities "
                    + ", ".join(str(entity_id) for entity_id in sorted(missing, key=str))
                )

            relationship_id = uuid.uuid4()
            session.execute(
                insert(relationship_table).values(
                    id=relationship_id,
                    type_name=str(type_name),
                    source_id=source_id,
                    target_id=target_id,
                    external_source_id=provenance.source_id,
                    external_source_name=provenance.source_name,
                    created_by=provenance.user_id,
                    created_at=_utcnow(),
                )
            )
        log.debug("Stored %s %s -> %s as %s", type_name, source_id, target_id, relationship_id)
        return relationship_id


class SqlAlchemyExternalSourceRegistry(_SqlAlchemyRepository):
    """Registered external sources, mapped onto the ``ExternalSource`` domain class."""

    def resolve(self, name: str) -> ExternalSource:
        with self._session() as session:
            source = self._find(session, name)
        if source is None:
            raise ExternalSourceNotFoundError(name)
        return source

    def register(self, name: str) -> ExternalSource:
        """Return the source called ``name``, registering it first if needed."""

        with self._session() as session:
            source = self._find(session, name)
            if source is None:
                source = ExternalSource(name=name)
                session.add(source)
                log.info("Registered external source %s (%s)", name, source.id)
        return source

    @staticmethod
    def _find(session: Session, name: str) -> ExternalSource | None:
        stmt = select(ExternalSource).where(external_source_table.c.name == name)
        return session.execute(stmt).scalar_one_or_none()


if TYPE_CHECKING:
    from typing import cast

    from schemasync.domain.ports import EntityGraphStore, ExternalSourceRegistry

    _factory_stub = cast("sessionmaker[Session]", object())
    _store_check: EntityGraphStore = SqlAlchemyEntityGraphStore(_factory_stub)
    _registry_check: ExternalSourceRegistry = SqlAlchemyExternalSourceRegistry(_factory_stub)
