from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from schemasync.adapters.authorization import AllowAllAuthorizer
from schemasync.adapters.sqlalchemy import entity_table, relationship_table
from schemasync.domain.errors import InvalidInputError, ReferenceableNotFoundError
from schemasync.domain.model import DeleteSemantic, Provenance
from schemasync.domain.reconciliation import EndpointResolution, SchemaReconciliationEngine
from schemasync.domain.reconciliation.properties import attribute_properties
from tests.helpers.store import SOURCE_NAME, USER_ID, make_attribute, make_orders_schema

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from schemasync.adapters.sqlalchemy import (
        SqlAlchemyEntityGraphStore,
        SqlAlchemyExternalSourceRegistry,
    )


@pytest.fixture
def engine(
    sql_store: SqlAlchemyEntityGraphStore,
    sql_registry: SqlAlchemyExternalSourceRegistry,
) -> SchemaReconciliationEngine:
    return SchemaReconciliationEngine.build(
        store=sql_store,
        registry=sql_registry,
        authorizer=AllowAllAuthorizer(),
    )


def _row_state(session_factory: sessionmaker[Session]) -> tuple[int, int, int]:
    with session_factory() as session:
        entities = session.execute(select(func.count()).select_from(entity_table)).scalar_one()
        relationships = session.execute(
            select(func.count()).select_from(relationship_table)
        ).scalar_one()
        versions = session.execute(select(func.sum(entity_table.c.version))).scalar_one()
    return entities, relationships, versions


def test_orders_schema_is_created_with_linked_columns(
    engine: SchemaReconciliationEngine,
    sql_store: SqlAlchemyEntityGraphStore,
) -> None:
    schema_type_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)

    schema_type = engine.find_schema_type(USER_ID, "schema.orders")
    columns = sql_store.get_related_entities(schema_type_id, "AttributeForSchema", "SchemaType")

    assert schema_type is not None
    assert schema_type.type_name == "TabularSchemaType"
    assert {column.qualified_name: column.properties["position"] for column in columns} == {
        "schema.orders.id": 0,
        "schema.orders.total": 1,
    }


def test_repeat_upsert_changes_nothing(
    engine: SchemaReconciliationEngine,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    first_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    before = _row_state(sqlite_session_factory)

    second_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)

    assert second_id == first_id
    assert _row_state(sqlite_session_factory) == before


def test_display_name_change_updates_only_the_type(
    engine: SchemaReconciliationEngine,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    entities, relationships, versions = _row_state(sqlite_session_factory)

    engine.upsert_schema_type(USER_ID, make_orders_schema(display_name="Orders v2"), SOURCE_NAME)

    assert _row_state(sqlite_session_factory) == (entities, relationships, versions + 1)
    stored = engine.find_schema_type(USER_ID, "schema.orders")
    assert stored is not None
    assert stored.properties["displayName"] == "Orders v2"


def test_data_type_change_is_not_written(
    engine: SchemaReconciliationEngine,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    before = _row_state(sqlite_session_factory)

    changed = make_orders_schema(
        attributes=[
            make_attribute("schema.orders.id", 0, data_type="UUID"),
            make_attribute("schema.orders.total", 1, data_type="DECIMAL"),
        ]
    )
    engine.upsert_schema_type(USER_ID, changed, SOURCE_NAME)

    assert _row_state(sqlite_session_factory) == before


def test_omitted_attribute_survives(engine: SchemaReconciliationEngine) -> None:
    engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)

    engine.upsert_schema_type(
        USER_ID,
        make_orders_schema(attributes=[make_attribute("schema.orders.id", 0)]),
        SOURCE_NAME,
    )

    assert engine.find_schema_attribute(USER_ID, "schema.orders.total") is not None


def test_lineage_from_schema_type_lands_on_its_asset(
    engine: SchemaReconciliationEngine,
    sql_store: SqlAlchemyEntityGraphStore,
    sql_registry: SqlAlchemyExternalSourceRegistry,
) -> None:
    provenance = Provenance.for_source(sql_registry.resolve(SOURCE_NAME), user_id=USER_ID)
    schema_type_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    asset_id = sql_store.create("CSVFile", {"qualifiedName": "files/orders.csv"}, provenance=provenance)
    sql_store.create_relationship("AssetSchemaType", asset_id, schema_type_id, provenance=provenance)
    process_id = sql_store.create("Process", {"qualifiedName": "jobs.load"}, provenance=provenance)

    link = engine.add_lineage_mapping(USER_ID, "schema.orders", "jobs.load", SOURCE_NAME)

    assert link.source.resolution is EndpointResolution.ASSET
    lineage = sql_store.get_related_entities(asset_id, "LineageMapping", "Asset")
    assert {entity.id for entity in lineage} == {process_id}
    assert sql_store.get_related_entities(schema_type_id, "LineageMapping", "SchemaType") == set()


def test_missing_lineage_endpoint_writes_nothing(
    engine: SchemaReconciliationEngine,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    before = _row_state(sqlite_session_factory)

    with pytest.raises(ReferenceableNotFoundError):
        engine.add_lineage_mapping(USER_ID, "schema.orders.id", "schema.nowhere", SOURCE_NAME)

    assert _row_state(sqlite_session_factory) == before


@pytest.mark.parametrize("semantic", [DeleteSemantic.SOFT, DeleteSemantic.HARD])
def test_cascade_removal(
    engine: SchemaReconciliationEngine,
    semantic: DeleteSemantic,
) -> None:
    schema_type_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)

    result = engine.remove_schema_type(USER_ID, schema_type_id, SOURCE_NAME, semantic)

    assert len(result.attribute_ids) == 2
    assert engine.find_schema_type(USER_ID, "schema.orders") is None
    assert engine.find_schema_attribute(USER_ID, "schema.orders.id") is None
    assert engine.find_schema_attribute(USER_ID, "schema.orders.total") is None

    recreated_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    assert recreated_id != schema_type_id


def test_removal_leaves_non_schema_entities_alone(
    engine: SchemaReconciliationEngine,
    sql_store: SqlAlchemyEntityGraphStore,
    sql_registry: SqlAlchemyExternalSourceRegistry,
) -> None:
    provenance = Provenance.for_source(sql_registry.resolve(SOURCE_NAME), user_id=USER_ID)
    asset_id = sql_store.create("CSVFile", {"qualifiedName": "files/orders.csv"}, provenance=provenance)

    with pytest.raises(InvalidInputError):
        engine.remove_schema_type(USER_ID, asset_id, SOURCE_NAME, DeleteSemantic.HARD)

    assert sql_store.get(asset_id) is not None


def test_interrupted_attribute_create_is_repaired(
    engine: SchemaReconciliationEngine,
    sql_store: SqlAlchemyEntityGraphStore,
    sql_registry: SqlAlchemyExternalSourceRegistry,
) -> None:
    provenance = Provenance.for_source(sql_registry.resolve(SOURCE_NAME), user_id=USER_ID)
    orphan_id = sql_store.create(
        "TabularColumn",
        attribute_properties(make_attribute("schema.orders.id", 0)),
        provenance=provenance,
    )

    schema_type_id = engine.upsert_schema_type(USER_ID, make_orders_schema(), SOURCE_NAME)
    result = engine.remove_schema_type(USER_ID, schema_type_id, SOURCE_NAME, DeleteSemantic.HARD)

    assert orphan_id in result.attribute_ids
    assert engine.find_schema_attribute(USER_ID, "schema.orders.id") is None
