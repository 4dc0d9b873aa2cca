from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.engine import Engine  # noqa: TC002

from schemasync.adapters.sqlalchemy import session
from schemasync.adapters.sqlalchemy.session import StartupError


def test_store_requires_startup() -> None:
    session.shutdown()

    with pytest.raises(StartupError):
        session.build_entity_graph_store()


def test_startup_runs_migrations(started_adapter: Engine) -> None:
    tables = set(inspect(started_adapter).get_table_names())

    assert {"external_source", "entity", "entity_relationship", "alembic_version"} <= tables
    assert session.is_started()
    assert session.configured_engine() is started_adapter


def test_second_startup_requires_force(started_adapter: Engine) -> None:
    with pytest.raises(StartupError):
        session.startup(engine=started_adapter)


def test_partial_unique_index_is_created(started_adapter: Engine) -> None:
    indexes = {index["name"]: index for index in inspect(started_adapter).get_indexes("entity")}

    assert indexes["uq_entity_active_qualified_name"]["unique"]


def test_built_adapters_share_the_session_factory(started_adapter: Engine) -> None:
    _ = started_adapter
    store = session.build_entity_graph_store()
    registry = session.build_external_source_registry()

    assert store.session_factory is registry.session_factory is session.session_factory()
