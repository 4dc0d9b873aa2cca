from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from schemasync.adapters.sqlalchemy import (
    SqlAlchemyEntityGraphStore,
    SqlAlchemyExternalSourceRegistry,
    start_mappers,
)
from schemasync.adapters.sqlalchemy.migrations import upgrade_head
from schemasync.adapters.sqlalchemy.session import shutdown, startup
from tests.helpers.store import (
    SOURCE_NAME,
    EngineHarness,
    FakeExternalSourceRegistry,
    InMemoryEntityGraphStore,
    RecordingAuthorizer,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def memory_store() -> InMemoryEntityGraphStore:
    return InMemoryEntityGraphStore()


@pytest.fixture
def fake_registry() -> FakeExternalSourceRegistry:
    return FakeExternalSourceRegistry()


@pytest.fixture
def authorizer() -> RecordingAuthorizer:
    return RecordingAuthorizer()


@pytest.fixture
def harness(
    memory_store: InMemoryEntityGraphStore,
    fake_registry: FakeExternalSourceRegistry,
    authorizer: RecordingAuthorizer,
) -> EngineHarness:
    return EngineHarness(store=memory_store, registry=fake_registry, authorizer=authorizer)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)


@pytest.fixture
def sql_store(sqlite_session_factory: sessionmaker[Session]) -> SqlAlchemyEntityGraphStore:
    return SqlAlchemyEntityGraphStore(sqlite_session_factory)


@pytest.fixture
def sql_registry(
    sqlite_session_factory: sessionmaker[Session],
) -> SqlAlchemyExternalSourceRegistry:
    registry = SqlAlchemyExternalSourceRegistry(sqlite_session_factory)
    registry.register(SOURCE_NAME)
    return registry


@pytest.fixture
def started_adapter(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()
