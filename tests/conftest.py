from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bulkgraph.adapters.memory import InMemoryGraph
from bulkgraph.adapters.sqlalchemy import SqlAlchemyGraphStore, create_all_tables
from bulkgraph.adapters.sqlalchemy.unit_of_work import open_graph_store, shutdown, startup

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # One shared connection, so every session sees the same in-memory database.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_store_factory(
    sqlite_engine: Engine,
    sqlite_session: Session,
) -> Iterator[Callable[[], SqlAlchemyGraphStore]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield open_graph_store
    finally:
        # Close the shared session before shutdown() disposes the StaticPool connection.
        sqlite_session.close()
        shutdown()


@pytest.fixture
def memory_graph() -> InMemoryGraph:
    return InMemoryGraph()
