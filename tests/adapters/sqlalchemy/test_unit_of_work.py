from __future__ import annotations

import pytest
from sqlalchemy import inspect

from bulkgraph.adapters.sqlalchemy import (
    SqlAlchemyGraphStore,
    StartupError,
    configured_engine,
    is_started,
    open_graph_store,
    shutdown,
    startup,
)


@pytest.fixture(autouse=True)
def _reset_adapter() -> None:
    shutdown()


def test_open_graph_store_requires_startup() -> None:
    with pytest.raises(StartupError, match="not initialised"):
        open_graph_store()


def test_startup_creates_tables_and_opens_stores() -> None:
    startup(database_uri="sqlite+pysqlite:///:memory:")
    try:
        engine = configured_engine()
        assert is_started()
        assert engine is not None
        assert {"vertex", "vertex_property", "edge", "edge_property"} <= set(
            inspect(engine).get_table_names()
        )
        store = open_graph_store()
        assert isinstance(store, SqlAlchemyGraphStore)
        store.shutdown()
    finally:
        shutdown()

    assert not is_started()
    assert configured_engine() is None


def test_startup_twice_needs_force(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    startup()
    try:
        with pytest.raises(StartupError, match="already initialised"):
            startup()
        startup(force=True)
        assert is_started()
    finally:
        shutdown()
