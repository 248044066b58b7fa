"""SQLAlchemy adapter package for bulkgraph."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    edge_property_table,
    edge_table,
    metadata,
    vertex_property_table,
    vertex_table,
)
from .store import SqlAlchemyGraphStore
from .unit_of_work import (
    StartupError,
    configured_engine,
    is_started,
    open_graph_store,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyGraphStore",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "edge_property_table",
    "edge_table",
    "is_started",
    "metadata",
    "open_graph_store",
    "shutdown",
    "startup",
    "vertex_property_table",
    "vertex_table",
]

