"""Ports the pipeline consumes."""

from __future__ import annotations

from .graph_store import GraphStore, GraphStoreError, GraphStoreFactory, StoredElement

__all__ = [
    "GraphStore",
    "GraphStoreError",
    "GraphStoreFactory",
    "StoredElement",
]
