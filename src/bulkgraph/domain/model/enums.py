"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Direction(StrEnum):
    OUT = "out"
    IN = "in"


class EnvelopeTag(StrEnum):
    """Discriminator of the shuffle payload."""

    VERTEX = "v"
    SHELL = "s"


class WriteCounter(StrEnum):
    VERTICES_RETRIEVED = "vertices_retrieved"
    VERTICES_WRITTEN = "vertices_written"
    VERTEX_PROPERTIES_WRITTEN = "vertex_properties_written"
    EDGES_WRITTEN = "edges_written"
    EDGE_PROPERTIES_WRITTEN = "edge_properties_written"
    NULL_VERTEX_EDGES_IGNORED = "null_vertex_edges_ignored"
    NULL_VERTICES_IGNORED = "null_vertices_ignored"
    SUCCESSFUL_TRANSACTIONS = "successful_transactions"
    FAILED_TRANSACTIONS = "failed_transactions"


class Phase(StrEnum):
    VERTEX_WRITE = "vertex_write"
    RECONCILE = "reconcile"
    EDGE_WRITE = "edge_write"
