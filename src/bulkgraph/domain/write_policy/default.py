"""Built-in policies: always-create and merge-by-key."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bulkgraph.domain.model import WriteCounter

if TYPE_CHECKING:
    from bulkgraph.domain.model import (
        EdgeHandle,
        EdgeRecord,
        ElementHandle,
        PropertyMap,
        VertexHandle,
        VertexRecord,
    )
    from bulkgraph.domain.output_pipeline.task import TaskContext
    from bulkgraph.domain.ports import GraphStore

log = logging.getLogger(__name__)

DEFAULT_MERGE_KEY = "name"


class DefaultWritePolicy:
    """Always create a new element and copy every source property verbatim."""

    def get_or_create_vertex(
        self,
        vertex: VertexRecord,
        store: GraphStore,
        context: TaskContext,
    ) -> VertexHandle:
        handle = store.create_vertex(hint=vertex.id)
        context.counters.increment(WriteCounter.VERTICES_WRITTEN)
        _copy_properties(
            handle, vertex.properties, store, context, WriteCounter.VERTEX_PROPERTIES_WRITTEN
        )
        return handle

    def get_or_create_edge(
        self,
        edge: EdgeRecord,
        out_vertex: VertexHandle,
        in_vertex: VertexHandle,
        store: GraphStore,
        context: TaskContext,
    ) -> EdgeHandle:
        handle = store.create_edge(out_vertex, in_vertex, edge.label)
        context.counters.increment(WriteCounter.EDGES_WRITTEN)
        _copy_properties(
            handle, edge.properties, store, context, WriteCounter.EDGE_PROPERTIES_WRITTEN
        )
        return handle


@dataclass(slots=True)
class MergeByKeyWritePolicy:
    """Merge into existing store state instead of duplicating it.

    Vertices are matched on the value of ``key``; edges on their endpoints and
    label. A match keeps its existing properties and receives the source
    properties on top, so re-running a load unions property sets. Vertices
    without a value for ``key`` are always created.
    """

    key: str = DEFAULT_MERGE_KEY
    fallback: DefaultWritePolicy = field(default_factory=DefaultWritePolicy)

    def get_or_create_vertex(
        self,
        vertex: VertexRecord,
        store: GraphStore,
        context: TaskContext,
    ) -> VertexHandle:
        value = vertex.properties.get(self.key)
        matches = store.find_vertices(self.key, value) if value is not None else ()
        if not matches:
            return self.fallback.get_or_create_vertex(vertex, store, context)

        if len(matches) > 1:
            log.warning(
                "%d vertices share %s=%r, merging into the first", len(matches), self.key, value
            )
        handle = matches[0]
        context.counters.increment(WriteCounter.VERTICES_RETRIEVED)
        _copy_properties(
            handle, vertex.properties, store, context, WriteCounter.VERTEX_PROPERTIES_WRITTEN
        )
        return handle

    def get_or_create_edge(
        self,
        edge: EdgeRecord,
        out_vertex: VertexHandle,
        in_vertex: VertexHandle,
        store: GraphStore,
        context: TaskContext,
    ) -> EdgeHandle:
        matches = store.find_edges(out_vertex, in_vertex, edge.label)
        if not matches:
            return self.fallback.get_or_create_edge(edge, out_vertex, in_vertex, store, context)

        handle = matches[0]
        _copy_properties(
            handle, edge.properties, store, context, WriteCounter.EDGE_PROPERTIES_WRITTEN
        )
        return handle


def _copy_properties(
    handle: ElementHandle,
    properties: PropertyMap,
    store: GraphStore,
    context: TaskContext,
    counter: WriteCounter,
) -> None:
    for key, value in properties.items():
        store.set_property(handle, key, value)
        context.counters.increment(counter)
