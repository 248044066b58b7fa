"""Phase 3: write every outgoing edge between resolved target vertices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bulkgraph.domain.model import Direction, Phase, VertexHandle, VertexRecord, WriteCounter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkgraph.domain.model import TargetId
    from bulkgraph.domain.output_pipeline.task import TaskContext

log = logging.getLogger(__name__)


@dataclass(slots=True)
class EdgeWritePhase:
    """Map stage consuming reconciled vertices.

    Every input yields exactly one terminator record; the stage's output
    only marks that the vertex's edges have been handled.
    """

    phase: Phase = Phase.EDGE_WRITE

    def map(self, vertex: VertexRecord, *, context: TaskContext) -> VertexRecord:
        out_vertex = _resolve(vertex.target_id, context)
        if out_vertex is None:
            log.warning(
                "No source vertex: source_id=%s target_id=%s", vertex.id, vertex.target_id
            )
            context.counters.increment(WriteCounter.NULL_VERTICES_IGNORED)
            return VertexRecord.terminator()

        identifier_map = vertex.identifier_map or {}
        for edge in vertex.edges(Direction.OUT):
            in_id = edge.vertex_id(Direction.IN)
            other_id = identifier_map.get(in_id)
            in_vertex = _resolve(other_id, context)
            if in_vertex is None:
                log.warning("No target vertex: source_id=%s target_id=%s", in_id, other_id)
                context.counters.increment(WriteCounter.NULL_VERTEX_EDGES_IGNORED)
                continue
            context.policy.get_or_create_edge(
                edge, out_vertex, in_vertex, context.store, context
            )

        return VertexRecord.terminator()

    def run(self, vertices: Iterable[VertexRecord], *, context: TaskContext) -> list[VertexRecord]:
        return [self.map(vertex, context=context) for vertex in vertices]


def _resolve(target_id: TargetId | None, context: TaskContext) -> VertexHandle | None:
    if target_id is None:
        return None
    handle = VertexHandle(target_id)
    if context.store.get_vertex(handle) is None:
        return None
    return handle
