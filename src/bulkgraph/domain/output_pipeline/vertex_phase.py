"""Phase 1: write every vertex and announce its target id to its neighbours."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bulkgraph.domain.model import Direction, Phase, ShellRecord, TaggedEnvelope

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkgraph.domain.model import ShuffleRecord, VertexRecord
    from bulkgraph.domain.output_pipeline.task import TaskContext


@dataclass(slots=True)
class VertexWritePhase:
    """Map stage writing vertices through the task's write policy.

    For each vertex the output holds one shell per incoming edge, keyed by
    the edge's tail so the tail's reducer learns this vertex's target id,
    followed by the stripped vertex itself keyed by its own id.
    """

    phase: Phase = Phase.VERTEX_WRITE

    def map(self, vertex: VertexRecord, *, context: TaskContext) -> list[ShuffleRecord]:
        handle = context.policy.get_or_create_vertex(vertex, context.store, context)

        shell = TaggedEnvelope.of_shell(ShellRecord(source_id=vertex.id, target_id=handle.id))
        emitted: list[ShuffleRecord] = [
            (edge.vertex_id(Direction.OUT), shell) for edge in vertex.edges(Direction.IN)
        ]

        vertex.capture_target_id(handle.id)
        vertex.drop_edges(Direction.IN)
        emitted.append((vertex.id, TaggedEnvelope.of_vertex(vertex)))
        return emitted

    def run(self, vertices: Iterable[VertexRecord], *, context: TaskContext) -> list[ShuffleRecord]:
        emitted: list[ShuffleRecord] = []
        for vertex in vertices:
            emitted.extend(self.map(vertex, context=context))
        return emitted
