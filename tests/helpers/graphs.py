"""Sample source graphs and store fakes shared by the pipeline tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkgraph.adapters.memory import InMemoryGraph, InMemoryGraphStore
from bulkgraph.domain.model import Direction, Phase, VertexRecord, WriteCounters
from bulkgraph.domain.output_pipeline import TaskContext
from bulkgraph.domain.write_policy import DefaultWritePolicy

if TYPE_CHECKING:
    from bulkgraph.domain.model import PropertyMap, VertexHandle
    from bulkgraph.domain.ports import GraphStore
    from bulkgraph.domain.write_policy import WritePolicy


def vertex(
    source_id: int,
    name: str | None = None,
    *,
    out: tuple[tuple[str, int], ...] = (),
    inc: tuple[tuple[str, int], ...] = (),
    **properties: object,
) -> VertexRecord:
    """Build a vertex with ``(label, other_id)`` adjacency on both sides."""

    props: PropertyMap = dict(properties)  # type: ignore[arg-type]
    if name is not None:
        props["name"] = name
    record = VertexRecord(id=source_id, properties=props)
    for label, other_id in out:
        record.add_edge(Direction.OUT, label, other_id)
    for label, other_id in inc:
        record.add_edge(Direction.IN, label, other_id)
    return record


def works_with_graph() -> list[VertexRecord]:
    """marko, stephen and vadas with 1->2, 1->3 and 2->3 ``worksWith`` edges."""

    marko = vertex(1, "marko", out=(("worksWith", 2), ("worksWith", 3)))
    stephen = vertex(2, "stephen", out=(("worksWith", 3),), inc=(("worksWith", 1),))
    vadas = vertex(3, "vadas", inc=(("worksWith", 1), ("worksWith", 2)))
    marko.out_edges[0].properties["weight"] = 0.5
    stephen.in_edges[0].properties["weight"] = 0.5
    return [marko, stephen, vadas]


def tinkerpop_modern() -> list[VertexRecord]:
    """The six-vertex TinkerPop "modern" sample graph."""

    return [
        vertex(
            1,
            "marko",
            age=29,
            out=(("knows", 2), ("knows", 4), ("created", 3)),
        ),
        vertex(2, "vadas", age=27, inc=(("knows", 1),)),
        vertex(
            3,
            "lop",
            lang="java",
            inc=(("created", 1), ("created", 4), ("created", 6)),
        ),
        vertex(
            4,
            "josh",
            age=32,
            out=(("created", 5), ("created", 3)),
            inc=(("knows", 1),),
        ),
        vertex(5, "ripple", lang="java", inc=(("created", 4),)),
        vertex(6, "peter", age=35, out=(("created", 3),)),
    ]


def edge_triples(graph: InMemoryGraph) -> list[tuple[str, str, str]]:
    """Return ``(out name, label, in name)`` for every stored edge, sorted."""

    return sorted(
        (
            str(graph.vertices[edge.out_id].get("name")),
            edge.label,
            str(graph.vertices[edge.in_id].get("name")),
        )
        for edge in graph.edges.values()
    )


def make_context(
    store: GraphStore | None = None,
    *,
    phase: Phase = Phase.VERTEX_WRITE,
    policy: WritePolicy | None = None,
) -> TaskContext:
    return TaskContext(
        phase=phase,
        partition=0,
        store=store or InMemoryGraphStore(InMemoryGraph()),
        policy=policy or DefaultWritePolicy(),
        counters=WriteCounters(),
    )


class RecordingTransactionalStore(InMemoryGraphStore):
    """In-memory store pretending to be transactional, recording lifecycle calls.

    ``fail_on`` names a lifecycle or write method that raises once reached.
    """

    def __init__(self, graph: InMemoryGraph | None = None, *, fail_on: str | None = None) -> None:
        super().__init__(graph or InMemoryGraph())
        self.calls: list[str] = []
        self.fail_on = fail_on

    @property
    def supports_transactions(self) -> bool:
        return True

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"{name} failed")

    def create_vertex(self, hint: int | None = None) -> VertexHandle:
        self._record("create_vertex")
        return super().create_vertex(hint)

    def begin(self) -> None:
        self._record("begin")

    def commit(self) -> None:
        self._record("commit")

    def rollback(self) -> None:
        self._record("rollback")

    def shutdown(self) -> None:
        self._record("shutdown")
        super().shutdown()
