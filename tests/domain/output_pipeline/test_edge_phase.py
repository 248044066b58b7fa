from __future__ import annotations

from bulkgraph.adapters.memory import InMemoryGraph, InMemoryGraphStore
from bulkgraph.domain.model import Phase, VertexRecord, WriteCounter
from bulkgraph.domain.output_pipeline import EdgeWritePhase
from tests.helpers.graphs import make_context, vertex


def _reconciled(
    source_id: int,
    target_id: int,
    out: tuple[tuple[str, int], ...],
    ids: dict[int, int],
) -> VertexRecord:
    record = vertex(source_id, out=out)
    record.capture_target_id(target_id)
    record.identifier_map = dict(ids)
    return record


def test_map_writes_edges_between_resolved_vertices() -> None:
    graph = InMemoryGraph()
    store = InMemoryGraphStore(graph)
    marko, vadas = store.create_vertex(), store.create_vertex()
    context = make_context(store, phase=Phase.EDGE_WRITE)
    source = _reconciled(1, marko.id, (("knows", 2),), {2: vadas.id})  # type: ignore[arg-type]
    source.out_edges[0].properties["weight"] = 0.5

    output = EdgeWritePhase().map(source, context=context)

    assert output.is_terminator
    (edge,) = graph.edges.values()
    assert (edge.out_id, edge.in_id, edge.label) == (marko.id, vadas.id, "knows")
    assert edge.properties == {"weight": 0.5}
    assert context.counters[WriteCounter.EDGES_WRITTEN] == 1
    assert context.counters[WriteCounter.EDGE_PROPERTIES_WRITTEN] == 1


def test_missing_neighbour_is_counted_once_and_skipped() -> None:
    graph = InMemoryGraph()
    store = InMemoryGraphStore(graph)
    marko, vadas = store.create_vertex(), store.create_vertex()
    context = make_context(store, phase=Phase.EDGE_WRITE)
    source = _reconciled(
        1, marko.id, (("knows", 2), ("knows", 99)), {2: vadas.id}  # type: ignore[arg-type]
    )

    EdgeWritePhase().map(source, context=context)

    assert len(graph.edges) == 1
    assert context.counters[WriteCounter.NULL_VERTEX_EDGES_IGNORED] == 1
    assert context.counters[WriteCounter.NULL_VERTICES_IGNORED] == 0


def test_neighbour_deleted_from_store_is_ignored() -> None:
    graph = InMemoryGraph()
    store = InMemoryGraphStore(graph)
    marko, vadas = store.create_vertex(), store.create_vertex()
    del graph.vertices[vadas.id]  # type: ignore[arg-type]
    context = make_context(store, phase=Phase.EDGE_WRITE)

    EdgeWritePhase().map(
        _reconciled(1, marko.id, (("knows", 2),), {2: vadas.id}),  # type: ignore[arg-type]
        context=context,
    )

    assert graph.edges == {}
    assert context.counters[WriteCounter.NULL_VERTEX_EDGES_IGNORED] == 1


def test_unresolvable_source_skips_every_edge() -> None:
    graph = InMemoryGraph()
    store = InMemoryGraphStore(graph)
    vadas = store.create_vertex()
    context = make_context(store, phase=Phase.EDGE_WRITE)

    output = EdgeWritePhase().map(
        _reconciled(
            1, 12345, (("knows", 2), ("knows", 3)), {2: vadas.id}  # type: ignore[arg-type]
        ),
        context=context,
    )

    assert output.is_terminator
    assert graph.edges == {}
    assert context.counters[WriteCounter.NULL_VERTICES_IGNORED] == 1
    assert context.counters[WriteCounter.NULL_VERTEX_EDGES_IGNORED] == 0


def test_run_emits_one_terminator_per_vertex() -> None:
    store = InMemoryGraphStore(InMemoryGraph())
    first, second = store.create_vertex(), store.create_vertex()
    context = make_context(store, phase=Phase.EDGE_WRITE)

    output = EdgeWritePhase().run(
        [
            _reconciled(1, first.id, (), {}),  # type: ignore[arg-type]
            _reconciled(2, second.id, (("knows", 1),), {1: first.id}),  # type: ignore[arg-type]
        ],
        context=context,
    )

    assert len(output) == 2
    assert all(record.is_terminator for record in output)
