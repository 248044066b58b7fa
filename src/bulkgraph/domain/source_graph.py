"""Helpers preparing source vertex streams for the output pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bulkgraph.domain.model import EdgeRecord, VertexRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkgraph.domain.model import SourceId


def assemble_vertices(elements: Iterable[VertexRecord | EdgeRecord]) -> list[VertexRecord]:
    """Build adjacency-complete vertices from a flat stream of elements.

    Repeated vertices merge their properties (later values win per key).
    Each edge becomes an outgoing edge of its tail and an incoming edge of its
    head; an endpoint without a vertex element still gets a bare vertex.
    Vertices are returned in order of first appearance.
    """

    vertices: dict[SourceId, VertexRecord] = {}

    def vertex_for(source_id: SourceId) -> VertexRecord:
        if source_id not in vertices:
            vertices[source_id] = VertexRecord(id=source_id)
        return vertices[source_id]

    for element in elements:
        match element:
            case VertexRecord():
                target = vertex_for(element.id)
                target.properties.update(element.properties)
                target.out_edges.extend(edge.copy() for edge in element.out_edges)
                target.in_edges.extend(edge.copy() for edge in element.in_edges)
            case EdgeRecord():
                vertex_for(element.out_id).out_edges.append(element.copy())
                vertex_for(element.in_id).in_edges.append(element.copy())

    return list(vertices.values())


def partition_vertices(
    vertices: Iterable[VertexRecord], partitions: int
) -> list[list[VertexRecord]]:
    """Spread vertices over ``partitions`` buckets by source id."""

    if partitions < 1:
        raise ValueError(f"partitions must be >= 1, got {partitions}")
    buckets: list[list[VertexRecord]] = [[] for _ in range(partitions)]
    for vertex in vertices:
        buckets[vertex.id % partitions].append(vertex)
    return buckets
