"""Non-transactional in-process graph store.

:class:`InMemoryGraph` is the shared "database"; every task opens its own
:class:`InMemoryGraphStore` connection onto it. Writes are visible
immediately and cannot be rolled back.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bulkgraph.domain.model import EdgeHandle, PropertyValue, VertexHandle
from bulkgraph.domain.ports import GraphStoreError, StoredElement

if TYPE_CHECKING:
    from collections.abc import Iterator

    from bulkgraph.domain.model import ElementHandle, PropertyMap


@dataclass(slots=True)
class StoredEdge:
    out_id: int
    in_id: int
    label: str
    properties: PropertyMap = field(default_factory=dict[str, PropertyValue])


@dataclass(slots=True)
class InMemoryGraph:
    vertices: dict[int, PropertyMap] = field(default_factory=dict[int, "PropertyMap"])
    edges: dict[int, StoredEdge] = field(default_factory=dict[int, StoredEdge])
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1))
    _lock: threading.RLock = field(default_factory=threading.RLock)

    def connect(self) -> InMemoryGraphStore:
        return InMemoryGraphStore(self)

    def next_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def vertices_with(self, key: str, value: PropertyValue) -> list[int]:
        with self._lock:
            return [
                vertex_id
                for vertex_id, properties in self.vertices.items()
                if key in properties and _same_value(properties[key], value)
            ]

    def edges_between(self, out_id: int, in_id: int, label: str) -> list[int]:
        with self._lock:
            return [
                edge_id
                for edge_id, edge in self.edges.items()
                if edge.out_id == out_id and edge.in_id == in_id and edge.label == label
            ]


def _same_value(stored: PropertyValue, wanted: PropertyValue) -> bool:
    # 1, 1.0 and True compare equal in Python but are distinct property values.
    return type(stored) is type(wanted) and stored == wanted


class InMemoryGraphStore:
    """One task's connection to an :class:`InMemoryGraph`."""

    def __init__(self, graph: InMemoryGraph) -> None:
        self.graph = graph
        self._closed = False

    @property
    def supports_transactions(self) -> bool:
        return False

    def create_vertex(self, hint: int | None = None) -> VertexHandle:
        _ = hint  # ids are always assigned by the store
        self._ensure_open()
        vertex_id = self.graph.next_id()
        with self.graph._lock:  # noqa: SLF001
            self.graph.vertices[vertex_id] = {}
        return VertexHandle(vertex_id)

    def get_vertex(self, handle: VertexHandle) -> StoredElement[VertexHandle] | None:
        self._ensure_open()
        with self.graph._lock:  # noqa: SLF001
            properties = self.graph.vertices.get(handle.id)  # type: ignore[arg-type]
            if properties is None:
                return None
            return StoredElement(handle=handle, properties=dict(properties))

    def create_edge(
        self, out_vertex: VertexHandle, in_vertex: VertexHandle, label: str
    ) -> EdgeHandle:
        self._ensure_open()
        edge_id = self.graph.next_id()
        with self.graph._lock:  # noqa: SLF001
            for endpoint in (out_vertex, in_vertex):
                if endpoint.id not in self.graph.vertices:
                    raise GraphStoreError(f"Unknown vertex {endpoint.id}")
            self.graph.edges[edge_id] = StoredEdge(
                out_id=out_vertex.id,  # type: ignore[arg-type]
                in_id=in_vertex.id,  # type: ignore[arg-type]
                label=label,
            )
        return EdgeHandle(edge_id)

    def set_property(self, handle: ElementHandle, key: str, value: PropertyValue) -> None:
        self._ensure_open()
        with self.graph._lock:  # noqa: SLF001
            self._properties_of(handle)[key] = value

    def get_properties(self, handle: ElementHandle) -> PropertyMap:
        self._ensure_open()
        with self.graph._lock:  # noqa: SLF001
            return dict(self._properties_of(handle))

    def find_vertices(self, key: str, value: PropertyValue) -> list[VertexHandle]:
        self._ensure_open()
        return [VertexHandle(vertex_id) for vertex_id in self.graph.vertices_with(key, value)]

    def find_edges(
        self, out_vertex: VertexHandle, in_vertex: VertexHandle, label: str
    ) -> list[EdgeHandle]:
        self._ensure_open()
        return [
            EdgeHandle(edge_id)
            for edge_id in self.graph.edges_between(
                out_vertex.id,  # type: ignore[arg-type]
                in_vertex.id,  # type: ignore[arg-type]
                label,
            )
        ]

    def begin(self) -> None:
        raise GraphStoreError("InMemoryGraphStore does not support transactions")

    def commit(self) -> None:
        raise GraphStoreError("InMemoryGraphStore does not support transactions")

    def rollback(self) -> None:
        raise GraphStoreError("InMemoryGraphStore does not support transactions")

    def shutdown(self) -> None:
        self._closed = True

    def _properties_of(self, handle: ElementHandle) -> PropertyMap:
        if isinstance(handle, VertexHandle):
            properties = self.graph.vertices.get(handle.id)  # type: ignore[arg-type]
        else:
            edge = self.graph.edges.get(handle.id)  # type: ignore[arg-type]
            properties = edge.properties if edge is not None else None
        if properties is None:
            raise GraphStoreError(f"Unknown element {handle}")
        return properties

    def _ensure_open(self) -> None:
        if self._closed:
            raise GraphStoreError("Store connection has been shut down")


if TYPE_CHECKING:
    from bulkgraph.domain.ports import GraphStore

    _store_check: GraphStore = InMemoryGraphStore(InMemoryGraph())
