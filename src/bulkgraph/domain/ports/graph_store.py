"""Port for the target graph store the pipeline materializes into."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bulkgraph.domain.model import PropertyMap, PropertyValue

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkgraph.domain.model import EdgeHandle, ElementHandle, VertexHandle


class GraphStoreError(RuntimeError):
    """Raised by store adapters for operations the store cannot satisfy."""


@dataclass(frozen=True, slots=True)
class StoredElement[THandle: ElementHandle]:
    """Snapshot of a vertex or edge as currently held by the store."""

    handle: THandle
    properties: PropertyMap = field(default_factory=dict[str, PropertyValue])


@runtime_checkable
class GraphStore(Protocol):
    """One task's connection to the target graph store.

    A connection is never shared between tasks. Transaction methods are only
    called when :attr:`supports_transactions` is true.
    """

    @property
    def supports_transactions(self) -> bool: ...

    def create_vertex(self, hint: int | None = None) -> VertexHandle: ...

    def get_vertex(self, handle: VertexHandle) -> StoredElement[VertexHandle] | None: ...

    def create_edge(
        self, out_vertex: VertexHandle, in_vertex: VertexHandle, label: str
    ) -> EdgeHandle: ...

    def set_property(self, handle: ElementHandle, key: str, value: PropertyValue) -> None: ...

    def get_properties(self, handle: ElementHandle) -> PropertyMap: ...

    def find_vertices(self, key: str, value: PropertyValue) -> Sequence[VertexHandle]: ...

    def find_edges(
        self, out_vertex: VertexHandle, in_vertex: VertexHandle, label: str
    ) -> Sequence[EdgeHandle]: ...

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def shutdown(self) -> None: ...


type GraphStoreFactory = Callable[[], GraphStore]
