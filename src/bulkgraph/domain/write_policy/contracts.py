"""Get-or-create contracts shared by every write policy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from bulkgraph.domain.model import EdgeHandle, EdgeRecord, Phase, VertexHandle, VertexRecord
    from bulkgraph.domain.output_pipeline.task import TaskContext
    from bulkgraph.domain.ports import GraphStore


class WritePolicyError(RuntimeError):
    """Raised when a write policy fails while evaluating a vertex or edge."""


class MissingOperationError(WritePolicyError):
    """Raised by a policy hook to signal that it does not provide an operation."""


class PolicyHookLoadError(WritePolicyError):
    """Raised when a policy hook reference cannot be imported."""


class WritePolicy(Protocol):
    """Decide per element whether to insert fresh or merge into the store."""

    def get_or_create_vertex(
        self,
        vertex: VertexRecord,
        store: GraphStore,
        context: TaskContext,
    ) -> VertexHandle: ...

    def get_or_create_edge(
        self,
        edge: EdgeRecord,
        out_vertex: VertexHandle,
        in_vertex: VertexHandle,
        store: GraphStore,
        context: TaskContext,
    ) -> EdgeHandle: ...


# Called once at every task setup; the phase tells hook-backed policies
# which operation to probe.
type WritePolicyFactory = Callable[[Phase], WritePolicy]
