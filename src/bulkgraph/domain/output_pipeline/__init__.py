"""Three-phase output pipeline: vertex write, identifier reconcile, edge write."""

from __future__ import annotations

from .edge_phase import EdgeWritePhase
from .orchestrator import (
    GraphOutputJob,
    LocalBatchRunner,
    MapReduceJob,
    RunResult,
    TaskResult,
    run_graph_output,
)
from .reconcile import DuplicateVertexError, ReconcilePhase, reconcile
from .task import TaskContext, TaskFailedError, task_scope
from .vertex_phase import VertexWritePhase

__all__ = [
    "DuplicateVertexError",
    "EdgeWritePhase",
    "GraphOutputJob",
    "LocalBatchRunner",
    "MapReduceJob",
    "ReconcilePhase",
    "RunResult",
    "TaskContext",
    "TaskFailedError",
    "TaskResult",
    "VertexWritePhase",
    "reconcile",
    "run_graph_output",
    "task_scope",
]
