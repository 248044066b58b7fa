"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from bulkgraph.adapters.graphson import read_elements, read_vertices
from bulkgraph.adapters.sqlalchemy import is_started, open_graph_store, startup
from bulkgraph.config import LoaderConfig, WritePolicyKind, get_loader_config
from bulkgraph.domain.output_pipeline import GraphOutputJob, LocalBatchRunner, run_graph_output
from bulkgraph.domain.source_graph import partition_vertices
from bulkgraph.domain.write_policy import (
    DefaultWritePolicy,
    MergeByKeyWritePolicy,
    hook_policy_factory,
    load_policy_hook,
    static_policy_factory,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from bulkgraph.domain.model import VertexRecord
    from bulkgraph.domain.output_pipeline import RunResult
    from bulkgraph.domain.ports import GraphStoreFactory
    from bulkgraph.domain.write_policy import WritePolicyFactory


log = getLogger(__name__)


def build_policy_factory(config: LoaderConfig) -> WritePolicyFactory:
    """Translate the configured policy kind into a per-task policy factory."""

    match config.write_policy:
        case WritePolicyKind.DEFAULT:
            return static_policy_factory(DefaultWritePolicy())
        case WritePolicyKind.MERGE:
            return static_policy_factory(MergeByKeyWritePolicy(key=config.merge_key))
        case WritePolicyKind.HOOK:
            if config.policy_hook is None:
                raise ValueError("The hook write policy needs a policy hook reference")
            return hook_policy_factory(load_policy_hook(config.policy_hook))


def materialize_graph(
    vertices: Sequence[VertexRecord],
    *,
    store_factory: GraphStoreFactory,
    config: LoaderConfig | None = None,
    policy_factory: WritePolicyFactory | None = None,
) -> RunResult:
    """Write ``vertices`` into the stores produced by ``store_factory``.

    ``policy_factory`` defaults to the one described by ``config``.
    """

    effective_config = config or get_loader_config()
    job = GraphOutputJob(
        store_factory=store_factory,
        policy_factory=policy_factory or build_policy_factory(effective_config),
    )
    runner = LocalBatchRunner(max_workers=effective_config.max_workers)
    partitions = partition_vertices(vertices, effective_config.partitions)
    log.info(
        "Starting graph output: vertices=%d, partitions=%d, workers=%d, policy=%s",
        len(vertices),
        effective_config.partitions,
        effective_config.max_workers,
        effective_config.write_policy,
    )
    return run_graph_output(job, partitions, runner=runner)


def load_graph(
    path: Path,
    *,
    config: LoaderConfig | None = None,
    policy_factory: WritePolicyFactory | None = None,
    elements: bool = False,
    store_factory: GraphStoreFactory | None = None,
    database_uri: str | None = None,
) -> RunResult:
    """Load a JSON-lines graph file into the configured graph store.

    ``elements`` selects the element-list format instead of one vertex per
    line. Without an explicit ``store_factory`` the SQLAlchemy adapter is
    started (once) and every task opens its own session.
    """

    vertices = read_elements(path) if elements else read_vertices(path)
    if store_factory is None:
        if not is_started():
            startup(database_uri=database_uri)
        store_factory = open_graph_store
    return materialize_graph(
        vertices, store_factory=store_factory, config=config, policy_factory=policy_factory
    )
