"""Job definitions for the three-phase graph output and a local batch runner.

The output is expressed as two jobs for a map/grouped-reduce substrate:

* the *vertex job* maps partitions of source vertices through
  :class:`VertexWritePhase` and reduces the shuffle, grouped by source vertex
  id, through :class:`ReconcilePhase`;
* the *edge job* maps the reconciled vertices through :class:`EdgeWritePhase`
  and has no reduce stage. Its terminator output is not meant for
  consumption.

Every map task owns one store connection for its lifetime (see
:func:`task_scope`). :class:`LocalBatchRunner` executes the jobs in-process;
other substrates only need to call the task callables.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bulkgraph.domain.model import Phase, WriteCounters
from bulkgraph.domain.write_policy import DefaultWritePolicy, static_policy_factory

from .edge_phase import EdgeWritePhase
from .reconcile import ReconcilePhase
from .task import TaskFailedError, task_scope
from .vertex_phase import VertexWritePhase

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Sequence

    from bulkgraph.domain.model import ShuffleRecord, SourceId, TaggedEnvelope, VertexRecord
    from bulkgraph.domain.ports import GraphStoreFactory
    from bulkgraph.domain.write_policy import WritePolicyFactory

log = logging.getLogger(__name__)


@dataclass(slots=True)
class TaskResult[TOut]:
    """Output records of one task plus the counters it accumulated."""

    output: list[TOut]
    counters: WriteCounters


@dataclass(frozen=True, slots=True)
class MapReduceJob:
    """A map stage and an optional grouped reduce stage.

    ``map_task(partition, records)`` returns its output; when ``reduce_task``
    is set the map output must be ``(key, value)`` pairs, which the substrate
    groups by key before calling ``reduce_task(partition, groups)``.
    """

    name: str
    map_task: Callable[[int, Iterable[Any]], TaskResult[Any]]
    reduce_task: Callable[[int, Iterable[tuple[Any, list[Any]]]], TaskResult[Any]] | None = None


@dataclass(slots=True)
class GraphOutputJob:
    """Materialize vertex records into the store produced by ``store_factory``."""

    store_factory: GraphStoreFactory
    policy_factory: WritePolicyFactory = field(
        default_factory=lambda: static_policy_factory(DefaultWritePolicy())
    )
    vertex_phase: VertexWritePhase = field(default_factory=VertexWritePhase)
    reconcile_phase: ReconcilePhase = field(default_factory=ReconcilePhase)
    edge_phase: EdgeWritePhase = field(default_factory=EdgeWritePhase)

    def write_vertices(
        self, partition: int, vertices: Iterable[VertexRecord]
    ) -> TaskResult[ShuffleRecord]:
        with task_scope(
            Phase.VERTEX_WRITE,
            partition,
            store_factory=self.store_factory,
            policy_factory=self.policy_factory,
        ) as context:
            output = self.vertex_phase.run(vertices, context=context)
        return TaskResult(output=output, counters=context.counters)

    def reconcile_identifiers(
        self, partition: int, groups: Iterable[tuple[SourceId, list[TaggedEnvelope]]]
    ) -> TaskResult[VertexRecord]:
        counters = WriteCounters()
        try:
            output = self.reconcile_phase.run(groups, counters=counters)
        except Exception as exc:
            log.exception("%s task for partition %d failed", Phase.RECONCILE.value, partition)
            raise TaskFailedError(
                phase=Phase.RECONCILE, partition=partition, counters=counters
            ) from exc
        return TaskResult(output=output, counters=counters)

    def write_edges(
        self, partition: int, vertices: Iterable[VertexRecord]
    ) -> TaskResult[VertexRecord]:
        with task_scope(
            Phase.EDGE_WRITE,
            partition,
            store_factory=self.store_factory,
            policy_factory=self.policy_factory,
        ) as context:
            output = self.edge_phase.run(vertices, context=context)
        return TaskResult(output=output, counters=context.counters)

    def vertex_job(self) -> MapReduceJob:
        return MapReduceJob(
            name="graph-output-vertices",
            map_task=self.write_vertices,
            reduce_task=self.reconcile_identifiers,
        )

    def edge_job(self) -> MapReduceJob:
        return MapReduceJob(name="graph-output-edges", map_task=self.write_edges)

    def jobs(self) -> tuple[MapReduceJob, ...]:
        return (self.vertex_job(), self.edge_job())


@dataclass(slots=True)
class RunResult:
    """Outcome of a local pipeline run."""

    counters: WriteCounters
    output: list[Any]
    counters_by_job: dict[str, WriteCounters] = field(default_factory=dict[str, WriteCounters])


@dataclass(slots=True)
class LocalBatchRunner:
    """Run :class:`MapReduceJob` chains in-process.

    One map task per input partition, optionally on a thread pool of
    ``max_workers``. The shuffle groups map output by key and spreads the
    groups over ``reduce_partitions`` reduce tasks (defaults to the number of
    map partitions). Task counters are merged once each task completes,
    including failed tasks whose counters travel on :class:`TaskFailedError`.
    """

    max_workers: int = 1
    reduce_partitions: int | None = None

    def run(self, jobs: Sequence[MapReduceJob], partitions: Sequence[Iterable[Any]]) -> RunResult:
        total = WriteCounters()
        by_job: dict[str, WriteCounters] = {}
        current: list[list[Any]] = [list(partition) for partition in partitions]

        for job in jobs:
            job_counters = WriteCounters()
            by_job[job.name] = job_counters
            try:
                mapped = self._run_tasks(job.map_task, current, job_counters)
                if job.reduce_task is not None:
                    groups = _shuffle(mapped, self.reduce_partitions or max(len(current), 1))
                    current = self._run_tasks(job.reduce_task, groups, job_counters)
                else:
                    current = mapped
            finally:
                total.merge(job_counters)
            log.info("Finished %s: %s", job.name, _format_counters(job_counters))

        output = [record for partition in current for record in partition]
        return RunResult(counters=total, output=output, counters_by_job=by_job)

    def _run_tasks(
        self,
        task: Callable[[int, Iterable[Any]], TaskResult[Any]],
        partitions: Sequence[Iterable[Any]],
        counters: WriteCounters,
    ) -> list[list[Any]]:
        if self.max_workers <= 1:
            return [
                self._collect(task, index, partition, counters)
                for index, partition in enumerate(partitions)
            ]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(task, index, partition)
                for index, partition in enumerate(partitions)
            ]
            outputs: list[list[Any]] = []
            failure: TaskFailedError | None = None
            for future in futures:
                try:
                    result = future.result()
                except TaskFailedError as exc:
                    counters.merge(exc.counters)
                    failure = failure or exc
                    continue
                counters.merge(result.counters)
                outputs.append(result.output)
        if failure is not None:
            raise failure
        return outputs

    @staticmethod
    def _collect(
        task: Callable[[int, Iterable[Any]], TaskResult[Any]],
        index: int,
        partition: Iterable[Any],
        counters: WriteCounters,
    ) -> list[Any]:
        try:
            result = task(index, partition)
        except TaskFailedError as exc:
            counters.merge(exc.counters)
            raise
        counters.merge(result.counters)
        return result.output


def run_graph_output(
    job: GraphOutputJob,
    partitions: Sequence[Iterable[VertexRecord]],
    *,
    runner: LocalBatchRunner | None = None,
) -> RunResult:
    """Run both jobs of ``job`` over ``partitions`` with a local runner."""

    active_runner = runner or LocalBatchRunner()
    result = active_runner.run(job.jobs(), partitions)
    log.info("Graph output finished: %s", _format_counters(result.counters))
    return result


def _shuffle(
    mapped: Iterable[Iterable[tuple[Hashable, Any]]], partitions: int
) -> list[list[tuple[Hashable, list[Any]]]]:
    grouped: defaultdict[Hashable, list[Any]] = defaultdict(list)
    for partition in mapped:
        for key, value in partition:
            grouped[key].append(value)

    buckets: list[list[tuple[Hashable, list[Any]]]] = [[] for _ in range(partitions)]
    for key, values in grouped.items():
        buckets[hash(key) % partitions].append((key, values))
    return buckets


def _format_counters(counters: WriteCounters) -> str:
    return ", ".join(f"{name}={value}" for name, value in counters.as_dict().items())
