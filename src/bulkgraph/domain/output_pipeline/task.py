"""Per-task state and the transactional task lifecycle."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bulkgraph.domain.model import WriteCounter, WriteCounters

if TYPE_CHECKING:
    from collections.abc import Iterator

    from bulkgraph.domain.model import Phase
    from bulkgraph.domain.ports import GraphStore, GraphStoreFactory
    from bulkgraph.domain.write_policy import WritePolicy, WritePolicyFactory

log = logging.getLogger(__name__)


class TaskFailedError(RuntimeError):
    """A task attempt aborted after its open transaction was rolled back."""

    def __init__(self, *, phase: Phase, partition: int, counters: WriteCounters) -> None:
        self.phase = phase
        self.partition = partition
        self.counters = counters
        super().__init__(f"{phase.value} task for partition {partition} failed")


@dataclass(slots=True)
class TaskContext:
    """Task-local state created once at task setup and threaded through every call.

    The store connection and the probed write policy belong to this task
    alone; ``counters`` start at zero for every attempt.
    """

    phase: Phase
    partition: int
    store: GraphStore
    policy: WritePolicy
    counters: WriteCounters = field(default_factory=WriteCounters)


@contextmanager
def task_scope(
    phase: Phase,
    partition: int,
    *,
    store_factory: GraphStoreFactory,
    policy_factory: WritePolicyFactory,
) -> Iterator[TaskContext]:
    """Open a store connection for one task and close it transactionally.

    Clean exit commits (when the store is transactional). Any exception,
    including a failed commit, rolls back, counts a failed transaction and is
    re-raised as :class:`TaskFailedError`. Interrupts roll back and propagate
    unchanged. The connection is always shut down.
    """

    store = store_factory()
    counters = WriteCounters()
    transactional = False
    try:
        context = TaskContext(
            phase=phase,
            partition=partition,
            store=store,
            policy=policy_factory(phase),
            counters=counters,
        )
        transactional = store.supports_transactions
        if transactional:
            store.begin()
        yield context
        if transactional:
            store.commit()
            counters.increment(WriteCounter.SUCCESSFUL_TRANSACTIONS)
    except Exception as exc:
        log.exception("%s task for partition %d failed", phase.value, partition)
        _rollback(store, counters, transactional=transactional)
        raise TaskFailedError(phase=phase, partition=partition, counters=counters) from exc
    except BaseException:
        _rollback(store, counters, transactional=transactional)
        raise
    finally:
        store.shutdown()


def _rollback(store: GraphStore, counters: WriteCounters, *, transactional: bool) -> None:
    if not transactional:
        return
    try:
        store.rollback()
    finally:
        counters.increment(WriteCounter.FAILED_TRANSACTIONS)
