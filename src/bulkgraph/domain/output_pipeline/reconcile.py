"""Phase 2: rebuild each vertex's outgoing neighbourhood identifier map."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bulkgraph.domain.model import (
    TARGET_ID_KEY,
    EnvelopeTag,
    Phase,
    ShellRecord,
    TaggedEnvelope,
    VertexRecord,
    WriteCounter,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bulkgraph.domain.model import IdentifierMap, SourceId, WriteCounters

log = logging.getLogger(__name__)


class DuplicateVertexError(ValueError):
    """Raised when one shuffle key carries more than one full vertex record."""

    def __init__(self, source_id: SourceId) -> None:
        self.source_id = source_id
        super().__init__(f"Source vertex {source_id} was written more than once in this run")


def reconcile(
    source_id: SourceId,
    envelopes: Iterable[TaggedEnvelope],
    *,
    counters: WriteCounters,
) -> VertexRecord | None:
    """Reduce every envelope keyed by ``source_id`` into one reconciled vertex.

    Shells populate the identifier map; the single ``'v'`` record supplies
    the vertex's own target id and outgoing edges. Without a ``'v'`` record
    the vertex was never written, so nothing is emitted. The result does not
    depend on envelope order.
    """

    identifier_map: IdentifierMap = {}
    written: VertexRecord | None = None
    for envelope in envelopes:
        match envelope:
            case TaggedEnvelope(tag=EnvelopeTag.SHELL, shell=ShellRecord() as shell):
                identifier_map[shell.source_id] = shell.target_id
            case TaggedEnvelope(tag=EnvelopeTag.VERTEX, vertex=VertexRecord() as vertex):
                if written is not None:
                    raise DuplicateVertexError(source_id)
                written = vertex

    if written is None:
        log.warning("No source vertex: source_id=%s", source_id)
        counters.increment(WriteCounter.NULL_VERTICES_IGNORED)
        return None

    return VertexRecord(
        id=written.id,
        properties={TARGET_ID_KEY: written.target_id},  # type: ignore[dict-item]
        out_edges=[edge.copy() for edge in written.out_edges],
        identifier_map=identifier_map,
    )


@dataclass(slots=True)
class ReconcilePhase:
    """Grouped reduce stage wrapping :func:`reconcile`."""

    phase: Phase = Phase.RECONCILE

    def run(
        self,
        groups: Iterable[tuple[SourceId, list[TaggedEnvelope]]],
        *,
        counters: WriteCounters,
    ) -> list[VertexRecord]:
        reconciled: list[VertexRecord] = []
        for source_id, envelopes in groups:
            vertex = reconcile(source_id, envelopes, counters=counters)
            if vertex is not None:
                reconciled.append(vertex)
        return reconciled
