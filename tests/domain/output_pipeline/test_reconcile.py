from __future__ import annotations

import itertools

import pytest

from bulkgraph.domain.model import (
    TARGET_ID_KEY,
    ShellRecord,
    TaggedEnvelope,
    VertexRecord,
    WriteCounter,
    WriteCounters,
)
from bulkgraph.domain.output_pipeline import DuplicateVertexError, ReconcilePhase, reconcile
from tests.helpers.graphs import vertex


def _written(
    source_id: int, target_id: int, *, out: tuple[tuple[str, int], ...] = ()
) -> VertexRecord:
    record = vertex(source_id, out=out)
    record.capture_target_id(target_id)
    return record


def test_reconcile_builds_identifier_map_from_shells() -> None:
    counters = WriteCounters()
    envelopes = [
        TaggedEnvelope.of_shell(ShellRecord(2, 20)),
        TaggedEnvelope.of_vertex(_written(1, 10, out=(("knows", 2), ("knows", 3)))),
        TaggedEnvelope.of_shell(ShellRecord(3, 30)),
    ]

    result = reconcile(1, envelopes, counters=counters)

    assert result is not None
    assert result.id == 1
    assert result.properties == {TARGET_ID_KEY: 10}
    assert result.identifier_map == {2: 20, 3: 30}
    assert [edge.in_id for edge in result.out_edges] == [2, 3]
    assert result.in_edges == []
    assert counters.as_dict()["null_vertices_ignored"] == 0


def test_reconcile_is_order_independent() -> None:
    envelopes = [
        TaggedEnvelope.of_shell(ShellRecord(2, 20)),
        TaggedEnvelope.of_shell(ShellRecord(3, 30)),
        TaggedEnvelope.of_vertex(_written(1, 10, out=(("knows", 2), ("knows", 3)))),
    ]

    results = [
        reconcile(1, list(order), counters=WriteCounters())
        for order in itertools.permutations(envelopes)
    ]

    assert all(result == results[0] for result in results)


def test_reconcile_without_vertex_record_emits_nothing() -> None:
    counters = WriteCounters()

    result = reconcile(5, [TaggedEnvelope.of_shell(ShellRecord(2, 20))], counters=counters)

    assert result is None
    assert counters[WriteCounter.NULL_VERTICES_IGNORED] == 1


def test_reconcile_rejects_two_vertex_records() -> None:
    envelopes = [
        TaggedEnvelope.of_vertex(_written(1, 10)),
        TaggedEnvelope.of_vertex(_written(1, 11)),
    ]

    with pytest.raises(DuplicateVertexError):
        reconcile(1, envelopes, counters=WriteCounters())


def test_reconcile_phase_skips_groups_without_vertex() -> None:
    counters = WriteCounters()
    groups = [
        (1, [TaggedEnvelope.of_vertex(_written(1, 10))]),
        (4, [TaggedEnvelope.of_shell(ShellRecord(1, 10))]),
    ]

    reconciled = ReconcilePhase().run(groups, counters=counters)

    assert [record.id for record in reconciled] == [1]
    assert counters[WriteCounter.NULL_VERTICES_IGNORED] == 1
