"""Public domain model surface."""

from __future__ import annotations

from bulkgraph.domain.model.counters import WriteCounters
from bulkgraph.domain.model.enums import Direction, EnvelopeTag, Phase, WriteCounter
from bulkgraph.domain.model.handles import EdgeHandle, ElementHandle, VertexHandle
from bulkgraph.domain.model.records import (
    TARGET_ID_KEY,
    TERMINATOR_ID,
    EdgeRecord,
    IdentifierMap,
    PropertyMap,
    PropertyValue,
    SourceId,
    TargetId,
    VertexRecord,
)
from bulkgraph.domain.model.shuffle import ShellRecord, ShuffleRecord, TaggedEnvelope

__all__ = [  # noqa: RUF022
    # records
    "EdgeRecord",
    "VertexRecord",
    "IdentifierMap",
    "PropertyMap",
    "PropertyValue",
    "SourceId",
    "TargetId",
    "TARGET_ID_KEY",
    "TERMINATOR_ID",
    # shuffle
    "ShellRecord",
    "ShuffleRecord",
    "TaggedEnvelope",
    # handles
    "EdgeHandle",
    "ElementHandle",
    "VertexHandle",
    # counters
    "WriteCounters",
    # enums
    "Direction",
    "EnvelopeTag",
    "Phase",
    "WriteCounter",
]
