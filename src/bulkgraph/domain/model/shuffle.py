"""Payloads that cross the grouped shuffle between the vertex and edge phases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from bulkgraph.domain.model.enums import EnvelopeTag

if TYPE_CHECKING:
    from bulkgraph.domain.model.records import SourceId, TargetId, VertexRecord


@dataclass(frozen=True, slots=True)
class ShellRecord:
    """Announces the resolved target id of one vertex to a neighbour."""

    source_id: SourceId
    target_id: TargetId


@dataclass(frozen=True, slots=True)
class TaggedEnvelope:
    """Two-case tagged variant: a full vertex (``'v'``) or a shell (``'s'``).

    Use :meth:`of_vertex` / :meth:`of_shell`; consumers match on :attr:`tag`.
    """

    tag: EnvelopeTag
    vertex: VertexRecord | None = None
    shell: ShellRecord | None = None

    def __post_init__(self) -> None:
        if self.tag is EnvelopeTag.VERTEX and (self.vertex is None or self.shell is not None):
            raise ValueError("'v' envelope must carry exactly a vertex record")
        if self.tag is EnvelopeTag.SHELL and (self.shell is None or self.vertex is not None):
            raise ValueError("'s' envelope must carry exactly a shell record")

    @classmethod
    def of_vertex(cls, vertex: VertexRecord) -> TaggedEnvelope:
        return cls(tag=EnvelopeTag.VERTEX, vertex=vertex)

    @classmethod
    def of_shell(cls, shell: ShellRecord) -> TaggedEnvelope:
        return cls(tag=EnvelopeTag.SHELL, shell=shell)


type ShuffleRecord = tuple[SourceId, TaggedEnvelope]
