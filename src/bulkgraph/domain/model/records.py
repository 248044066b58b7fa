"""In-flight vertex and edge records carried between pipeline phases."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Final

from bulkgraph.domain.model.enums import Direction

type PropertyValue = str | int | float | bool | None
type PropertyMap = dict[str, PropertyValue]
type SourceId = int
type TargetId = Hashable
type IdentifierMap = dict[SourceId, TargetId]

# Reserved keys are chosen so they never collide with user properties.
TARGET_ID_KEY: Final[str] = "_bId0192834"
TERMINATOR_ID: Final[SourceId] = -1


@dataclass(slots=True)
class EdgeRecord:
    """A directed, labelled edge between two source vertex ids.

    ``out_id`` is the tail and ``in_id`` the head. Both are lookup keys only;
    the record never owns its endpoints.
    """

    label: str
    out_id: SourceId
    in_id: SourceId
    properties: PropertyMap = field(default_factory=dict[str, PropertyValue])

    def vertex_id(self, direction: Direction) -> SourceId:
        return self.out_id if direction is Direction.OUT else self.in_id

    def copy(self) -> EdgeRecord:
        return EdgeRecord(self.label, self.out_id, self.in_id, dict(self.properties))


@dataclass(slots=True)
class VertexRecord:
    """A source vertex with its properties and both adjacency lists.

    Phases strip what they no longer need: after the vertex write the
    properties only hold :data:`TARGET_ID_KEY`, and incoming edges are
    dropped before the edge write. The reconciliation phase attaches the
    neighbourhood's :data:`IdentifierMap`.
    """

    id: SourceId
    properties: PropertyMap = field(default_factory=dict[str, PropertyValue])
    out_edges: list[EdgeRecord] = field(default_factory=list[EdgeRecord])
    in_edges: list[EdgeRecord] = field(default_factory=list[EdgeRecord])
    identifier_map: IdentifierMap | None = None

    @classmethod
    def terminator(cls) -> VertexRecord:
        """Return the degenerate record emitted once a vertex is exhausted."""

        return cls(id=TERMINATOR_ID)

    @property
    def is_terminator(self) -> bool:
        return (
            self.id == TERMINATOR_ID
            and not self.properties
            and not self.out_edges
            and not self.in_edges
        )

    @property
    def target_id(self) -> TargetId | None:
        return self.properties.get(TARGET_ID_KEY)

    def capture_target_id(self, target_id: TargetId) -> None:
        """Replace all properties with the reserved target-id property."""

        self.properties.clear()
        self.properties[TARGET_ID_KEY] = target_id  # type: ignore[assignment]

    def edges(self, direction: Direction, label: str | None = None) -> list[EdgeRecord]:
        adjacency = self.out_edges if direction is Direction.OUT else self.in_edges
        if label is None:
            return list(adjacency)
        return [edge for edge in adjacency if edge.label == label]

    def add_edge(
        self,
        direction: Direction,
        label: str,
        other_id: SourceId,
        properties: PropertyMap | None = None,
    ) -> EdgeRecord:
        """Append an edge adjacent to this vertex and return it."""

        if direction is Direction.OUT:
            edge = EdgeRecord(label, self.id, other_id, dict(properties or {}))
            self.out_edges.append(edge)
        else:
            edge = EdgeRecord(label, other_id, self.id, dict(properties or {}))
            self.in_edges.append(edge)
        return edge

    def drop_edges(self, direction: Direction) -> None:
        if direction is Direction.OUT:
            self.out_edges.clear()
        else:
            self.in_edges.clear()
