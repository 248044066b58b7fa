"""Translate JSON-lines vertices into :class:`VertexRecord` streams."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from pydantic_core import from_json

from bulkgraph.domain.model import Direction, EdgeRecord, VertexRecord
from bulkgraph.domain.source_graph import assemble_vertices

from .schema import GraphSONEdge, GraphSONVertex

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from bulkgraph.domain.model import PropertyMap

log = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)


class GraphSONFormatError(ValueError):
    """Raised when a line is not a valid vertex."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        self.line_number = line_number
        prefix = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{prefix}{message}")


def parse_vertex(payload: str | bytes, *, line_number: int | None = None) -> VertexRecord:
    """Parse one JSON document into a vertex record."""

    try:
        model = GraphSONVertex.model_validate_json(payload)
    except ValidationError as exc:
        raise GraphSONFormatError(str(exc), line_number=line_number) from exc
    return translate_vertex(model, line_number=line_number)


def translate_vertex(model: GraphSONVertex, *, line_number: int | None = None) -> VertexRecord:
    vertex = VertexRecord(id=model.id, properties=_properties(model, line_number))
    for edge in model.out_e:
        if edge.in_v is None:
            raise GraphSONFormatError(
                f"outgoing edge {edge.label!r} of vertex {model.id} has no _inV",
                line_number=line_number,
            )
        vertex.add_edge(Direction.OUT, edge.label, edge.in_v, _properties(edge, line_number))
    for edge in model.in_e:
        if edge.out_v is None:
            raise GraphSONFormatError(
                f"incoming edge {edge.label!r} of vertex {model.id} has no _outV",
                line_number=line_number,
            )
        vertex.add_edge(Direction.IN, edge.label, edge.out_v, _properties(edge, line_number))
    return vertex


def iter_vertices(lines: Iterable[str]) -> Iterator[VertexRecord]:
    """Yield a vertex per non-blank line."""

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield parse_vertex(line, line_number=line_number)


def read_vertices(path: Path) -> list[VertexRecord]:
    """Read every vertex from the JSON-lines file at ``path``."""

    with path.open(encoding="utf-8") as handle:
        vertices = list(iter_vertices(handle))
    log.info("Read %d vertices from %s", len(vertices), path)
    return vertices


def parse_element(
    payload: str | bytes, *, line_number: int | None = None
) -> VertexRecord | EdgeRecord:
    """Parse one element-list line; ``_type`` defaults to ``vertex``."""

    try:
        data = from_json(payload)
    except ValueError as exc:
        raise GraphSONFormatError(f"invalid JSON: {exc}", line_number=line_number) from exc
    if not isinstance(data, dict):
        raise GraphSONFormatError("expected a JSON object", line_number=line_number)

    try:
        match data.get("_type", "vertex"):
            case "vertex":
                vertex = GraphSONVertex.model_validate(data)
                return translate_vertex(vertex, line_number=line_number)
            case "edge":
                edge = GraphSONEdge.model_validate(data)
            case other:
                raise GraphSONFormatError(
                    f"unknown element type {other!r}", line_number=line_number
                )
    except ValidationError as exc:
        raise GraphSONFormatError(str(exc), line_number=line_number) from exc

    if edge.out_v is None or edge.in_v is None:
        raise GraphSONFormatError(
            f"edge {edge.label!r} needs both _outV and _inV", line_number=line_number
        )
    return EdgeRecord(edge.label, edge.out_v, edge.in_v, _properties(edge, line_number))


def iter_elements(lines: Iterable[str]) -> Iterator[VertexRecord | EdgeRecord]:
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield parse_element(line, line_number=line_number)


def read_elements(path: Path) -> list[VertexRecord]:
    """Read an element list and assemble it into adjacency-complete vertices."""

    with path.open(encoding="utf-8") as handle:
        vertices = assemble_vertices(iter_elements(handle))
    log.info("Assembled %d vertices from element list %s", len(vertices), path)
    return vertices


def _properties(model: GraphSONVertex | GraphSONEdge, line_number: int | None) -> PropertyMap:
    properties: PropertyMap = {}
    for key, value in model.properties().items():
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise GraphSONFormatError(
                f"property {key!r} must be a string, number, boolean or null, "
                f"got {type(value).__name__}",
                line_number=line_number,
            )
        properties[key] = value
    return properties
