"""JSON-lines (GraphSON-style) vertex and element-list input adapter."""

from __future__ import annotations

from .reader import (
    GraphSONFormatError,
    iter_elements,
    iter_vertices,
    parse_element,
    parse_vertex,
    read_elements,
    read_vertices,
    translate_vertex,
)
from .schema import GraphSONEdge, GraphSONVertex

__all__ = [
    "GraphSONEdge",
    "GraphSONFormatError",
    "GraphSONVertex",
    "iter_elements",
    "iter_vertices",
    "parse_element",
    "parse_vertex",
    "read_elements",
    "read_vertices",
    "translate_vertex",
]
