"""Opaque references to elements held by a target graph store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bulkgraph.domain.model.records import TargetId


@dataclass(frozen=True, slots=True)
class VertexHandle:
    id: TargetId


@dataclass(frozen=True, slots=True)
class EdgeHandle:
    id: TargetId


type ElementHandle = VertexHandle | EdgeHandle
