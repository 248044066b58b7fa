"""Transactional graph store backed by a SQLAlchemy session."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import insert, literal, select, update

from bulkgraph.domain.model import EdgeHandle, VertexHandle
from bulkgraph.domain.ports import GraphStoreError, StoredElement

from .mappings import (
    PropertyValueType,
    edge_property_table,
    edge_table,
    vertex_property_table,
    vertex_table,
)

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from bulkgraph.domain.model import ElementHandle, PropertyMap, PropertyValue


class SqlAlchemyGraphStore:
    """One task's connection: a session whose transaction spans the task."""

    def __init__(self, session: Session) -> None:
        self.session = session

    @property
    def supports_transactions(self) -> bool:
        return True

    def create_vertex(self, hint: int | None = None) -> VertexHandle:
        _ = hint  # ids are assigned by the database
        result = self.session.execute(insert(vertex_table))
        return VertexHandle(result.inserted_primary_key[0])

    def get_vertex(self, handle: VertexHandle) -> StoredElement[VertexHandle] | None:
        stmt = select(vertex_table.c.id).where(vertex_table.c.id == handle.id)
        if self.session.execute(stmt).scalar_one_or_none() is None:
            return None
        return StoredElement(handle=handle, properties=self.get_properties(handle))

    def create_edge(
        self, out_vertex: VertexHandle, in_vertex: VertexHandle, label: str
    ) -> EdgeHandle:
        stmt = insert(edge_table).values(out_id=out_vertex.id, in_id=in_vertex.id, label=label)
        result = self.session.execute(stmt)
        return EdgeHandle(result.inserted_primary_key[0])

    def set_property(self, handle: ElementHandle, key: str, value: PropertyValue) -> None:
        table, owner_column = _property_table(handle)
        result = self.session.execute(
            update(table)
            .where(table.c[owner_column] == handle.id)
            .where(table.c.key == key)
            .values(value=value)
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            self._ensure_exists(handle)
            self.session.execute(
                insert(table).values({owner_column: handle.id, "key": key, "value": value})
            )

    def get_properties(self, handle: ElementHandle) -> PropertyMap:
        table, owner_column = _property_table(handle)
        rows = self.session.execute(
            select(table.c.key, table.c.value).where(table.c[owner_column] == handle.id)
        )
        return {key: value for key, value in rows}

    def find_vertices(self, key: str, value: PropertyValue) -> list[VertexHandle]:
        stmt = (
            select(vertex_property_table.c.vertex_id)
            .where(vertex_property_table.c.key == key)
            .where(vertex_property_table.c.value == literal(value, PropertyValueType()))
            .order_by(vertex_property_table.c.vertex_id)
        )
        return [VertexHandle(vertex_id) for vertex_id in self.session.execute(stmt).scalars()]

    def find_edges(
        self, out_vertex: VertexHandle, in_vertex: VertexHandle, label: str
    ) -> list[EdgeHandle]:
        stmt = (
            select(edge_table.c.id)
            .where(edge_table.c.out_id == out_vertex.id)
            .where(edge_table.c.in_id == in_vertex.id)
            .where(edge_table.c.label == label)
            .order_by(edge_table.c.id)
        )
        return [EdgeHandle(edge_id) for edge_id in self.session.execute(stmt).scalars()]

    def begin(self) -> None:
        self.session.begin()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def shutdown(self) -> None:
        self.session.close()

    def _ensure_exists(self, handle: ElementHandle) -> None:
        table = vertex_table if isinstance(handle, VertexHandle) else edge_table
        stmt = select(table.c.id).where(table.c.id == handle.id)
        if self.session.execute(stmt).scalar_one_or_none() is None:
            raise GraphStoreError(f"Unknown element {handle}")


def _property_table(handle: ElementHandle) -> tuple[Table, str]:
    if isinstance(handle, VertexHandle):
        return vertex_property_table, "vertex_id"
    return edge_property_table, "edge_id"


if TYPE_CHECKING:
    from bulkgraph.domain.ports import GraphStore

    _store_check: GraphStore = SqlAlchemyGraphStore(cast("Session", None))
