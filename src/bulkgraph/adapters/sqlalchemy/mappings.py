"""SQLAlchemy Core tables holding the materialized property graph."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from bulkgraph.domain.model import PropertyValue

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class PropertyValueType(TypeDecorator[PropertyValue]):
    """Store scalar property values as JSON text.

    Encoding on bind makes equality filters compare typed values, so ``1``,
    ``"1"`` and ``true`` stay distinct.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: PropertyValue, dialect: Dialect) -> str:
        _ = dialect
        return json.dumps(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> PropertyValue:
        _ = dialect
        if value is None:
            return None
        return cast(PropertyValue, json.loads(value))


def _utcnow() -> datetime:
    return datetime.now(UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

vertex_table = Table(
    "vertex",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("created_at", UTCDateTime, nullable=False, default=_utcnow),
)

vertex_property_table = Table(
    "vertex_property",
    metadata,
    Column(
        "vertex_id", Integer, ForeignKey("vertex.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("key", String, primary_key=True),
    Column("value", PropertyValueType, nullable=False),
    Index("ix_vertex_property_key_value", "key", "value"),
)

edge_table = Table(
    "edge",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("out_id", Integer, ForeignKey("vertex.id", ondelete="CASCADE"), nullable=False),
    Column("in_id", Integer, ForeignKey("vertex.id", ondelete="CASCADE"), nullable=False),
    Column("label", String, nullable=False),
    Column("created_at", UTCDateTime, nullable=False, default=_utcnow),
    Index("ix_edge_out_in_label", "out_id", "in_id", "label"),
    Index("ix_edge_in_id", "in_id"),
)

edge_property_table = Table(
    "edge_property",
    metadata,
    Column("edge_id", Integer, ForeignKey("edge.id", ondelete="CASCADE"), primary_key=True),
    Column("key", String, primary_key=True),
    Column("value", PropertyValueType, nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    """Create the graph tables if they do not exist yet."""

    log.info("Creating all tables")
    metadata.create_all(engine)
