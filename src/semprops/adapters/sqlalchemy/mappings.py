"""SQLAlchemy table metadata for pages, declared properties, facts and edits."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
)

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


class KeyListType(TypeDecorator[tuple[str, ...]]):
    """Ordered property keys stored as a JSON array."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: tuple[str, ...] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if not value:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> tuple[str, ...]:
        _ = dialect
        if not value:
            return ()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return ()
        return tuple(item for item in cast(list[object], loaded) if isinstance(item, str))


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

page_table = Table(
    "page",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String, nullable=False, unique=True),
    Column("revision", Integer, nullable=False, default=0),
    Column("created_at", UTCDateTime, nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime, nullable=False, default=utcnow),
)

property_table = Table(
    "property",
    metadata,
    Column("key", String, primary_key=True),
    Column("type_id", String, nullable=False),
    Column("label", String, nullable=True),
    Column("user_defined", Boolean, nullable=False, default=True),
    Column("fields", KeyListType, nullable=True),
)

fact_table = Table(
    "fact",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("page_id", Integer, ForeignKey("page.id", ondelete="CASCADE"), nullable=False),
    Column("position", Integer, nullable=False),
    Column("property_key", String, nullable=False),
    Column("type_id", String, nullable=False),
    Column("payload", Text, nullable=False),
    UniqueConstraint("page_id", "position"),
    Index("ix_fact_page_property", "page_id", "property_key"),
)

edit_table = Table(
    "edit",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("page_id", Integer, ForeignKey("page.id", ondelete="CASCADE"), nullable=False),
    Column("revision", Integer, nullable=False),
    Column("comment", String, nullable=True),
    Column("created_at", UTCDateTime, nullable=False, default=utcnow),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the property metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
