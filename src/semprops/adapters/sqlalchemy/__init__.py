"""SQLAlchemy adapter package for semprops."""

from __future__ import annotations

from .codec import PayloadError, decode_value, encode_item
from .mappings import (
    create_all_tables,
    edit_table,
    fact_table,
    metadata,
    page_table,
    property_table,
)
from .store import EditRecord, SqlAlchemyPropertyStore

__all__ = [
    "EditRecord",
    "PayloadError",
    "SqlAlchemyPropertyStore",
    "create_all_tables",
    "decode_value",
    "edit_table",
    "encode_item",
    "fact_table",
    "metadata",
    "page_table",
    "property_table",
]
