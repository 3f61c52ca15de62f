"""Domain model for semantic properties."""

from __future__ import annotations

from .entity import Entity, canonical_title
from .facts import FactSet
from .requests import WriteOp, WriteRequest
from .values import (
    NAMESPACE_NAMES,
    BlobItem,
    BooleanItem,
    DataItem,
    GeoItem,
    MonolingualItem,
    NumberItem,
    PageItem,
    PropertyDeclaration,
    PropertyType,
    RecordItem,
    TimeItem,
    UriItem,
    Value,
    number_text,
    type_label,
)

__all__ = [
    "NAMESPACE_NAMES",
    "BlobItem",
    "BooleanItem",
    "DataItem",
    "Entity",
    "FactSet",
    "GeoItem",
    "MonolingualItem",
    "NumberItem",
    "PageItem",
    "PropertyDeclaration",
    "PropertyType",
    "RecordItem",
    "TimeItem",
    "UriItem",
    "Value",
    "WriteOp",
    "WriteRequest",
    "canonical_title",
    "number_text",
    "type_label",
]
