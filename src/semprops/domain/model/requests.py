"""Requested property mutations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class WriteOp(StrEnum):
    UPSERT = "upsert"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class WriteRequest:
    """One requested mutation, before normalization or validation."""

    property: str | None
    value: str | None = None
    op: WriteOp = WriteOp.UPSERT

    @classmethod
    def upsert(cls, property_name: str | None, value: str | None) -> WriteRequest:
        return cls(property=property_name, value=value, op=WriteOp.UPSERT)

    @classmethod
    def delete(cls, property_name: str | None) -> WriteRequest:
        return cls(property=property_name, op=WriteOp.DELETE)
