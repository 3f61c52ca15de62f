"""Typed property values.

A :class:`Value` pairs a data item with the (opaque) type id of the property it
was parsed for. Data items form a closed union; each knows its canonical
serialization, which is also the degraded display form of the value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum


class PropertyType(StrEnum):
    """Semantic types the formatter and parser know about, keyed by type id."""

    PAGE = "_wpg"
    NUMBER = "_num"
    QUANTITY = "_qty"
    DATE = "_dat"
    BOOLEAN = "_boo"
    URL = "_uri"
    EMAIL = "_ema"
    GEOGRAPHIC = "_geo"
    TEMPERATURE = "_tem"
    RECORD = "_rec"
    MONOLINGUAL_TEXT = "_mlt_rec"
    KEYWORD = "_keyw"
    TEXT = "_txt"
    CODE = "_cod"

    @classmethod
    def lookup(cls, type_id: str) -> PropertyType | None:
        try:
            return cls(type_id)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS: dict[PropertyType, str] = {
    PropertyType.PAGE: "Page",
    PropertyType.NUMBER: "Number",
    PropertyType.QUANTITY: "Quantity",
    PropertyType.DATE: "Date",
    PropertyType.BOOLEAN: "Boolean",
    PropertyType.URL: "URL",
    PropertyType.EMAIL: "Email",
    PropertyType.GEOGRAPHIC: "Geographic coordinate",
    PropertyType.TEMPERATURE: "Temperature",
    PropertyType.RECORD: "Record",
    PropertyType.MONOLINGUAL_TEXT: "Monolingual text",
    PropertyType.KEYWORD: "Keyword",
    PropertyType.TEXT: "Text",
    PropertyType.CODE: "Code",
}


def type_label(type_id: str) -> str:
    """Human-readable name for ``type_id``; unknown ids are returned as-is."""

    known = PropertyType.lookup(type_id)
    return known.label if known is not None else type_id


# Wiki namespace numbers understood in page references.
NAMESPACE_NAMES: dict[int, str] = {
    0: "",
    2: "User",
    4: "Project",
    6: "File",
    10: "Template",
    12: "Help",
    14: "Category",
    102: "Property",
}


def number_text(number: float) -> str:
    """Shortest text form of ``number`` that parses back to the same float."""

    if math.isfinite(number) and number.is_integer() and abs(number) < 1e15:
        return str(int(number))
    return repr(number)


@dataclass(frozen=True, slots=True)
class PageItem:
    title: str
    namespace: int = 0
    display_title: str | None = None

    @property
    def prefixed_title(self) -> str:
        prefix = NAMESPACE_NAMES.get(self.namespace, "")
        return f"{prefix}:{self.title}" if prefix else self.title

    def serialization(self) -> str:
        return f"{self.title}#{self.namespace}##"


@dataclass(frozen=True, slots=True)
class NumberItem:
    number: float
    unit: str | None = None

    def serialization(self) -> str:
        text = number_text(self.number)
        return f"{text} {self.unit}" if self.unit else text


@dataclass(frozen=True, slots=True)
class TimeItem:
    """Point in time kept in its raw ``calendar/year/month/day/h/m/s`` form."""

    raw: str

    def serialization(self) -> str:
        return self.raw


@dataclass(frozen=True, slots=True)
class BooleanItem:
    value: bool

    def serialization(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True, slots=True)
class UriItem:
    uri: str

    def serialization(self) -> str:
        return self.uri


@dataclass(frozen=True, slots=True)
class GeoItem:
    latitude: float
    longitude: float
    altitude: float | None = None

    def serialization(self) -> str:
        parts = [number_text(self.latitude), number_text(self.longitude)]
        if self.altitude is not None:
            parts.append(number_text(self.altitude))
        return ",".join(parts)


@dataclass(frozen=True, slots=True)
class MonolingualItem:
    text: str
    language: str

    def serialization(self) -> str:
        return f"{self.text}@{self.language}"


@dataclass(frozen=True, slots=True)
class BlobItem:
    text: str

    def serialization(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class RecordItem:
    """Compound value: ordered sub-property keys with their values."""

    fields: tuple[tuple[str, tuple[Value, ...]], ...]

    def serialization(self) -> str:
        return "; ".join(
            value.serialization() for _key, values in self.fields for value in values
        )


type DataItem = (
    PageItem
    | NumberItem
    | TimeItem
    | BooleanItem
    | UriItem
    | GeoItem
    | MonolingualItem
    | BlobItem
    | RecordItem
)


@dataclass(frozen=True, slots=True)
class Value:
    """A data item together with the type id of its property."""

    item: DataItem
    type_id: str = PropertyType.TEXT

    @property
    def type(self) -> PropertyType | None:
        return PropertyType.lookup(self.type_id)

    def serialization(self) -> str:
        return self.item.serialization()


@dataclass(frozen=True, slots=True)
class PropertyDeclaration:
    """Store-side metadata for a recognized property."""

    key: str
    type_id: str
    label: str | None = None
    user_defined: bool = True
    fields: tuple[str, ...] = ()

    @property
    def display_label(self) -> str:
        return self.label or self.key

    @property
    def type_label(self) -> str:
        return type_label(self.type_id)
