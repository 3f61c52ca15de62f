"""Render typed values into JSON-friendly structures.

Formatting dispatches on the value's property type. Each known type has one
formatter; unknown types, text-like types, and any formatter that fails fall
back to the value's plain text, so a single bad value never breaks a listing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, NotRequired, TypedDict
from urllib.parse import quote, urlsplit

from semprops.domain.model import (
    BooleanItem,
    GeoItem,
    MonolingualItem,
    NumberItem,
    PageItem,
    PropertyType,
    RecordItem,
    TimeItem,
    UriItem,
    Value,
    number_text,
)
from semprops.domain.temporal import parse_raw_time

if TYPE_CHECKING:
    from collections.abc import Callable

    from semprops.domain.model import DataItem

log = logging.getLogger(__name__)

_DISAMBIGUATION_SUFFIX = re.compile(r"#\d+##$")
_FAHRENHEIT_UNITS = frozenset({"°f", "f", "℉", "fahrenheit", "degf"})
_CELSIUS_UNITS = frozenset({"°c", "c", "℃", "celsius", "degc"})

DEFAULT_ARTICLE_PATH = "/wiki/$1"


class PageFormat(TypedDict):
    title: str
    namespace: int
    displayTitle: str
    url: str
    exists: bool


class NumberFormat(TypedDict):
    number: float
    unit: NotRequired[str]
    formatted: NotRequired[str]


class DateFormat(TypedDict):
    timestamp: str
    iso: str | None
    formatted: str | None
    year: int | None
    precision: str | None
    display: str


class BooleanFormat(TypedDict):
    value: bool
    display: str


class UrlFormat(TypedDict):
    url: str
    display: str
    domain: str | None


class EmailFormat(TypedDict):
    email: str
    display: str
    domain: str | None


class GeoFormat(TypedDict):
    latitude: NotRequired[float]
    longitude: NotRequired[float]
    altitude: NotRequired[float]
    display: str


class TemperatureFormat(TypedDict):
    value: float
    unit: str
    celsius: float
    fahrenheit: float
    formatted: str


class RecordFormat(TypedDict):
    fields: dict[str, list[str]]
    display: str


class MonolingualFormat(TypedDict):
    text: str
    language: str
    display: str


type FormattedValue = (
    str
    | PageFormat
    | NumberFormat
    | DateFormat
    | BooleanFormat
    | UrlFormat
    | EmailFormat
    | GeoFormat
    | TemperatureFormat
    | RecordFormat
    | MonolingualFormat
)


def plain_text(value: Value) -> str:
    """Canonical serialization with any ``#<ns>##`` disambiguation suffix removed."""

    return _DISAMBIGUATION_SUFFIX.sub("", value.serialization())


def _compact(number: float) -> float:
    return int(number) if number.is_integer() else number


def _default_page_exists(_title: str) -> bool:
    return False


@dataclass(slots=True)
class ValueFormatter:
    """Format values for API responses.

    ``article_path`` is a URL template with ``$1`` standing for the page title.
    ``page_exists`` tells page references whether their target exists.
    """

    article_path: str = DEFAULT_ARTICLE_PATH
    page_exists: Callable[[str], bool] = _default_page_exists

    def __call__(self, value: Value) -> FormattedValue:
        return self.format(value)

    def format(self, value: Value) -> FormattedValue:
        kind = value.type
        formatter = _FORMATTERS.get(kind) if kind is not None else None
        if formatter is None:
            return plain_text(value)
        try:
            return formatter(self, value.item)
        except Exception:  # noqa: BLE001
            log.warning(
                "Falling back to plain text for %s value %r",
                value.type_id,
                value.serialization(),
                exc_info=True,
            )
            return plain_text(value)

    def page_url(self, prefixed_title: str) -> str:
        return self.article_path.replace("$1", quote(prefixed_title.replace(" ", "_"), safe=":/"))


def _expect[TItem](item: DataItem, item_type: type[TItem]) -> TItem:
    if not isinstance(item, item_type):
        raise TypeError(f"Expected {item_type.__name__}, got {type(item).__name__}")
    return item


def _format_page(formatter: ValueFormatter, item: DataItem) -> PageFormat:
    page = _expect(item, PageItem)
    prefixed = page.prefixed_title
    return {
        "title": prefixed,
        "namespace": page.namespace,
        "displayTitle": page.display_title or prefixed,
        "url": formatter.page_url(prefixed),
        "exists": formatter.page_exists(prefixed),
    }


def _format_number(_formatter: ValueFormatter, item: DataItem) -> NumberFormat:
    number = _expect(item, NumberItem)
    result: NumberFormat = {"number": _compact(number.number)}
    if number.unit:
        result["unit"] = number.unit
        result["formatted"] = f"{number_text(number.number)} {number.unit}"
    return result


def _format_date(_formatter: ValueFormatter, item: DataItem) -> DateFormat:
    time = _expect(item, TimeItem)
    parts = parse_raw_time(time.raw)
    if parts is None:
        return {
            "timestamp": time.raw,
            "iso": None,
            "formatted": None,
            "year": None,
            "precision": None,
            "display": time.raw,
        }
    formatted = parts.formatted()
    return {
        "timestamp": time.raw,
        "iso": parts.iso(),
        "formatted": formatted,
        "year": parts.year,
        "precision": str(parts.precision),
        "display": formatted,
    }


def _format_boolean(_formatter: ValueFormatter, item: DataItem) -> BooleanFormat:
    flag = _expect(item, BooleanItem)
    return {"value": flag.value, "display": "Yes" if flag.value else "No"}


def _format_url(_formatter: ValueFormatter, item: DataItem) -> UrlFormat:
    uri = _expect(item, UriItem)
    return {"url": uri.uri, "display": uri.uri, "domain": urlsplit(uri.uri).hostname}


def _format_email(_formatter: ValueFormatter, item: DataItem) -> EmailFormat:
    uri = _expect(item, UriItem)
    address = uri.uri[len("mailto:") :] if uri.uri.lower().startswith("mailto:") else uri.uri
    _local, at, domain = address.partition("@")
    return {"email": address, "display": address, "domain": domain if at and domain else None}


def _format_geo(_formatter: ValueFormatter, item: DataItem) -> GeoFormat:
    geo = _expect(item, GeoItem)
    result: GeoFormat = {
        "latitude": geo.latitude,
        "longitude": geo.longitude,
        "display": f"{number_text(geo.latitude)}, {number_text(geo.longitude)}",
    }
    if geo.altitude is not None:
        result["altitude"] = geo.altitude
    return result


def _format_temperature(_formatter: ValueFormatter, item: DataItem) -> TemperatureFormat:
    reading = _expect(item, NumberItem)
    if reading.unit is None:
        raise ValueError("Temperature value without unit")
    value = reading.number
    folded = reading.unit.strip().casefold()
    if folded in _FAHRENHEIT_UNITS:
        celsius, fahrenheit = round((value - 32) * 5 / 9, 2), value
    elif folded in _CELSIUS_UNITS:
        celsius, fahrenheit = value, round(value * 9 / 5 + 32, 2)
    else:
        celsius, fahrenheit = value, value
    return {
        "value": _compact(value),
        "unit": reading.unit,
        "celsius": _compact(celsius),
        "fahrenheit": _compact(fahrenheit),
        "formatted": f"{number_text(value)}{reading.unit}",
    }


def _format_record(_formatter: ValueFormatter, item: DataItem) -> RecordFormat:
    record = _expect(item, RecordItem)
    fields = {key: [plain_text(value) for value in values] for key, values in record.fields}
    display = "; ".join(text for texts in fields.values() for text in texts)
    return {"fields": fields, "display": display}


def _format_monolingual(_formatter: ValueFormatter, item: DataItem) -> MonolingualFormat:
    text = _expect(item, MonolingualItem)
    return {
        "text": text.text,
        "language": text.language,
        "display": f"{text.text} ({text.language})",
    }


_FORMATTERS: dict[PropertyType, Callable[[ValueFormatter, DataItem], FormattedValue]] = {
    PropertyType.PAGE: _format_page,
    PropertyType.NUMBER: _format_number,
    PropertyType.QUANTITY: _format_number,
    PropertyType.DATE: _format_date,
    PropertyType.BOOLEAN: _format_boolean,
    PropertyType.URL: _format_url,
    PropertyType.EMAIL: _format_email,
    PropertyType.GEOGRAPHIC: _format_geo,
    PropertyType.TEMPERATURE: _format_temperature,
    PropertyType.RECORD: _format_record,
    PropertyType.MONOLINGUAL_TEXT: _format_monolingual,
}
