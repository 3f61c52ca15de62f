"""Turn user-supplied value text into typed values, and back.

``parse_value`` dispatches on the declared property type; unknown type ids are
treated as text. ``value_to_text`` renders the input form of a value so that
parsing it again yields an equal value.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from semprops.domain.errors import InputError, ValueParseError
from semprops.domain.model import (
    NAMESPACE_NAMES,
    BlobItem,
    BooleanItem,
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
    canonical_title,
)
from semprops.domain.temporal import GREGORIAN, parse_raw_time, parse_time_text

if TYPE_CHECKING:
    from collections.abc import Callable

    from semprops.domain.model import DataItem
    from semprops.domain.ports import PropertyRegistry


_NUMBER_WITH_UNIT = re.compile(
    r"^(?P<number>[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)\s*(?P<unit>.*)$"
)
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_LANGUAGE = re.compile(r"^[a-z]{2,3}(?:-[a-z0-9]{2,8})*$")
_URL_SCHEMES = frozenset(
    {"http", "https", "ftp", "ftps", "sftp", "irc", "ircs", "news", "ssh", "git"}
)
_TRUE_WORDS = frozenset({"true", "yes", "y", "1", "on"})
_FALSE_WORDS = frozenset({"false", "no", "n", "0", "off"})
_NAMESPACE_BY_NAME = {name.casefold(): number for number, name in NAMESPACE_NAMES.items() if name}
_RECORD_SEPARATOR = ";"


def parse_value(
    text: str,
    declaration: PropertyDeclaration,
    registry: PropertyRegistry | None = None,
) -> Value:
    """Parse ``text`` for ``declaration``; raise :class:`ValueParseError` on failure."""

    cleaned = text.strip()
    if not cleaned:
        raise ValueParseError("Empty value")
    kind = PropertyType.lookup(declaration.type_id)
    item: DataItem
    if kind is PropertyType.RECORD:
        item = _parse_record(cleaned, declaration, registry)
    else:
        parser = _PARSERS.get(kind, _parse_text) if kind is not None else _parse_text
        item = parser(cleaned)
    return Value(item=item, type_id=declaration.type_id)


def _parse_text(text: str) -> BlobItem:
    return BlobItem(text)


def _parse_keyword(text: str) -> BlobItem:
    return BlobItem(" ".join(text.split()))


def _parse_page(text: str) -> PageItem:
    namespace = 0
    title = text
    prefix, separator, rest = text.partition(":")
    if separator and prefix.strip().casefold() in _NAMESPACE_BY_NAME and rest.strip():
        namespace = _NAMESPACE_BY_NAME[prefix.strip().casefold()]
        title = rest
    try:
        return PageItem(title=canonical_title(title), namespace=namespace)
    except InputError as exc:
        raise ValueParseError(f"Invalid page title: {text!r}") from exc


def _parse_float(text: str) -> float:
    try:
        number = float(text.replace(" ", "").replace("_", ""))
    except ValueError as exc:
        raise ValueParseError(f"Not a number: {text!r}") from exc
    if not math.isfinite(number):
        raise ValueParseError(f"Number must be finite: {text!r}")
    return number


def _parse_number(text: str) -> NumberItem:
    return NumberItem(_parse_float(text))


def _split_unit(text: str) -> tuple[float, str | None]:
    match = _NUMBER_WITH_UNIT.match(text)
    if not match:
        raise ValueParseError(f"Not a quantity: {text!r}")
    unit = match["unit"].strip() or None
    return _parse_float(match["number"]), unit


def _parse_quantity(text: str) -> NumberItem:
    number, unit = _split_unit(text)
    return NumberItem(number, unit)


def _parse_temperature(text: str) -> NumberItem:
    number, unit = _split_unit(text)
    if unit is None:
        raise ValueParseError(f"Temperature requires a unit: {text!r}")
    return NumberItem(number, unit)


def _parse_date(text: str) -> TimeItem:
    return TimeItem(parse_time_text(text).raw())


def _parse_boolean(text: str) -> BooleanItem:
    folded = text.casefold()
    if folded in _TRUE_WORDS:
        return BooleanItem(value=True)
    if folded in _FALSE_WORDS:
        return BooleanItem(value=False)
    raise ValueParseError(f"Not a boolean: {text!r}")


def _parse_url(text: str) -> UriItem:
    parts = urlsplit(text)
    if parts.scheme.lower() not in _URL_SCHEMES or not parts.netloc:
        raise ValueParseError(f"Not a valid URL: {text!r}")
    return UriItem(text)


def _parse_email(text: str) -> UriItem:
    address = text[len("mailto:") :] if text.lower().startswith("mailto:") else text
    if not _EMAIL.match(address):
        raise ValueParseError(f"Not a valid email address: {text!r}")
    return UriItem(f"mailto:{address}")


def _parse_geo(text: str) -> GeoItem:
    pieces = [piece.strip() for piece in text.split(",")]
    if len(pieces) not in (2, 3):
        raise ValueParseError(f"Expected 'latitude, longitude[, altitude]': {text!r}")
    numbers = [_parse_float(piece) for piece in pieces]
    latitude, longitude = numbers[0], numbers[1]
    if not -90 <= latitude <= 90:  # noqa: PLR2004
        raise ValueParseError(f"Latitude out of range: {latitude}")
    if not -180 <= longitude <= 180:  # noqa: PLR2004
        raise ValueParseError(f"Longitude out of range: {longitude}")
    altitude = numbers[2] if len(numbers) == 3 else None  # noqa: PLR2004
    return GeoItem(latitude, longitude, altitude)


def _parse_monolingual(text: str) -> MonolingualItem:
    body, separator, language = text.rpartition("@")
    language = language.strip().lower()
    if not separator or not body.strip() or not _LANGUAGE.match(language):
        raise ValueParseError(f"Expected 'text@language': {text!r}")
    return MonolingualItem(text=body.strip(), language=language)


def _parse_record(
    text: str,
    declaration: PropertyDeclaration,
    registry: PropertyRegistry | None,
) -> RecordItem:
    if not declaration.fields:
        raise ValueParseError(f"Record property {declaration.key!r} declares no fields")
    components = [component.strip() for component in text.split(_RECORD_SEPARATOR)]
    if len(components) > len(declaration.fields):
        raise ValueParseError(
            f"Record property {declaration.key!r} takes at most "
            f"{len(declaration.fields)} fields, got {len(components)}"
        )
    fields: list[tuple[str, tuple[Value, ...]]] = []
    for field_key, component in zip(declaration.fields, components, strict=False):
        if not component:
            continue
        field_declaration = registry.describe(field_key) if registry is not None else None
        if field_declaration is None:
            field_declaration = PropertyDeclaration(key=field_key, type_id=PropertyType.TEXT)
        try:
            value = parse_value(component, field_declaration, registry)
        except ValueParseError as exc:
            raise ValueParseError(f"Field {field_key!r}: {exc}") from exc
        fields.append((field_key, (value,)))
    if not fields:
        raise ValueParseError("Record value has no fields")
    return RecordItem(tuple(fields))


_PARSERS: dict[PropertyType, Callable[[str], DataItem]] = {
    PropertyType.PAGE: _parse_page,
    PropertyType.NUMBER: _parse_number,
    PropertyType.QUANTITY: _parse_quantity,
    PropertyType.TEMPERATURE: _parse_temperature,
    PropertyType.DATE: _parse_date,
    PropertyType.BOOLEAN: _parse_boolean,
    PropertyType.URL: _parse_url,
    PropertyType.EMAIL: _parse_email,
    PropertyType.GEOGRAPHIC: _parse_geo,
    PropertyType.MONOLINGUAL_TEXT: _parse_monolingual,
    PropertyType.KEYWORD: _parse_keyword,
    PropertyType.TEXT: _parse_text,
    PropertyType.CODE: _parse_text,
}


def value_to_text(value: Value, declaration: PropertyDeclaration | None = None) -> str:
    """Render the input form of ``value``.

    Record values need the declaration to keep empty fields in position.
    """

    item = value.item
    match item:
        case PageItem():
            return item.prefixed_title
        case NumberItem():
            return item.serialization()
        case TimeItem():
            parts = parse_raw_time(item.raw)
            if parts is None or parts.calendar != GREGORIAN:
                return item.raw
            return parts.iso()
        case BooleanItem():
            return item.serialization()
        case UriItem():
            if item.uri.lower().startswith("mailto:"):
                return item.uri[len("mailto:") :]
            return item.uri
        case GeoItem():
            return item.serialization().replace(",", ", ")
        case MonolingualItem():
            return item.serialization()
        case RecordItem():
            return _record_to_text(item, declaration)
        case BlobItem():
            return item.text


def _record_to_text(item: RecordItem, declaration: PropertyDeclaration | None) -> str:
    by_field = dict(item.fields)
    order = tuple(by_field)
    if declaration is not None and declaration.fields:
        order = declaration.fields
    components = [
        "; ".join(value_to_text(value) for value in by_field.get(field_key, ()))
        for field_key in order
    ]
    while components and not components[-1]:
        components.pop()
    return f"{_RECORD_SEPARATOR} ".join(components)
