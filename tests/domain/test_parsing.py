from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from semprops.domain.errors import ValueParseError
from semprops.domain.model import (
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
)
from semprops.domain.parsing import parse_value, value_to_text

if TYPE_CHECKING:
    from semprops.adapters.memory import InMemoryPropertyRegistry
    from semprops.domain.model import DataItem


def _declaration(type_id: str) -> PropertyDeclaration:
    return PropertyDeclaration(key="P", type_id=type_id)


@pytest.mark.parametrize(
    ("type_id", "text", "item"),
    [
        (PropertyType.TEXT, "  Red  ", BlobItem("Red")),
        (PropertyType.CODE, "x = 1", BlobItem("x = 1")),
        ("_unknown", "anything", BlobItem("anything")),
        (PropertyType.KEYWORD, "big   red\tbox", BlobItem("big red box")),
        (PropertyType.PAGE, "paris", PageItem("Paris")),
        (PropertyType.PAGE, "category:big_cities", PageItem("Big cities", namespace=14)),
        (PropertyType.NUMBER, "42", NumberItem(42.0)),
        (PropertyType.NUMBER, "1 000.5", NumberItem(1000.5)),
        (PropertyType.QUANTITY, "12.5 m", NumberItem(12.5, "m")),
        (PropertyType.QUANTITY, "3", NumberItem(3.0)),
        (PropertyType.TEMPERATURE, "100°C", NumberItem(100.0, "°C")),
        (PropertyType.DATE, "2024-03-15", TimeItem("1/2024/3/15")),
        (PropertyType.BOOLEAN, "Yes", BooleanItem(value=True)),
        (PropertyType.BOOLEAN, "off", BooleanItem(value=False)),
        (PropertyType.URL, "https://example.org/x", UriItem("https://example.org/x")),
        (PropertyType.EMAIL, "john@example.org", UriItem("mailto:john@example.org")),
        (PropertyType.EMAIL, "mailto:john@example.org", UriItem("mailto:john@example.org")),
        (PropertyType.GEOGRAPHIC, "48.85, 2.35", GeoItem(48.85, 2.35)),
        (PropertyType.GEOGRAPHIC, "48.85,2.35,35", GeoItem(48.85, 2.35, 35.0)),
        (PropertyType.MONOLINGUAL_TEXT, "Bonjour@FR", MonolingualItem("Bonjour", "fr")),
    ],
)
def test_parse_value(type_id: str, text: str, item: DataItem) -> None:
    value = parse_value(text, _declaration(type_id))

    assert value == Value(item, type_id)


@pytest.mark.parametrize(
    ("type_id", "text"),
    [
        (PropertyType.TEXT, "   "),
        (PropertyType.PAGE, "A|B"),
        (PropertyType.NUMBER, "1,5"),
        (PropertyType.NUMBER, "inf"),
        (PropertyType.QUANTITY, "m"),
        (PropertyType.TEMPERATURE, "100"),
        (PropertyType.DATE, "someday"),
        (PropertyType.BOOLEAN, "maybe"),
        (PropertyType.URL, "example.org"),
        (PropertyType.URL, "javascript:alert(1)"),
        (PropertyType.EMAIL, "john"),
        (PropertyType.GEOGRAPHIC, "91, 0"),
        (PropertyType.GEOGRAPHIC, "10, 181"),
        (PropertyType.GEOGRAPHIC, "10"),
        (PropertyType.MONOLINGUAL_TEXT, "Hello"),
        (PropertyType.MONOLINGUAL_TEXT, "Hello@english1"),
    ],
)
def test_parse_value_rejects_malformed_text(type_id: str, text: str) -> None:
    with pytest.raises(ValueParseError):
        parse_value(text, _declaration(type_id))


def test_record_fields_use_their_declared_types(registry: InMemoryPropertyRegistry) -> None:
    address = registry.describe("Address")
    assert address is not None

    value = parse_value("Main St; paris", address, registry)

    assert value.item == RecordItem(
        (
            ("Street", (Value(BlobItem("Main St"), PropertyType.TEXT),)),
            ("City", (Value(PageItem("Paris"), PropertyType.PAGE),)),
        )
    )


def test_record_skips_empty_components(registry: InMemoryPropertyRegistry) -> None:
    address = registry.describe("Address")
    assert address is not None

    value = parse_value("; paris", address, registry)

    assert isinstance(value.item, RecordItem)
    assert [key for key, _values in value.item.fields] == ["City"]
    assert value_to_text(value, address) == "; Paris"


@pytest.mark.parametrize("text", ["a; b; c", ";", "Main St; A|B"])
def test_record_rejects_malformed_text(registry: InMemoryPropertyRegistry, text: str) -> None:
    address = registry.describe("Address")
    assert address is not None

    with pytest.raises(ValueParseError):
        parse_value(text, address, registry)


def test_record_without_fields_is_rejected() -> None:
    with pytest.raises(ValueParseError, match="declares no fields"):
        parse_value("a; b", _declaration(PropertyType.RECORD))


@pytest.mark.parametrize(
    ("key", "text"),
    [
        ("Color", "Red"),
        ("Located in", "Category:Big cities"),
        ("Population", "2161000"),
        ("Height", "324 m"),
        ("Temperature", "-40 °F"),
        ("Born", "2024-03-15"),
        ("Born", "2024-03-15T10:30"),
        ("Born", "-0044-03-15"),
        ("Born", "2/1500/1/1"),
        ("Active", "false"),
        ("Homepage", "https://example.org/?q=1"),
        ("Contact", "john@example.org"),
        ("Coordinates", "48.85, 2.35"),
        ("Name", "Bonjour@fr"),
        ("Tag", "big red"),
        ("Address", "Main St; Paris"),
        ("Address", "; Paris"),
    ],
)
def test_value_text_parses_back_to_the_same_value(
    registry: InMemoryPropertyRegistry, key: str, text: str
) -> None:
    declaration = registry.describe(key)
    assert declaration is not None
    value = parse_value(text, declaration, registry)

    rendered = value_to_text(value, declaration)

    assert parse_value(rendered, declaration, registry) == value
