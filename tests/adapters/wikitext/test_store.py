from __future__ import annotations

import pytest

from semprops.adapters.memory import InMemoryPropertyRegistry
from semprops.adapters.wikitext import InMemoryPageSource, Revision, WikitextPropertyStore
from semprops.domain.errors import EntityNotFoundError, StoreError, ValidationError, ValidationRule
from semprops.domain.model import (
    BlobItem,
    Entity,
    FactSet,
    NumberItem,
    PageItem,
    PropertyType,
    Value,
    WriteRequest,
)
from semprops.domain.reconciliation import ReconciliationEngine

PARIS = Entity("Paris")


@pytest.fixture
def pages() -> InMemoryPageSource:
    return InMemoryPageSource({"Paris": "Paris is a city.\n"})


@pytest.fixture
def store(pages: InMemoryPageSource, registry: InMemoryPropertyRegistry) -> WikitextPropertyStore:
    return WikitextPropertyStore(pages, registry)


def test_read_parses_declared_types(
    pages: InMemoryPageSource, store: WikitextPropertyStore
) -> None:
    pages.pages["Paris"] = (
        "Intro {{#set:Property:Population=2161000}}\n"
        "{{#set:Located in=Category:Big cities}}\n"
        "{{#set:Undeclared=x}}\n"
        "{{#set:Empty=}}\n"
    )

    facts = store.read(PARIS)

    assert list(facts) == ["Population", "Located in", "Undeclared"]
    assert facts["Population"] == (Value(NumberItem(2161000.0), PropertyType.NUMBER),)
    assert facts["Located in"] == (Value(PageItem("Big cities", 14), PropertyType.PAGE),)
    assert facts["Undeclared"] == (Value(BlobItem("x"), PropertyType.TEXT),)


def test_unparseable_stored_value_degrades_to_text(
    pages: InMemoryPageSource, store: WikitextPropertyStore
) -> None:
    pages.pages["Paris"] = "{{#set:Population=many}}"

    facts = store.read(PARIS)

    assert facts["Population"] == (Value(BlobItem("many"), PropertyType.NUMBER),)


def test_missing_page(store: WikitextPropertyStore) -> None:
    with pytest.raises(EntityNotFoundError):
        store.read(Entity("Berlin"))
    with pytest.raises(EntityNotFoundError):
        store.write(Entity("Berlin"), FactSet.empty())


def test_create_page(pages: InMemoryPageSource, store: WikitextPropertyStore) -> None:
    assert store.create_page(Entity("Berlin"))
    assert not store.create_page(Entity("Berlin"))

    assert store.page_exists("Berlin")
    assert store.read(Entity("Berlin")) == FactSet.empty()
    assert pages.revisions == [Revision(title="Berlin", comment="Created page")]


def test_batch_round_trip(pages: InMemoryPageSource, store: WikitextPropertyStore) -> None:
    engine = ReconciliationEngine(store)

    result = engine.apply_batch(
        PARIS,
        [
            WriteRequest.upsert("Located in", "category:big cities"),
            WriteRequest.upsert("Born", "2024-03-15"),
            WriteRequest.upsert("Color", "a|b"),
        ],
        comment="Updated properties via SemanticAPI",
    )

    assert pages.pages["Paris"] == (
        "Paris is a city.\n\n"
        "{{#set:Located in=Category:Big cities}}\n\n"
        "{{#set:Born=2024-03-15}}\n\n"
        "{{#set:Color=a{{!}}b}}"
    )
    assert store.read(PARIS) == result.unwrap()
    assert pages.revisions == [
        Revision(title="Paris", comment="Updated properties via SemanticAPI")
    ]


def test_delete_removes_statement(pages: InMemoryPageSource, store: WikitextPropertyStore) -> None:
    pages.pages["Paris"] = "Intro\n{{#set:Color=Blue}}\n{{#set:Size=Large}}\nOutro"

    ReconciliationEngine(store).apply_batch(PARIS, [WriteRequest.delete("Property:Color")])

    assert pages.pages["Paris"] == "Intro\n{{#set:Size=Large}}\nOutro"


def test_unchanged_text_is_not_saved(
    pages: InMemoryPageSource, store: WikitextPropertyStore
) -> None:
    pages.pages["Paris"] = "{{#set:Color=Blue}}"

    store.write(PARIS, store.read(PARIS), comment="noop")

    assert pages.revisions == []


@pytest.mark.parametrize("key", ["Foo|Bar", "A=B", "Set{x}", " Color", "Color ", "Line\nbreak"])
def test_keys_that_cannot_be_stored_are_rejected(pages: InMemoryPageSource, key: str) -> None:
    store = WikitextPropertyStore(
        pages, InMemoryPropertyRegistry(default_type_id=PropertyType.TEXT)
    )

    result = ReconciliationEngine(store).apply_batch(PARIS, [WriteRequest.upsert(key, "v")])

    assert isinstance(result.error, ValidationError)
    assert result.error.rule is ValidationRule.RECOGNIZED_PROPERTY
    assert pages.pages["Paris"] == "Paris is a city.\n"
    assert pages.revisions == []


def test_write_refuses_unstorable_key(
    pages: InMemoryPageSource, store: WikitextPropertyStore
) -> None:
    facts = FactSet([("Foo|Bar", [Value(BlobItem("v"), PropertyType.TEXT)])])

    with pytest.raises(StoreError):
        store.write(PARIS, facts)
    assert pages.pages["Paris"] == "Paris is a city.\n"


@pytest.mark.parametrize("text", ["a &#123; b", "x &#125;", "&amp; and {{!}}", "Tom & Jerry"])
def test_entity_like_text_round_trips(
    pages: InMemoryPageSource, registry: InMemoryPropertyRegistry, text: str
) -> None:
    registry.declare("Note", PropertyType.TEXT)
    store = WikitextPropertyStore(pages, registry)

    result = ReconciliationEngine(store).apply_batch(PARIS, [WriteRequest.upsert("Note", text)])

    assert store.read(PARIS) == result.unwrap()
    assert store.read(PARIS)["Note"] == (Value(BlobItem(text), PropertyType.TEXT),)
