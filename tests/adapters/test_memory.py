from __future__ import annotations

import pytest

from semprops.adapters.memory import InMemoryPropertyRegistry, InMemoryPropertyStore
from semprops.domain.errors import EntityNotFoundError
from semprops.domain.model import (
    BlobItem,
    Entity,
    FactSet,
    PropertyDeclaration,
    PropertyType,
    Value,
)
from semprops.domain.ports import PropertyRegistry, PropertyStore


def test_registry_declare_and_describe() -> None:
    registry = InMemoryPropertyRegistry()

    registry.declare("Address", PropertyType.RECORD, fields=["Street", "City"])

    assert "Address" in registry
    assert len(registry) == 1
    assert registry.describe("Address") == PropertyDeclaration(
        "Address", PropertyType.RECORD, fields=("Street", "City")
    )
    assert registry.describe("Color") is None


def test_registry_default_type() -> None:
    registry = InMemoryPropertyRegistry(default_type_id=PropertyType.TEXT)

    assert registry.describe("Color") == PropertyDeclaration("Color", PropertyType.TEXT)
    assert "Color" not in registry


def test_store_satisfies_ports() -> None:
    store = InMemoryPropertyStore()

    assert isinstance(store, PropertyStore)
    assert isinstance(store.registry, PropertyRegistry)


def test_auto_created_pages_read_empty(memory_store: InMemoryPropertyStore) -> None:
    assert memory_store.read(Entity("Paris")) == FactSet.empty()
    assert not memory_store.page_exists("Paris")


def test_write_and_read(memory_store: InMemoryPropertyStore) -> None:
    facts = FactSet([("Color", [Value(BlobItem("Blue"))])])

    memory_store.write(Entity("Paris"), facts, comment="set color")

    assert memory_store.read(Entity("Paris")) == facts
    assert memory_store.page_exists("Paris")
    assert memory_store.comments == [("Paris", "set color")]


def test_strict_store_requires_created_pages() -> None:
    store = InMemoryPropertyStore(auto_create=False)

    with pytest.raises(EntityNotFoundError):
        store.read(Entity("Paris"))
    with pytest.raises(EntityNotFoundError):
        store.write(Entity("Paris"), FactSet.empty())

    assert store.create_page(Entity("Paris"))
    assert not store.create_page(Entity("Paris"))
    assert store.read(Entity("Paris")) == FactSet.empty()
