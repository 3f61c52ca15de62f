from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from semprops.adapters.memory import InMemoryPropertyRegistry, InMemoryPropertyStore
from semprops.adapters.sqlalchemy import SqlAlchemyPropertyStore, create_all_tables
from semprops.domain.model import PropertyDeclaration, PropertyType
from semprops.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Iterator

DECLARATIONS: tuple[PropertyDeclaration, ...] = (
    PropertyDeclaration("Color", PropertyType.TEXT),
    PropertyDeclaration("Size", PropertyType.TEXT),
    PropertyDeclaration("Height", PropertyType.QUANTITY, label="Height above ground"),
    PropertyDeclaration("Population", PropertyType.NUMBER),
    PropertyDeclaration("Born", PropertyType.DATE),
    PropertyDeclaration("Temperature", PropertyType.TEMPERATURE),
    PropertyDeclaration("Homepage", PropertyType.URL),
    PropertyDeclaration("Contact", PropertyType.EMAIL),
    PropertyDeclaration("Located in", PropertyType.PAGE),
    PropertyDeclaration("Coordinates", PropertyType.GEOGRAPHIC),
    PropertyDeclaration("Active", PropertyType.BOOLEAN),
    PropertyDeclaration("Name", PropertyType.MONOLINGUAL_TEXT),
    PropertyDeclaration("Tag", PropertyType.KEYWORD),
    PropertyDeclaration("Street", PropertyType.TEXT),
    PropertyDeclaration("City", PropertyType.PAGE),
    PropertyDeclaration("Address", PropertyType.RECORD, fields=("Street", "City")),
    PropertyDeclaration("Modification date", PropertyType.DATE, user_defined=False),
)


@pytest.fixture
def registry() -> InMemoryPropertyRegistry:
    return InMemoryPropertyRegistry(DECLARATIONS)


@pytest.fixture
def memory_store(registry: InMemoryPropertyRegistry) -> InMemoryPropertyStore:
    return InMemoryPropertyStore(registry)


@pytest.fixture
def engine(memory_store: InMemoryPropertyStore) -> ReconciliationEngine:
    return ReconciliationEngine(store=memory_store)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: Engine) -> SqlAlchemyPropertyStore:
    store = SqlAlchemyPropertyStore(sqlite_engine)
    for declaration in DECLARATIONS:
        store.declare_property(
            declaration.key,
            declaration.type_id,
            label=declaration.label,
            user_defined=declaration.user_defined,
            fields=declaration.fields,
        )
    return store
