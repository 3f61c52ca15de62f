"""Ports for reading and persisting fact sets."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from semprops.domain.model import Entity, FactSet, PropertyDeclaration


@runtime_checkable
class PropertyRegistry(Protocol):
    """Lookup of the properties a store recognizes."""

    def describe(self, key: str) -> PropertyDeclaration | None: ...


@runtime_checkable
class PropertyStore(PropertyRegistry, Protocol):
    """Persistence contract consumed by the reconciliation engine.

    ``read`` returns an empty fact set for an existing entity without properties
    and raises :class:`~semprops.domain.errors.EntityNotFoundError` for unknown
    entities. ``write`` persists the full snapshot atomically for that entity and
    raises :class:`~semprops.domain.errors.StoreError` on failure.
    """

    def read(self, entity: Entity) -> FactSet: ...

    def write(self, entity: Entity, facts: FactSet, *, comment: str | None = None) -> None: ...
