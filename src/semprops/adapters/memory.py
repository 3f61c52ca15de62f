"""In-memory property registry and store, used by tests and the ``memory`` backend."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from semprops.domain.errors import EntityNotFoundError
from semprops.domain.model import FactSet, PropertyDeclaration, PropertyType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from semprops.domain.model import Entity
    from semprops.domain.ports import PropertyRegistry

log = logging.getLogger(__name__)


class InMemoryPropertyRegistry:
    """Declared properties held in a dict.

    With ``default_type_id`` set, undeclared keys are described as user-defined
    properties of that type instead of being unknown.
    """

    def __init__(
        self,
        declarations: Iterable[PropertyDeclaration] = (),
        *,
        default_type_id: str | None = None,
    ) -> None:
        self._declarations = {declaration.key: declaration for declaration in declarations}
        self.default_type_id = default_type_id

    def declare(
        self,
        key: str,
        type_id: str = PropertyType.TEXT,
        *,
        label: str | None = None,
        user_defined: bool = True,
        fields: Iterable[str] = (),
    ) -> PropertyDeclaration:
        declaration = PropertyDeclaration(
            key=key,
            type_id=type_id,
            label=label,
            user_defined=user_defined,
            fields=tuple(fields),
        )
        self._declarations[key] = declaration
        return declaration

    def describe(self, key: str) -> PropertyDeclaration | None:
        declaration = self._declarations.get(key)
        if declaration is None and self.default_type_id is not None:
            return PropertyDeclaration(key=key, type_id=self.default_type_id)
        return declaration

    def __contains__(self, key: object) -> bool:
        return key in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)


class InMemoryPropertyStore:
    """Fact sets kept per entity id.

    Pages must be created before they can be read or written when
    ``auto_create`` is off; otherwise unknown pages read as empty.
    """

    def __init__(
        self,
        registry: PropertyRegistry | None = None,
        *,
        auto_create: bool = True,
    ) -> None:
        self.registry = registry if registry is not None else InMemoryPropertyRegistry()
        self.auto_create = auto_create
        self.comments: list[tuple[str, str | None]] = []
        self._pages: dict[str, FactSet] = {}
        self._lock = threading.Lock()

    def create_page(self, entity: Entity) -> bool:
        with self._lock:
            if entity.identifier in self._pages:
                return False
            self._pages[entity.identifier] = FactSet.empty()
            return True

    def page_exists(self, title: str) -> bool:
        with self._lock:
            return title in self._pages

    def describe(self, key: str) -> PropertyDeclaration | None:
        return self.registry.describe(key)

    def read(self, entity: Entity) -> FactSet:
        with self._lock:
            facts = self._pages.get(entity.identifier)
        if facts is not None:
            return facts
        if self.auto_create:
            return FactSet.empty()
        raise EntityNotFoundError()

    def write(self, entity: Entity, facts: FactSet, *, comment: str | None = None) -> None:
        with self._lock:
            if entity.identifier not in self._pages and not self.auto_create:
                raise EntityNotFoundError()
            self._pages[entity.identifier] = facts
            self.comments.append((entity.identifier, comment))
        log.debug("Stored %s facts for %s", facts.fact_count, entity)


if TYPE_CHECKING:
    from semprops.domain.ports import PropertyStore

    _store_check: PropertyStore = InMemoryPropertyStore()
    _registry_check: PropertyRegistry = InMemoryPropertyRegistry()
