"""Property store that keeps facts as ``{{#set:}}`` statements in page text."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from semprops.domain.errors import EntityNotFoundError, StoreError, ValueParseError
from semprops.domain.model import BlobItem, FactSet, PropertyDeclaration, PropertyType, Value
from semprops.domain.normalize import PropertyKeyNormalizer
from semprops.domain.parsing import parse_value, value_to_text

from .markup import find_statements, is_storable_key, rewrite_statements

if TYPE_CHECKING:
    from semprops.domain.model import Entity
    from semprops.domain.ports import PropertyRegistry

    from .pages import PageSource

log = logging.getLogger(__name__)


class WikitextPropertyStore:
    """Read and write fact sets by rewriting inline markup.

    Keys found in the markup are normalized with ``normalizer``; values are
    parsed with the registry's declared type and fall back to text when the
    property is undeclared or the stored text does not parse.
    """

    def __init__(
        self,
        pages: PageSource,
        registry: PropertyRegistry,
        *,
        normalizer: PropertyKeyNormalizer | None = None,
    ) -> None:
        self.pages = pages
        self.registry = registry
        self.normalizer = normalizer or PropertyKeyNormalizer()

    def describe(self, key: str) -> PropertyDeclaration | None:
        if not is_storable_key(key):
            return None
        return self.registry.describe(key)

    def create_page(self, entity: Entity, text: str = "") -> bool:
        if self.pages.load(entity.identifier) is not None:
            return False
        self.pages.save(entity.identifier, text, comment="Created page")
        return True

    def page_exists(self, title: str) -> bool:
        return self.pages.load(title) is not None

    def read(self, entity: Entity) -> FactSet:
        text = self._load(entity)
        pairs: list[tuple[str, tuple[Value, ...]]] = []
        for statement in find_statements(text):
            key = self.normalizer.normalize(statement.key)
            if not key or not statement.value:
                continue
            pairs.append((key, (self._parse(key, statement.value),)))
        return FactSet(pairs)

    def write(self, entity: Entity, facts: FactSet, *, comment: str | None = None) -> None:
        unstorable = [key for key in facts if not is_storable_key(key)]
        if unstorable:
            raise StoreError(
                "Property name cannot be stored in page markup", cause=repr(unstorable[0])
            )
        text = self._load(entity)
        desired = {
            key: [value_to_text(value, self.registry.describe(key)) for value in values]
            for key, values in facts.items()
        }
        updated = rewrite_statements(text, desired, self.normalizer.normalize)
        if updated == text:
            return
        self.pages.save(entity.identifier, updated, comment=comment)

    def _load(self, entity: Entity) -> str:
        text = self.pages.load(entity.identifier)
        if text is None:
            raise EntityNotFoundError()
        return text

    def _parse(self, key: str, text: str) -> Value:
        declaration = self.registry.describe(key) or PropertyDeclaration(
            key=key, type_id=PropertyType.TEXT
        )
        try:
            return parse_value(text, declaration, self.registry)
        except ValueParseError as exc:
            log.warning(
                "Stored value for %r does not parse as %s: %s", key, declaration.type_id, exc
            )
            return Value(item=BlobItem(text), type_id=declaration.type_id)
