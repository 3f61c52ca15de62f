"""Property key normalization.

Raw keys may carry a localized property-namespace prefix (``Attribut:``,
``Property:``...). The canonical key is the raw key with such prefixes removed;
case and whitespace of the remainder are kept as given.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

DEFAULT_NAMESPACE_PREFIXES: Final[tuple[str, ...]] = ("Attribut:", "Propriété:", "Property:")


@dataclass(frozen=True, slots=True)
class PropertyKeyNormalizer:
    """Strip known namespace prefixes; the first matching prefix wins.

    Prefix matching ignores case. Stripping repeats until no prefix matches so
    that ``normalize(normalize(k)) == normalize(k)`` holds for stacked prefixes.
    """

    prefixes: tuple[str, ...] = DEFAULT_NAMESPACE_PREFIXES

    def __call__(self, raw_key: str) -> str:
        return self.normalize(raw_key)

    def normalize(self, raw_key: str) -> str:
        key = raw_key
        while True:
            prefix = self._matching_prefix(key)
            if prefix is None:
                return key
            key = key[len(prefix) :]

    def _matching_prefix(self, key: str) -> str | None:
        for prefix in self.prefixes:
            head = key[: len(prefix)]
            if prefix and head.casefold() == prefix.casefold():
                return head
        return None


def normalize_key(raw_key: str, *, prefixes: tuple[str, ...] = DEFAULT_NAMESPACE_PREFIXES) -> str:
    return PropertyKeyNormalizer(prefixes).normalize(raw_key)
