"""Fact sets: the property values held by one entity at a point in time."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .values import Value


class FactSet(Mapping[str, tuple["Value", ...]]):
    """Immutable, insertion-ordered mapping of canonical key to values.

    Keys with no values are dropped. Equality is order-sensitive: two fact sets
    are equal only if they list the same keys in the same order with the same
    value sequences.
    """

    __slots__ = ("_facts",)

    def __init__(
        self,
        facts: Mapping[str, Iterable[Value]] | Iterable[tuple[str, Iterable[Value]]] = (),
    ) -> None:
        pairs = facts.items() if isinstance(facts, Mapping) else facts
        collected: dict[str, tuple[Value, ...]] = {}
        for key, values in pairs:
            if not key:
                raise ValueError("Fact keys must be non-empty")
            materialized = tuple(values)
            if not materialized:
                continue
            collected[key] = collected.get(key, ()) + materialized
        self._facts = collected

    @classmethod
    def empty(cls) -> FactSet:
        return cls()

    def __getitem__(self, key: str) -> tuple[Value, ...]:
        return self._facts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._facts)

    def __len__(self) -> int:
        return len(self._facts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FactSet):
            return list(self._facts.items()) == list(other._facts.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(
            f"{key!r}: [{', '.join(v.serialization() for v in values)}]"
            for key, values in self._facts.items()
        )
        return f"FactSet({{{inner}}})"

    def values_for(self, key: str) -> tuple[Value, ...]:
        return self._facts.get(key, ())

    def to_dict(self) -> dict[str, tuple[Value, ...]]:
        return dict(self._facts)

    @property
    def fact_count(self) -> int:
        return sum(len(values) for values in self._facts.values())
