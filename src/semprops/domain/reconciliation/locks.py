"""Per-entity mutual exclusion for read-modify-write cycles."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from semprops.domain.model import Entity


@dataclass(slots=True)
class _Slot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


@dataclass(slots=True)
class EntityLocks:
    """Locks keyed by canonical entity id.

    Batches for the same entity run one at a time; different entities never
    contend beyond the short registry bookkeeping. Slots are dropped once no
    caller holds or waits for them.
    """

    _guard: threading.Lock = field(default_factory=threading.Lock)
    _slots: dict[str, _Slot] = field(default_factory=dict)

    @contextmanager
    def hold(self, entity: Entity) -> Iterator[None]:
        key = entity.identifier
        with self._guard:
            slot = self._slots.setdefault(key, _Slot())
            slot.holders += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._guard:
                slot.holders -= 1
                if slot.holders == 0:
                    self._slots.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)
