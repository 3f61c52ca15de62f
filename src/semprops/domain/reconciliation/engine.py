"""Orchestrator for property reconciliation.

The engine binds one store to a key normalizer and a per-entity lock registry;
validation, the pure merge and the store round trip live in their own modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from semprops.domain.normalize import PropertyKeyNormalizer

from .apply import apply_batch
from .locks import EntityLocks

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semprops.domain.model import Entity, FactSet, WriteRequest
    from semprops.domain.ports import PropertyStore

    from .apply import BatchResult


@dataclass(slots=True)
class ReconciliationEngine:
    """Apply write batches to one store, serializing batches per entity."""

    store: PropertyStore
    normalizer: PropertyKeyNormalizer = field(default_factory=PropertyKeyNormalizer)
    locks: EntityLocks = field(default_factory=EntityLocks)

    def read(self, entity: Entity) -> FactSet:
        return self.store.read(entity)

    def normalize(self, raw_key: str) -> str:
        return self.normalizer.normalize(raw_key)

    def apply_batch(
        self,
        entity: Entity,
        raw_batch: Sequence[WriteRequest],
        *,
        comment: str | None = None,
    ) -> BatchResult:
        return apply_batch(
            self.store,
            entity,
            raw_batch,
            locks=self.locks,
            normalizer=self.normalizer,
            comment=comment,
        )
