"""Pure reconciliation of a fact set with a validated batch.

Upserts replace the whole value sequence of a key (last write wins inside a
batch), deletes drop the key and ignore absent keys. Existing keys keep their
relative order; new keys are appended in batch order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from semprops.domain.model import FactSet, WriteOp

if TYPE_CHECKING:
    from semprops.domain.model import Value
    from semprops.domain.validation import ValidatedBatch


def reconcile(current: FactSet, batch: ValidatedBatch) -> FactSet:
    """Return the fact set that results from applying ``batch`` to ``current``."""

    working: dict[str, tuple[Value, ...]] = current.to_dict()
    for item in batch.items:
        if item.op is WriteOp.DELETE:
            working.pop(item.key, None)
        elif item.value is not None:
            working[item.key] = (item.value,)
    return FactSet(working)


def absent_deletes(current: FactSet, batch: ValidatedBatch) -> tuple[str, ...]:
    """Keys deleted by ``batch`` that were not present when their delete ran."""

    present = set(current)
    missing: list[str] = []
    for item in batch.items:
        if item.op is WriteOp.DELETE:
            if item.key not in present:
                missing.append(item.key)
            present.discard(item.key)
        else:
            present.add(item.key)
    return tuple(missing)
