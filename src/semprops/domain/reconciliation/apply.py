"""Validate, read, reconcile and write one batch for one entity.

Responsibilities of this stage:
- reject the whole batch on the first invalid item, before touching the store
- hold the entity lock across the read-modify-write cycle
- skip the write when the batch does not change the fact set
- turn store failures into a failed result without partial updates
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semprops.domain.errors import NotFoundError, SemanticPropertyError, StoreError
from semprops.domain.normalize import PropertyKeyNormalizer
from semprops.domain.validation import PropertyBatchValidator

from .core import absent_deletes, reconcile

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semprops.domain.model import Entity, FactSet, WriteRequest
    from semprops.domain.ports import PropertyStore

    from .locks import EntityLocks

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome of one batch; ``error`` is set when nothing was persisted."""

    entity: Entity
    facts: FactSet | None = None
    previous: FactSet | None = None
    changed: bool = False
    applied: int = 0
    absent_deletes: tuple[str, ...] = ()
    error: SemanticPropertyError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> FactSet:
        if self.error is not None:
            raise self.error
        if self.facts is None:
            raise RuntimeError("Batch result holds neither facts nor an error")
        return self.facts


def apply_batch(
    store: PropertyStore,
    entity: Entity,
    raw_batch: Sequence[WriteRequest],
    *,
    locks: EntityLocks | None = None,
    normalizer: PropertyKeyNormalizer | None = None,
    comment: str | None = None,
) -> BatchResult:
    """Apply ``raw_batch`` to ``entity`` in ``store`` as one atomic unit.

    Concurrent callers sharing ``store`` must share ``locks`` so that batches
    for the same entity are serialized.
    """

    validator = PropertyBatchValidator(store, normalizer or PropertyKeyNormalizer())
    try:
        validation = validator.validate(raw_batch)
    except StoreError as error:
        log.error("Could not look up properties for %s: %s (%s)", entity, error, error.cause)
        return BatchResult(entity=entity, error=error)
    if validation.error is not None:
        return BatchResult(entity=entity, error=validation.error)
    batch = validation.unwrap()

    with locks.hold(entity) if locks is not None else nullcontext():
        try:
            current = store.read(entity)
        except (NotFoundError, StoreError) as error:
            log.warning("Could not read %s: %s", entity, error)
            return BatchResult(entity=entity, error=error)

        facts = reconcile(current, batch)
        changed = facts != current
        if changed:
            try:
                store.write(entity, facts, comment=comment)
            except StoreError as error:
                log.error("Store rejected batch for %s: %s (%s)", entity, error, error.cause)
                return BatchResult(entity=entity, previous=current, error=error)

    log.info(
        "Applied batch to %s: items=%s, changed=%s, keys=%s",
        entity,
        len(batch),
        changed,
        len(facts),
    )
    return BatchResult(
        entity=entity,
        facts=facts,
        previous=current,
        changed=changed,
        applied=len(batch),
        absent_deletes=absent_deletes(current, batch),
    )
