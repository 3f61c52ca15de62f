"""Reconciliation core for property write batches.

Layered flow:
1) validate the raw batch (required fields, recognized property, value type)
2) lock the entity and read its current fact set from the store
3) reconcile the fact set with the batch (pure)
4) write the new snapshot back when it changed
"""

from __future__ import annotations

from .apply import BatchResult, apply_batch
from .core import absent_deletes, reconcile
from .engine import ReconciliationEngine
from .locks import EntityLocks

__all__ = [
    "BatchResult",
    "EntityLocks",
    "ReconciliationEngine",
    "absent_deletes",
    "apply_batch",
    "reconcile",
]
