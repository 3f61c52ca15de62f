"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import PropertyRegistry, PropertyStore

__all__ = [
    "PropertyRegistry",
    "PropertyStore",
]
