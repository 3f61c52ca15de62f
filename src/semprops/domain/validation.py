"""Batch validation ahead of any mutation.

Each item is checked against three rules in order: required fields present,
property recognized by the store, value well formed for the property type.
Validation stops at the first failing item and the batch is rejected whole.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from semprops.domain.errors import ValidationError, ValidationRule, ValueParseError
from semprops.domain.model import WriteOp
from semprops.domain.normalize import PropertyKeyNormalizer
from semprops.domain.parsing import parse_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semprops.domain.model import PropertyDeclaration, Value, WriteRequest
    from semprops.domain.ports import PropertyRegistry

log = logging.getLogger(__name__)

SYSTEM_KEY_PREFIX = "_"


@dataclass(frozen=True, slots=True)
class ValidatedItem:
    """A batch item that passed every rule; ``value`` is ``None`` for deletes."""

    index: int
    key: str
    op: WriteOp
    raw_property: str
    value: Value | None = None
    raw_value: str | None = None


@dataclass(frozen=True, slots=True)
class ValidatedBatch:
    items: tuple[ValidatedItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    @property
    def upserts(self) -> tuple[ValidatedItem, ...]:
        return tuple(item for item in self.items if item.op is WriteOp.UPSERT)

    @property
    def deletes(self) -> tuple[ValidatedItem, ...]:
        return tuple(item for item in self.items if item.op is WriteOp.DELETE)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    batch: ValidatedBatch | None = None
    error: ValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ValidatedBatch:
        if self.error is not None:
            raise self.error
        if self.batch is None:
            raise RuntimeError("Validation result holds neither a batch nor an error")
        return self.batch


@dataclass(slots=True)
class PropertyBatchValidator:
    registry: PropertyRegistry
    normalizer: PropertyKeyNormalizer = field(default_factory=PropertyKeyNormalizer)

    def validate(self, batch: Sequence[WriteRequest]) -> ValidationResult:
        items: list[ValidatedItem] = []
        for index, request in enumerate(batch):
            try:
                items.append(self._validate_item(index, request))
            except ValidationError as error:
                log.info(
                    "Rejected batch at item %s (%s): %s", error.index, error.rule, error.reason
                )
                return ValidationResult(error=error)
        return ValidationResult(batch=ValidatedBatch(tuple(items)))

    def _validate_item(self, index: int, request: WriteRequest) -> ValidatedItem:
        raw_property = request.property
        if raw_property is None or (request.op is WriteOp.UPSERT and request.value is None):
            raise ValidationError(
                index=index,
                rule=ValidationRule.REQUIRED,
                reason=f"Missing property or value in item {index}",
            )
        if not raw_property.strip() or (request.op is WriteOp.UPSERT and request.value == ""):
            raise ValidationError(
                index=index,
                rule=ValidationRule.REQUIRED,
                reason=f"Empty property name or value in item {index}",
            )

        key = self.normalizer.normalize(raw_property)

        if request.op is WriteOp.DELETE:
            self._check_deletable(index, key)
            return ValidatedItem(index=index, key=key, op=request.op, raw_property=raw_property)

        declaration = self._recognized(index, key)
        raw_value = request.value or ""
        try:
            value = parse_value(raw_value, declaration, self.registry)
        except ValueParseError as exc:
            raise ValidationError(
                index=index,
                rule=ValidationRule.WELL_FORMED_VALUE,
                reason=f"Invalid value for property {key!r} in item {index}: {exc}",
            ) from exc
        return ValidatedItem(
            index=index,
            key=key,
            op=request.op,
            raw_property=raw_property,
            value=value,
            raw_value=raw_value,
        )

    def _check_deletable(self, index: int, key: str) -> None:
        # Undeclared keys may still be present in stored markup and can be removed.
        declaration = self.registry.describe(key) if key.strip() else None
        reserved = key.startswith(SYSTEM_KEY_PREFIX) or (
            declaration is not None and not declaration.user_defined
        )
        if not key.strip() or reserved:
            raise ValidationError(
                index=index,
                rule=ValidationRule.RECOGNIZED_PROPERTY,
                reason=f"Unknown or reserved property {key!r} in item {index}",
            )

    def _recognized(self, index: int, key: str) -> PropertyDeclaration:
        declaration = None
        if key.strip() and not key.startswith(SYSTEM_KEY_PREFIX):
            declaration = self.registry.describe(key)
        if declaration is None or not declaration.user_defined:
            raise ValidationError(
                index=index,
                rule=ValidationRule.RECOGNIZED_PROPERTY,
                reason=f"Unknown or reserved property {key!r} in item {index}",
            )
        return declaration
