"""Error kinds shared by the domain services, stores and handlers.

Every error carries an :class:`ErrorKind` and the HTTP status the REST surface
reports for it. Domain services hand these back inside result objects for
expected failures; store adapters raise them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    INPUT = "input"
    VALIDATION = "validation"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    STORE = "store"
    INTERNAL = "internal"


class ValidationRule(StrEnum):
    """Batch validation rules, in the order they are checked per item."""

    REQUIRED = "required"
    RECOGNIZED_PROPERTY = "recognized_property"
    WELL_FORMED_VALUE = "well_formed_value"


class SemanticPropertyError(Exception):
    """Base class for all expected failures."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    status: ClassVar[int] = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, object]:
        return {"error": self.message}


class InputError(SemanticPropertyError):
    """Missing, empty or malformed request fields."""

    kind = ErrorKind.INPUT
    status = 400


class ValidationError(SemanticPropertyError):
    """A batch item failed a property or value rule."""

    kind = ErrorKind.VALIDATION
    status = 400

    def __init__(self, *, index: int, rule: ValidationRule, reason: str) -> None:
        super().__init__(reason)
        self.index = index
        self.rule = rule
        self.reason = reason

    def to_payload(self) -> dict[str, object]:
        return {"error": self.reason, "index": self.index, "rule": str(self.rule)}


class PermissionDeniedError(SemanticPropertyError):
    """Raised by the authorization collaborator, never by the core."""

    kind = ErrorKind.PERMISSION
    status = 403

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message)


class NotFoundError(SemanticPropertyError):
    """Entity or property absent."""

    kind = ErrorKind.NOT_FOUND
    status = 404


class EntityNotFoundError(NotFoundError):
    """The entity does not exist; reported like a malformed title."""

    status = 400

    def __init__(self, message: str = "Invalid or non-existing title") -> None:
        super().__init__(message)


class StoreError(SemanticPropertyError):
    """Persistence failure; ``cause`` holds the underlying message."""

    kind = ErrorKind.STORE
    status = 500

    def __init__(self, message: str, *, cause: str | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"error": self.message}
        if self.cause:
            payload["details"] = self.cause
        return payload


class ValueParseError(ValueError):
    """Value text does not form a well-formed value for the declared type."""
