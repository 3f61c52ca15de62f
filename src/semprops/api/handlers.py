"""Framework-neutral handlers for the semantic property endpoints.

Each handler returns a :class:`HandlerResponse`. Expected failures become
``{"error": ...}`` bodies with the error's status; anything else is logged and
reported as an opaque internal error.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

import pydantic

from semprops.domain.errors import (
    InputError,
    NotFoundError,
    PermissionDeniedError,
    SemanticPropertyError,
)
from semprops.domain.formatting import ValueFormatter
from semprops.domain.model import Entity, WriteRequest, type_label
from semprops.domain.parsing import value_to_text

from .auth import EDIT_ACTION
from .schemas import (
    DeletePropertyResponse,
    LegacySetResponse,
    PropertiesResponse,
    PropertyListing,
    PropertyValuesResponse,
    SetPropertiesBody,
    SetPropertiesResponse,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from semprops.domain.reconciliation import ReconciliationEngine

    from .auth import Authority

log = logging.getLogger(__name__)

SET_COMMENT: Final[str] = "Updated properties via SemanticAPI"
INTERNAL_ERROR: Final[str] = "Internal server error"
MISSING_TITLE: Final[str] = "Missing required parameters: title"
MISSING_TITLE_OR_PROPERTY: Final[str] = "Missing required parameters: title or property"
MISSING_TITLE_OR_PROPERTIES: Final[str] = "Missing required parameters: title or properties"


def delete_comment(property_name: str) -> str:
    return f"Deleted property {property_name} via SemanticAPI"


@dataclass(frozen=True, slots=True)
class HandlerResponse:
    status: int
    body: dict[str, Any]


def error_response(error: SemanticPropertyError) -> HandlerResponse:
    return HandlerResponse(status=error.status, body=error.to_payload())


def _guarded[**P](handler: Callable[P, HandlerResponse]) -> Callable[P, HandlerResponse]:
    @functools.wraps(handler)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> HandlerResponse:
        try:
            return handler(*args, **kwargs)
        except SemanticPropertyError as error:
            if error.status >= 500:  # noqa: PLR2004
                log.error("%s failed: %s", handler.__name__, error)
            return error_response(error)
        except Exception:  # noqa: BLE001
            log.exception("Unexpected failure in %s", handler.__name__)
            return HandlerResponse(status=500, body={"error": INTERNAL_ERROR})

    return wrapper


def parse_set_body(payload: Mapping[str, Any] | None) -> SetPropertiesBody:
    if not payload:
        return SetPropertiesBody()
    try:
        return SetPropertiesBody.model_validate(payload)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InputError(f"Invalid request body at {location}: {first['msg']}") from exc


@dataclass(slots=True)
class SemanticPropertyHandlers:
    engine: ReconciliationEngine
    formatter: ValueFormatter = field(default_factory=ValueFormatter)

    @_guarded
    def get_properties(self, title: str | None) -> HandlerResponse:
        if not title:
            raise InputError(MISSING_TITLE)
        entity = Entity.from_title(title)
        facts = self.engine.read(entity)
        listings: dict[str, PropertyListing] = {}
        for key, values in facts.items():
            declaration = self.engine.store.describe(key)
            type_id = declaration.type_id if declaration is not None else values[0].type_id
            listings[key] = PropertyListing(
                label=declaration.display_label if declaration is not None else key,
                type=type_label(type_id),
                type_id=type_id,
                values=[self.formatter.format(value) for value in values],
                count=len(values),
            )
        body = PropertiesResponse(
            title=entity.title, properties=listings, total_properties=len(listings)
        )
        return HandlerResponse(status=200, body=body.model_dump())

    @_guarded
    def get_property(self, title: str | None, property_name: str | None) -> HandlerResponse:
        if not title or not property_name:
            raise InputError(MISSING_TITLE_OR_PROPERTY)
        entity = Entity.from_title(title)
        key = self.engine.normalize(property_name)
        facts = self.engine.read(entity)
        declaration = self.engine.store.describe(key) if key in facts else None
        values = [value_to_text(value, declaration) for value in facts.values_for(key)]
        body = PropertyValuesResponse(title=entity.title, property=key, values=values)
        return HandlerResponse(status=200, body=body.model_dump())

    @_guarded
    def set_properties(
        self,
        title: str | None,
        payload: Mapping[str, Any] | None,
        authority: Authority,
    ) -> HandlerResponse:
        items = parse_set_body(payload).items()
        if not title or not items:
            raise InputError(MISSING_TITLE_OR_PROPERTIES)
        entity = Entity.from_title(title)
        self._require_edit(authority)
        result = self.engine.apply_batch(
            entity, [item.to_request() for item in items], comment=SET_COMMENT
        )
        result.unwrap()
        body = SetPropertiesResponse(title=entity.title, properties=items, count=len(items))
        return HandlerResponse(status=200, body=body.model_dump())

    @_guarded
    def delete_property(
        self,
        title: str | None,
        property_name: str | None,
        authority: Authority,
    ) -> HandlerResponse:
        if not title or not property_name:
            raise InputError(MISSING_TITLE_OR_PROPERTY)
        entity = Entity.from_title(title)
        self._require_edit(authority)
        result = self.engine.apply_batch(
            entity, [WriteRequest.delete(property_name)], comment=delete_comment(property_name)
        )
        result.unwrap()
        if result.absent_deletes:
            raise NotFoundError("Property not found on this page")
        body = DeletePropertyResponse(
            title=entity.title, property=self.engine.normalize(property_name)
        )
        return HandlerResponse(status=200, body=body.model_dump())

    @_guarded
    def legacy_set(
        self,
        title: str | None,
        property_name: str | None,
        value: str | None,
        authority: Authority,
    ) -> HandlerResponse:
        """Single-value write of the query-style endpoint."""

        if not title or not property_name:
            raise InputError(MISSING_TITLE_OR_PROPERTY)
        entity = Entity.from_title(title)
        self._require_edit(authority)
        if not value:
            raise InputError("Missing value parameter")
        result = self.engine.apply_batch(
            entity, [WriteRequest.upsert(property_name, value)], comment=SET_COMMENT
        )
        result.unwrap()
        body = LegacySetResponse(
            title=entity.title, property=self.engine.normalize(property_name), value=value
        )
        return HandlerResponse(status=200, body=body.model_dump())

    @staticmethod
    def _require_edit(authority: Authority) -> None:
        if not authority.is_allowed(EDIT_ACTION):
            raise PermissionDeniedError()
