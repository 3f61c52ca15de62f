"""Request and response payloads of the semantic property REST surface."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from semprops.domain.model import WriteRequest, number_text


def coerce_text(value: object) -> object:
    """Turn JSON scalars into text; leave ``None`` and strings untouched."""

    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return number_text(value)
    raise ValueError("must be a string, number or boolean")


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PropertyInput(ApiModel):
    property: str | None = None
    value: str | None = None

    @field_validator("property", "value", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: object) -> object:
        return coerce_text(value)

    def to_request(self) -> WriteRequest:
        return WriteRequest.upsert(self.property, self.value)


class SetPropertiesBody(ApiModel):
    """Either a single ``property``/``value`` pair or a ``properties`` list."""

    property: str | None = None
    value: str | None = None
    properties: list[PropertyInput] | None = None

    @field_validator("property", "value", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: object) -> object:
        return coerce_text(value)

    def items(self) -> list[PropertyInput]:
        if self.properties:
            return list(self.properties)
        if self.property is not None and self.value is not None:
            return [PropertyInput(property=self.property, value=self.value)]
        return []


class PropertyListing(ApiModel):
    label: str
    type: str
    type_id: str
    values: list[Any]
    count: int


class PropertiesResponse(ApiModel):
    title: str
    properties: dict[str, PropertyListing]
    total_properties: int


class PropertyValuesResponse(ApiModel):
    title: str
    property: str
    values: list[str]


class SetPropertiesResponse(ApiModel):
    result: str = "success"
    title: str
    properties: list[PropertyInput]
    count: int


class LegacySetResponse(ApiModel):
    result: str = "success"
    title: str
    property: str
    value: str


class DeletePropertyResponse(ApiModel):
    result: str = "success"
    title: str
    property: str
    message: str = "Property deleted successfully"


class ErrorResponse(ApiModel):
    error: str
    index: int | None = None
    rule: str | None = None
    details: str | None = None
