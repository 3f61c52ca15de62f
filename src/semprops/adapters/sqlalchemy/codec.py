"""JSON payloads for stored data items."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, cast

from semprops.domain.model import (
    BlobItem,
    BooleanItem,
    GeoItem,
    MonolingualItem,
    NumberItem,
    PageItem,
    RecordItem,
    TimeItem,
    UriItem,
    Value,
)

if TYPE_CHECKING:
    from semprops.domain.model import DataItem


class PayloadError(ValueError):
    """Stored payload does not describe a data item."""


def encode_item(item: DataItem) -> str:
    return json.dumps(_item_to_json(item), ensure_ascii=False, separators=(",", ":"))


def decode_value(type_id: str, payload: str) -> Value:
    try:
        loaded = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Invalid JSON payload: {exc}") from exc
    return Value(item=_item_from_json(loaded), type_id=type_id)


def _item_to_json(item: DataItem) -> dict[str, Any]:
    match item:
        case PageItem():
            return {
                "kind": "page",
                "title": item.title,
                "namespace": item.namespace,
                "display_title": item.display_title,
            }
        case NumberItem():
            return {"kind": "number", "number": item.number, "unit": item.unit}
        case TimeItem():
            return {"kind": "time", "raw": item.raw}
        case BooleanItem():
            return {"kind": "boolean", "value": item.value}
        case UriItem():
            return {"kind": "uri", "uri": item.uri}
        case GeoItem():
            return {
                "kind": "geo",
                "latitude": item.latitude,
                "longitude": item.longitude,
                "altitude": item.altitude,
            }
        case MonolingualItem():
            return {"kind": "monolingual", "text": item.text, "language": item.language}
        case BlobItem():
            return {"kind": "blob", "text": item.text}
        case RecordItem():
            return {
                "kind": "record",
                "fields": [
                    [key, [_value_to_json(value) for value in values]]
                    for key, values in item.fields
                ],
            }


def _item_from_json(data: object) -> DataItem:
    if not isinstance(data, dict):
        raise PayloadError("Payload must be an object")
    payload = cast(dict[str, Any], data)
    try:
        kind = payload["kind"]
        match kind:
            case "page":
                return PageItem(
                    title=str(payload["title"]),
                    namespace=int(payload["namespace"]),
                    display_title=payload.get("display_title"),
                )
            case "number":
                return NumberItem(number=float(payload["number"]), unit=payload.get("unit"))
            case "time":
                return TimeItem(raw=str(payload["raw"]))
            case "boolean":
                return BooleanItem(value=bool(payload["value"]))
            case "uri":
                return UriItem(uri=str(payload["uri"]))
            case "geo":
                altitude = payload.get("altitude")
                return GeoItem(
                    latitude=float(payload["latitude"]),
                    longitude=float(payload["longitude"]),
                    altitude=float(altitude) if altitude is not None else None,
                )
            case "monolingual":
                return MonolingualItem(text=str(payload["text"]), language=str(payload["language"]))
            case "blob":
                return BlobItem(text=str(payload["text"]))
            case "record":
                return RecordItem(
                    fields=tuple(
                        (str(key), tuple(_value_from_json(sub) for sub in values))
                        for key, values in payload["fields"]
                    )
                )
            case _:
                raise PayloadError(f"Unknown payload kind: {kind!r}")  # noqa: TRY301
    except PayloadError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise PayloadError(f"Malformed {payload.get('kind')!r} payload: {exc}") from exc


def _value_to_json(value: Value) -> dict[str, Any]:
    return {"type_id": value.type_id, "item": _item_to_json(value.item)}


def _value_from_json(data: Any) -> Value:
    return Value(item=_item_from_json(data["item"]), type_id=str(data["type_id"]))
