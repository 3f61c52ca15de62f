"""FastAPI routes for the semantic property endpoints."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, FastAPI, Header, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .auth import Authority, TokenAuthorizer  # noqa: TC001

if TYPE_CHECKING:
    from .handlers import HandlerResponse, SemanticPropertyHandlers

log = logging.getLogger(__name__)

ROUTE_PREFIX = "/semanticproperty"


def _json(response: HandlerResponse) -> JSONResponse:
    return JSONResponse(status_code=response.status, content=response.body)


def _form_fields(raw: bytes) -> dict[str, Any]:
    parsed = parse_qs(raw.decode("utf-8", errors="replace"), keep_blank_values=True)
    return {name: values[0] for name, values in parsed.items()}


async def read_payload(request: Request) -> dict[str, Any] | None:
    """Return the body as a JSON object, falling back to url-encoded form fields."""

    raw = await request.body()
    if not raw.strip():
        return None
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/x-www-form-urlencoded"):
        return _form_fields(raw)
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _form_fields(raw)
    return data if isinstance(data, dict) else None


def build_router(handlers: SemanticPropertyHandlers, authorizer: TokenAuthorizer) -> APIRouter:
    router = APIRouter(prefix=ROUTE_PREFIX, tags=["semanticproperty"])

    def authority(authorization: str | None = Header(default=None)) -> Authority:
        return authorizer.authority_for(authorization)

    @router.get("")
    def legacy_get(
        title: str | None = None,
        property_name: str | None = Query(default=None, alias="property"),
    ) -> JSONResponse:
        return _json(handlers.get_property(title, property_name))

    @router.post("")
    async def legacy_set(
        request: Request,
        caller: Authority = Depends(authority),
    ) -> JSONResponse:
        payload = await read_payload(request) or {}
        fields = {name: payload.get(name) for name in ("title", "property", "value")}
        texts = {name: value if isinstance(value, str) else None for name, value in fields.items()}
        response = await run_in_threadpool(
            handlers.legacy_set, texts["title"], texts["property"], texts["value"], caller
        )
        return _json(response)

    @router.get("/{title}")
    def get_properties(
        title: str,
        property_name: str | None = Query(default=None, alias="property"),
    ) -> JSONResponse:
        if property_name is not None:
            return _json(handlers.get_property(title, property_name))
        return _json(handlers.get_properties(title))

    async def set_properties(
        title: str,
        request: Request,
        caller: Authority = Depends(authority),
    ) -> JSONResponse:
        payload = await read_payload(request)
        response = await run_in_threadpool(handlers.set_properties, title, payload, caller)
        return _json(response)

    router.add_api_route("/{title}", set_properties, methods=["POST", "PUT"])

    @router.delete("/{title}/{property_name}")
    def delete_property(
        title: str,
        property_name: str,
        caller: Authority = Depends(authority),
    ) -> JSONResponse:
        return _json(handlers.delete_property(title, property_name, caller))

    return router


def create_app(
    handlers: SemanticPropertyHandlers,
    authorizer: TokenAuthorizer | None = None,
) -> FastAPI:
    app = FastAPI(title="Semantic properties")
    app.include_router(build_router(handlers, authorizer or TokenAuthorizer()))
    log.info("Semantic property routes mounted at %s", ROUTE_PREFIX)
    return app
