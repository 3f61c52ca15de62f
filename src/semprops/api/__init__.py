"""REST surface for semantic properties."""

from __future__ import annotations

from .app import build_router, create_app, read_payload
from .auth import EDITOR, READER, Authority, StaticAuthority, TokenAuthorizer
from .handlers import HandlerResponse, SemanticPropertyHandlers, error_response

__all__ = [
    "EDITOR",
    "READER",
    "Authority",
    "HandlerResponse",
    "SemanticPropertyHandlers",
    "StaticAuthority",
    "TokenAuthorizer",
    "build_router",
    "create_app",
    "error_response",
    "read_payload",
]
