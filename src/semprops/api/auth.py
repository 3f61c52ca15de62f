"""Edit permission checks for the REST surface."""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Final, Protocol, runtime_checkable

READ_ACTION: Final[str] = "read"
EDIT_ACTION: Final[str] = "edit"
_BEARER_PREFIX = "bearer "


@runtime_checkable
class Authority(Protocol):
    def is_allowed(self, action: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class StaticAuthority:
    actions: frozenset[str] = frozenset({READ_ACTION})

    def is_allowed(self, action: str) -> bool:
        return action in self.actions


READER: Final[StaticAuthority] = StaticAuthority()
EDITOR: Final[StaticAuthority] = StaticAuthority(frozenset({READ_ACTION, EDIT_ACTION}))


def bearer_token(header: str | None) -> str | None:
    if header is None or not header.lower().startswith(_BEARER_PREFIX):
        return None
    token = header[len(_BEARER_PREFIX) :].strip()
    return token or None


@dataclass(frozen=True, slots=True)
class TokenAuthorizer:
    """Grant edit rights to callers presenting the configured bearer token.

    Without a configured token nobody may edit unless anonymous edits are on.
    """

    edit_token: str | None = None
    allow_anonymous_edits: bool = False

    def authority_for(self, authorization: str | None) -> Authority:
        if self.allow_anonymous_edits:
            return EDITOR
        token = bearer_token(authorization)
        if self.edit_token is not None and token is not None:
            if hmac.compare_digest(token.encode(), self.edit_token.encode()):
                return EDITOR
        return READER
