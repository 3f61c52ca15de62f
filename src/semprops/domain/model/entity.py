"""Subjects that semantic properties are attached to."""

from __future__ import annotations

import re
from dataclasses import dataclass

from semprops.domain.errors import InputError

_ILLEGAL_TITLE_CHARS = re.compile(r"[#<>\[\]|{}]")
_WHITESPACE_RUN = re.compile(r"\s+")


def canonical_title(raw: str) -> str:
    """Return the wiki-style canonical form of ``raw``.

    Underscores and whitespace runs become single spaces and the first character
    is uppercased. Raises :class:`InputError` for empty or illegal titles.
    """

    text = _WHITESPACE_RUN.sub(" ", raw.replace("_", " ")).strip()
    if not text:
        raise InputError("Invalid or non-existing title")
    if _ILLEGAL_TITLE_CHARS.search(text):
        raise InputError("Invalid or non-existing title")
    return text[0].upper() + text[1:]


@dataclass(frozen=True, slots=True)
class Entity:
    """Opaque subject identifier; equality is by canonical identifier."""

    identifier: str

    @classmethod
    def from_title(cls, raw: str | None) -> Entity:
        if raw is None:
            raise InputError("Missing required parameters: title")
        return cls(canonical_title(raw))

    @property
    def title(self) -> str:
        return self.identifier

    def __str__(self) -> str:
        return self.identifier
