"""Wikitext-backed property store."""

from __future__ import annotations

from .markup import SetStatement, find_statements, render_statement, rewrite_statements
from .pages import FilesystemPageSource, InMemoryPageSource, PageSource, Revision
from .store import WikitextPropertyStore

__all__ = [
    "FilesystemPageSource",
    "InMemoryPageSource",
    "PageSource",
    "Revision",
    "SetStatement",
    "WikitextPropertyStore",
    "find_statements",
    "render_statement",
    "rewrite_statements",
]
