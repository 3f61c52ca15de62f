"""Reading and rewriting ``{{#set:Property=value}}`` statements in page text.

Only single-assignment statements are recognized. ``|`` inside values is
written as ``{{!}}`` and braces as HTML entities so a value never closes its
own statement early.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

SET_STATEMENT = re.compile(
    r"\{\{#set:\s*(?P<key>[^=|{}]+?)\s*=\s*(?P<value>(?:\{\{!\}\}|[^{}])*?)\s*\}\}",
    re.IGNORECASE,
)
_TRAILING_SPACE = re.compile(r"\s*\n?")
_BLANK_RUN = re.compile(r"\n{3,}")
_PIPE_TEMPLATE = "{{!}}"
_ESCAPED = re.compile(r"\{\{!\}\}|&#123;|&#125;|&amp;")
_UNESCAPED = {_PIPE_TEMPLATE: "|", "&#123;": "{", "&#125;": "}", "&amp;": "&"}
_KEY_FORBIDDEN = frozenset("=|{}\n\r")


@dataclass(frozen=True, slots=True)
class SetStatement:
    key: str
    value: str
    start: int
    end: int


def escape_value(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("{", "&#123;")
        .replace("}", "&#125;")
        .replace("|", _PIPE_TEMPLATE)
    )


def unescape_value(text: str) -> str:
    return _ESCAPED.sub(lambda match: _UNESCAPED[match[0]], text)


def is_storable_key(key: str) -> bool:
    """Whether ``key`` reads back unchanged from a rendered statement."""

    return bool(key) and key == key.strip() and _KEY_FORBIDDEN.isdisjoint(key)


def render_statement(key: str, value: str) -> str:
    return f"{{{{#set:{key}={escape_value(value)}}}}}"


def find_statements(text: str) -> list[SetStatement]:
    return [
        SetStatement(
            key=match["key"],
            value=unescape_value(match["value"]),
            start=match.start(),
            end=match.end(),
        )
        for match in SET_STATEMENT.finditer(text)
    ]


def append_statement(text: str, statement: str) -> str:
    """Append ``statement`` on a new line, after a blank line when ``text`` ends mid-line."""

    separator = "\n\n" if text and not text.endswith("\n") else "\n"
    return f"{text}{separator}{statement}"


def collapse_blank_lines(text: str) -> str:
    return _BLANK_RUN.sub("\n\n", text)


def rewrite_statements(
    text: str,
    desired: Mapping[str, Sequence[str]],
    key_of: Callable[[str], str],
) -> str:
    """Make the statements in ``text`` match ``desired`` (canonical key to value texts).

    Statements for kept keys are replaced where they stand; statements for
    dropped keys, and repeats of a kept key, are removed along with trailing
    whitespace; new keys are appended. When the stored key order would not
    match ``desired``, every statement is stripped and all keys are appended.
    """

    existing_order: list[str] = []
    for statement in find_statements(text):
        key = key_of(statement.key)
        if key not in existing_order:
            existing_order.append(key)
    kept = [key for key in existing_order if key in desired]
    expected = kept + [key for key in desired if key not in kept]
    if expected != list(desired):
        text = _rewrite(text, {}, key_of)
    return _rewrite(text, desired, key_of)


def _rewrite(
    text: str,
    desired: Mapping[str, Sequence[str]],
    key_of: Callable[[str], str],
) -> str:
    pieces: list[str] = []
    cursor = 0
    placed: set[str] = set()
    removed = False
    for statement in find_statements(text):
        key = key_of(statement.key)
        pieces.append(text[cursor : statement.start])
        if key in desired and key not in placed:
            placed.add(key)
            pieces.append("\n".join(render_statement(key, value) for value in desired[key]))
            cursor = statement.end
            continue
        trailing = _TRAILING_SPACE.match(text, statement.end)
        cursor = trailing.end() if trailing is not None else statement.end
        removed = True
    pieces.append(text[cursor:])
    result = "".join(pieces)
    if removed:
        result = collapse_blank_lines(result)
    for key, values in desired.items():
        if key in placed:
            continue
        for value in values:
            result = append_statement(result, render_statement(key, value))
    return result
