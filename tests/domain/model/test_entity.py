from __future__ import annotations

import pytest

from semprops.domain.errors import InputError
from semprops.domain.model import Entity, canonical_title


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("PageX", "PageX"),
        ("main_page", "Main page"),
        ("  spaced   out  title ", "Spaced out title"),
        ("Maraîchage", "Maraîchage"),
        ("été", "Été"),
    ],
)
def test_canonical_title(raw: str, expected: str) -> None:
    assert canonical_title(raw) == expected


@pytest.mark.parametrize(
    "raw", ["", "   ", "___", "A|B", "Page#Section", "{{Template}}", "[[Link]]"]
)
def test_invalid_titles_are_rejected(raw: str) -> None:
    with pytest.raises(InputError, match="Invalid or non-existing title"):
        Entity.from_title(raw)


def test_missing_title_is_an_input_error() -> None:
    with pytest.raises(InputError, match="Missing required parameters"):
        Entity.from_title(None)


def test_entities_compare_by_canonical_identifier() -> None:
    assert Entity.from_title("page_x") == Entity.from_title("Page x")
    assert str(Entity.from_title("page_x")) == "Page x"
    assert Entity.from_title("page_x").title == "Page x"
    assert len({Entity.from_title("a"), Entity.from_title("A")}) == 1
