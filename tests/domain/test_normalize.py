from __future__ import annotations

import pytest

from semprops.domain.normalize import PropertyKeyNormalizer, normalize_key

SAMPLE_KEYS = [
    "Color",
    "Property:Color",
    "property:Color",
    "Attribut:Couleur",
    "Propriété:Couleur",
    "Property:Attribut:Color",
    "Attribut:Property:Property:Color",
    " Property:Color",
    "Property: Color",
    "Property:",
    "",
    "Category:Color",
]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Color", "Color"),
        ("Property:Color", "Color"),
        ("PROPERTY:Color", "Color"),
        ("Attribut:Couleur", "Couleur"),
        ("Propriété:Couleur", "Couleur"),
        ("Property: Color", " Color"),
        ("Property:color", "color"),
        ("Category:Color", "Category:Color"),
        ("Property:", ""),
    ],
)
def test_normalize_strips_known_prefixes(raw: str, expected: str) -> None:
    assert normalize_key(raw) == expected


@pytest.mark.parametrize("raw", SAMPLE_KEYS)
def test_normalize_is_idempotent(raw: str) -> None:
    normalizer = PropertyKeyNormalizer()

    once = normalizer.normalize(raw)

    assert normalizer.normalize(once) == once


def test_first_matching_prefix_wins() -> None:
    normalizer = PropertyKeyNormalizer(prefixes=("Prop", "Property:"))

    assert normalizer("Property:Color") == "erty:Color"


def test_custom_prefixes_replace_defaults() -> None:
    normalizer = PropertyKeyNormalizer(prefixes=("Eigenschaft:",))

    assert normalizer("Eigenschaft:Farbe") == "Farbe"
    assert normalizer("Property:Farbe") == "Property:Farbe"
