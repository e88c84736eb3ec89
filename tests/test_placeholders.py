from __future__ import annotations

import pytest

from polyglot_pages import placeholders
from polyglot_pages.placeholders import StructuralRef, TranslationRef


def test_translation_placeholder_text() -> None:
    assert placeholders.translation("shared", "nav_about") == "{{t.shared.nav_about}}"
    assert TranslationRef("home", "h1").text == "{{t.home.h1}}"


def test_structural_rejects_unknown_names() -> None:
    assert placeholders.structural("langSwitcher") == "{{langSwitcher}}"
    with pytest.raises(ValueError, match="Unknown structural placeholder"):
        placeholders.structural("footerLogo")


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("{{t.home.h1}}", TranslationRef("home", "h1")),
        ("{{t.shared.th_price_(eur)}}", TranslationRef("shared", "th_price_(eur)")),
        ("{{canonicalUrl}}", StructuralRef("canonicalUrl")),
        ("{{t.home}}", None),
        ("{{somethingElse}}", None),
        ("plain text", None),
    ],
)
def test_parse(token: str, expected: object) -> None:
    assert placeholders.parse(token) == expected


def test_refs_found_inside_attributes_and_json() -> None:
    text = (
        '<meta content="{{t.home.og_title}}">'
        '<script type="application/ld+json">{"name": "{{t.home.jsonld_1_name_1}}"}</script>'
        '<html lang="{{htmlLang}}">'
    )
    keys = [ref.key for ref in placeholders.iter_translation_refs(text)]
    names = [ref.name for ref in placeholders.iter_structural_refs(text)]
    assert keys == ["og_title", "jsonld_1_name_1"]
    assert names == ["htmlLang"]


def test_find_unresolved_catches_malformed_references() -> None:
    text = "<p>{{t.home.h1}}</p><p>{{t.home.bad/key}}</p><p>{{pageUrl}}</p>"
    assert placeholders.find_unresolved(text) == ["{{t.home.h1}}", "{{t.home.bad/key}}"]


def test_placeholder_predicates() -> None:
    assert placeholders.is_placeholder_text("  {{t.home.p}}")
    assert not placeholders.is_placeholder_text("Hello {{t.home.p}}")
    assert placeholders.contains_placeholder("Hello {{t.home.p}}")
