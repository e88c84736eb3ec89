"""Tests for the pre-deployment checks over the rendered site."""

from __future__ import annotations

import datetime as dt
import json
import typing as typ

import pytest

from polyglot_pages.builder import SiteBuilder
from polyglot_pages.verification import Diagnostic, Severity, SiteVerifier

if typ.TYPE_CHECKING:
    from pathlib import Path

    from polyglot_pages.config import SiteConfig


@pytest.fixture
def built_site(seeded_site: Path, site_config: SiteConfig) -> Path:
    SiteBuilder(site_config).run(today=dt.date(2025, 6, 1))
    return seeded_site / "dist"


def _messages(report: typ.Any, check: str, severity: Severity) -> list[str]:
    return [item.message for item in report.by_check(check) if item.severity is severity]


def test_complete_build_passes(built_site: Path, site_config: SiteConfig) -> None:
    report = SiteVerifier(site_config).run()

    assert report.ok, [item.format() for item in report.errors]
    assert not report.warnings
    assert "Sitemap: 18 URLs (3 pages x 6 locales)" in _messages(
        report, "sitemap", Severity.PASS
    )


def test_partial_locale_reports_each_placeholder(
    seeded_site: Path,
    site_config: SiteConfig,
    make_dictionary: typ.Callable[..., Path],
) -> None:
    german = json.loads((seeded_site / "locales" / "de.json").read_text(encoding="utf-8"))
    del german["home"]["h1"]
    del german["home"]["p"]
    make_dictionary(seeded_site, "de", german)
    SiteBuilder(site_config).run()

    report = SiteVerifier(site_config).run()

    errors = report.by_check("placeholders")
    assert [item.path for item in errors] == ["de/index.html", "de/index.html"]
    assert [item.message for item in errors] == [
        "de/index.html: unresolved {{t.home.h1}}",
        "de/index.html: unresolved {{t.home.p}}",
    ]
    assert len(report.errors) == 2


def test_missing_files_are_errors(built_site: Path, site_config: SiteConfig) -> None:
    (built_site / "fr" / "reviews" / "index.html").unlink()

    report = SiteVerifier(site_config).run(["fr"])

    assert _messages(report, "completeness", Severity.ERROR) == [
        "Missing: fr/reviews/index.html"
    ]


def test_wrong_html_lang_and_undefined(built_site: Path, site_config: SiteConfig) -> None:
    path = built_site / "sv" / "index.html"
    text = path.read_text(encoding="utf-8")
    text = text.replace('<html lang="sv">', '<html lang="en">')
    text = text.replace("<h1>Sleep better in your Tesla</h1>", "<h1>undefined</h1>")
    path.write_text(text, encoding="utf-8")

    report = SiteVerifier(site_config).run(["sv"])

    assert _messages(report, "html-lang", Severity.ERROR) == [
        'sv/index.html: lang="en" expected "sv"'
    ]
    assert _messages(report, "undefined", Severity.ERROR) == [
        'sv/index.html: 1 "undefined" occurrences'
    ]


def test_missing_hreflang_alternate(built_site: Path, site_config: SiteConfig) -> None:
    path = built_site / "da" / "reviews" / "index.html"
    text = path.read_text(encoding="utf-8")
    text = text.replace('hreflang="fr"', 'hreflang="fr-CA"')
    path.write_text(text, encoding="utf-8")

    report = SiteVerifier(site_config).run(["da"])

    assert _messages(report, "hreflang", Severity.ERROR) == [
        "da/reviews/index.html: missing hreflang for fr"
    ]


def test_sitemap_count_mismatch_is_a_warning(
    built_site: Path, site_config: SiteConfig
) -> None:
    sitemap = built_site / "sitemap.xml"
    head, _, tail = sitemap.read_text(encoding="utf-8").rpartition("  <url>")
    sitemap.write_text(head + tail.split("</url>\n", 1)[1], encoding="utf-8")

    report = SiteVerifier(site_config).run()

    assert report.ok
    assert _messages(report, "sitemap", Severity.WARNING) == [
        "Sitemap: 17 URLs (expected 18)"
    ]


def test_sitemap_entry_without_alternates_is_an_error(
    built_site: Path, site_config: SiteConfig
) -> None:
    sitemap = built_site / "sitemap.xml"
    lines = sitemap.read_text(encoding="utf-8").splitlines(keepends=True)
    kept = [line for line in lines if "xhtml:link" not in line]
    sitemap.write_text("".join(kept), encoding="utf-8")

    report = SiteVerifier(site_config).run(["en"])

    assert len(_messages(report, "sitemap", Severity.ERROR)) == 18


def test_missing_noindex_is_an_error(built_site: Path, site_config: SiteConfig) -> None:
    path = built_site / "de" / "disclosure.html"
    text = path.read_text(encoding="utf-8")
    path.write_text(text.replace('content="noindex, follow"', 'content="index"'), encoding="utf-8")

    report = SiteVerifier(site_config).run()

    assert _messages(report, "noindex", Severity.ERROR) == [
        "de/disclosure.html: missing noindex"
    ]
    assert len(_messages(report, "noindex", Severity.PASS)) == 5


def test_broken_internal_link_is_a_warning(
    built_site: Path, site_config: SiteConfig
) -> None:
    (built_site / "reviews" / "index.html").unlink()

    report = SiteVerifier(site_config).run(["en"])

    broken = _messages(report, "links", Severity.WARNING)
    assert "Broken link: index.html -> /reviews/" in broken
    assert broken[-1].endswith("broken internal links")


def test_template_keys_missing_from_source(
    seeded_site: Path, site_config: SiteConfig
) -> None:
    template = seeded_site / "templates" / "disclosure.html"
    template.write_text(
        template.read_text(encoding="utf-8") + "<p>{{t.disclosure.ghost}}</p>\n",
        encoding="utf-8",
    )

    report = SiteVerifier(site_config).run(["en"])

    assert _messages(report, "key-surface", Severity.ERROR) == [
        "disclosure.html: {{t.disclosure.ghost}} missing from source dictionary"
    ]


def test_diagnostic_format() -> None:
    assert Diagnostic("links", Severity.WARNING, "x").format() == "WARN: x"
    assert Diagnostic("links", Severity.ERROR, "y").format() == "ERROR: y"
