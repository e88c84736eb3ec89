"""Tests for building the multilingual output tree."""

from __future__ import annotations

import datetime as dt
import json
import typing as typ

from bs4 import BeautifulSoup

from polyglot_pages.builder import SiteBuilder
from polyglot_pages.config import load_site_config
from polyglot_pages.extraction import SiteExtractor
from polyglot_pages.rendering import MissingKind

if typ.TYPE_CHECKING:
    from pathlib import Path

    from polyglot_pages.config import SiteConfig

TODAY = dt.date(2025, 6, 1)


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def test_build_writes_every_page_for_every_locale(
    seeded_site: Path, site_config: SiteConfig
) -> None:
    report = SiteBuilder(site_config).run(today=TODAY)

    dist = seeded_site / "dist"
    assert report.pages_written == 18
    assert report.locales == ["en", "de", "fr", "no", "da", "sv"]
    assert not report.unresolved()
    assert (dist / "index.html").is_file()
    assert (dist / "de" / "reviews" / "index.html").is_file()
    assert (dist / "no" / "disclosure.html").is_file()
    assert (dist / "styles.css").read_text(encoding="utf-8") == "body { margin: 0; }\n"


def test_rendered_page_carries_locale_values(
    seeded_site: Path, site_config: SiteConfig
) -> None:
    SiteBuilder(site_config).run(today=TODAY)
    soup = _soup(seeded_site / "dist" / "no" / "index.html")

    assert soup.html["lang"] == "nb"
    assert soup.find("link", rel="canonical")["href"] == "https://example.com/no/"
    assert soup.find("meta", property="og:locale")["content"] == "nb_NO"
    assert soup.find("a", string="Reviews")["href"] == "/no/reviews/"
    assert soup.select_one("a.lang-active")["href"] == "/no/"
    alternates = soup.find_all("meta", property="og:locale:alternate")
    assert len(alternates) == 5

    script = soup.find("script", type="application/ld+json")
    data = json.loads(script.string)
    assert data["name"] == "Comfort Mattress Pro"


def test_partial_locale_leaves_placeholders(
    seeded_site: Path,
    site_config: SiteConfig,
    make_dictionary: typ.Callable[..., Path],
) -> None:
    german = json.loads((seeded_site / "locales" / "de.json").read_text(encoding="utf-8"))
    del german["home"]["h1"]
    del german["home"]["p"]
    make_dictionary(seeded_site, "de", german)

    report = SiteBuilder(site_config).run(["en", "de"], today=TODAY)

    misses = [(result.locale, item.ref.text, item.kind) for result, item in report.unresolved()]
    assert misses == [
        ("de", "{{t.home.h1}}", MissingKind.MISSING_TRANSLATION),
        ("de", "{{t.home.p}}", MissingKind.MISSING_TRANSLATION),
    ]
    text = (seeded_site / "dist" / "de" / "index.html").read_text(encoding="utf-8")
    assert "<h1>{{t.home.h1}}</h1>" in text


def test_locales_without_dictionary_are_skipped(
    site_root: Path, site_config: SiteConfig
) -> None:
    SiteExtractor(site_config).run()
    report = SiteBuilder(site_config).run(["en", "de"], today=TODAY)

    assert report.locales == ["en"]
    assert report.skipped_locales == ["de"]
    assert not (site_root / "dist" / "de").exists()


def test_missing_templates_are_reported(
    seeded_site: Path, make_config: typ.Callable[..., Path]
) -> None:
    pages = [
        {"key": "home", "template": "index.html"},
        {"key": "guides", "template": "guides/index.html"},
    ]
    config = load_site_config(make_config(seeded_site, pages=pages))
    report = SiteBuilder(config).run(["en"], today=TODAY)

    assert report.missing_templates == ["guides"]
    assert report.pages_written == 1


def test_build_cleans_previous_output(seeded_site: Path, site_config: SiteConfig) -> None:
    stale = seeded_site / "dist" / "old" / "page.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("stale", encoding="utf-8")

    SiteBuilder(site_config).run(["en"], today=TODAY)

    assert not stale.exists()


def test_sitemap_and_robots(seeded_site: Path, site_config: SiteConfig) -> None:
    report = SiteBuilder(site_config).run(["en", "de"], today=TODAY)

    assert report.sitemap_path == seeded_site / "dist" / "sitemap.xml"
    soup = _soup(report.sitemap_path)
    locs = [tag.get_text() for tag in soup.find_all("loc")]
    assert len(locs) == 6
    assert "https://example.com/de/disclosure" in locs
    robots = (seeded_site / "dist" / "robots.txt").read_text(encoding="utf-8")
    assert robots.endswith("Sitemap: https://example.com/sitemap.xml\n")
    assert robots.count("Sitemap:") == 1


def test_undecodable_dictionary_skips_only_that_locale(
    seeded_site: Path, site_config: SiteConfig
) -> None:
    (seeded_site / "locales" / "da.json").write_text("{broken", encoding="utf-8")

    report = SiteBuilder(site_config).run(today=TODAY)

    dist = seeded_site / "dist"
    assert report.skipped_locales == ["da"]
    assert report.locales == ["en", "de", "fr", "no", "sv"]
    assert report.pages_written == 15
    assert (dist / "sv" / "index.html").is_file()
    assert not (dist / "da").exists()
