"""Shared fixtures for building throwaway sites under ``tmp_path``."""

from __future__ import annotations

import json
import typing as typ
from textwrap import dedent

import pytest
from ruamel.yaml import YAML

from polyglot_pages._constants import META_SECTION
from polyglot_pages.config import load_site_config
from polyglot_pages.extraction import SiteExtractor
from polyglot_pages.locale_store import LocaleStore

if typ.TYPE_CHECKING:
    from pathlib import Path

    from polyglot_pages.config import SiteConfig

LOCALE_ROWS: dict[str, dict[str, str]] = {
    "en": {
        "path_prefix": "",
        "og_locale": "en_US",
        "html_lang": "en",
        "name": "English",
        "flag": "GB",
    },
    "de": {"og_locale": "de_DE", "html_lang": "de", "name": "Deutsch", "flag": "DE"},
    "fr": {"og_locale": "fr_FR", "html_lang": "fr", "name": "Français", "flag": "FR"},
    "no": {"og_locale": "nb_NO", "html_lang": "nb", "name": "Norsk", "flag": "NO"},
    "da": {"og_locale": "da_DK", "html_lang": "da", "name": "Dansk", "flag": "DK"},
    "sv": {"og_locale": "sv_SE", "html_lang": "sv", "name": "Svenska", "flag": "SE"},
}

DEFAULT_PAGES: list[dict[str, str]] = [
    {"key": "home", "template": "index.html"},
    {"key": "reviews", "template": "reviews/index.html"},
    {"key": "disclosure", "template": "disclosure.html"},
]

RAW_HOME = dedent(
    """\
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>Best Tesla Mattresses 2025</title>
        <meta name="description" content="Independent reviews of Tesla mattresses.">
        <link rel="canonical" href="https://example.com/">
        <meta property="og:title" content="Best Tesla Mattresses">
        <meta property="og:url" content="https://example.com/">
        <meta property="og:locale" content="en_US">
        <script type="application/ld+json">
        {"@context": "https://schema.org", "@type": "Product", "name": "Comfort Mattress Pro", "description": "A twelve-word description of comfort and quality here.", "brand": {"@type": "Brand", "name": "Acme"}}
        </script>
    </head>
    <body>
        <nav>
            <ul class="nav-links">
                <li><a href="/reviews/">Reviews</a></li>
                <li><a href="/disclosure">About</a></li>
            </ul>
        </nav>
        <h1>Sleep better in your Tesla</h1>
        <p>We tested every mattress so you do not have to.</p>
        <p>€899</p>
        <span class="score-label">Overall score</span>
        <table>
            <tr><th>Thickness</th><th>Price</th></tr>
            <tr><td data-label="Thickness">10 cm</td></tr>
        </table>
        <a href="/reviews/" class="btn btn-primary">Buy Now</a>
        <a href="/styles.css">Stylesheet</a>
        <footer class="footer">
            <p class="footer-tagline">Honest reviews since 2023</p>
            <h4>Resources</h4>
            <a href="/disclosure">About Us</a>
            <p class="disclaimer">We may earn a commission.</p>
        </footer>
        <script>var note = "<p>Not page text</p>";</script>
    </body>
    </html>
    """
)

RAW_REVIEWS = dedent(
    """\
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <title>All Reviews</title>
        <link rel="canonical" href="https://example.com/reviews/">
    </head>
    <body>
        <ul class="nav-links">
            <li><a href="/">Reviews</a></li>
        </ul>
        <h1>Every mattress we tested</h1>
        <a href="/" class="btn">Buy Now</a>
    </body>
    </html>
    """
)

RAW_DISCLOSURE = dedent(
    """\
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <title>Affiliate Disclosure</title>
        <meta name="robots" content="noindex, follow">
        <link rel="canonical" href="https://example.com/disclosure">
    </head>
    <body>
        <h1>How we make money</h1>
        <p>Some links earn us a commission.</p>
        <a href="/">Home page</a>
    </body>
    </html>
    """
)


def write_site_config(
    root: Path,
    *,
    locales: typ.Iterable[str] = tuple(LOCALE_ROWS),
    pages: list[dict[str, str]] | None = None,
    extra_site: dict[str, typ.Any] | None = None,
) -> Path:
    """Write ``site.yaml`` under ``root`` and return its path."""
    site: dict[str, typ.Any] = {
        "base_url": "https://example.com/",
        "brand_name": "Example",
        "source_locale": "en",
        "source_dir": "raw",
        "templates_dir": "templates",
        "locales_dir": "locales",
        "output_dir": "dist",
        "static_files": ["styles.css", "robots.txt"],
        "noindex_pages": ["disclosure"],
    }
    site.update(extra_site or {})
    payload = {
        "site": site,
        "locales": {code: dict(LOCALE_ROWS[code]) for code in locales},
        "pages": pages if pages is not None else DEFAULT_PAGES,
    }
    path = root / "site.yaml"
    yaml = YAML()
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(payload, handle)
    return path


def write_raw_pages(root: Path) -> None:
    """Write the hand-authored sample pages and static files under ``root``."""
    raw = root / "raw"
    (raw / "reviews").mkdir(parents=True, exist_ok=True)
    (raw / "index.html").write_text(RAW_HOME, encoding="utf-8")
    (raw / "reviews" / "index.html").write_text(RAW_REVIEWS, encoding="utf-8")
    (raw / "disclosure.html").write_text(RAW_DISCLOSURE, encoding="utf-8")
    (raw / "styles.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (raw / "robots.txt").write_text("User-agent: *\nAllow: /\n", encoding="utf-8")


def write_dictionary(root: Path, code: str, data: dict[str, typ.Any]) -> Path:
    """Write ``locales/<code>.json`` under ``root``."""
    path = root / "locales" / f"{code}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return a directory holding a config file and the sample raw pages."""
    write_site_config(tmp_path)
    write_raw_pages(tmp_path)
    return tmp_path


@pytest.fixture
def site_config(site_root: Path) -> SiteConfig:
    """Load the configuration written by :func:`site_root`."""
    return load_site_config(site_root / "site.yaml")


@pytest.fixture
def make_config() -> typ.Callable[..., Path]:
    """Return the helper that writes ``site.yaml`` under a directory."""
    return write_site_config


@pytest.fixture
def make_dictionary() -> typ.Callable[[Path, str, dict[str, typ.Any]], Path]:
    """Return the helper that writes ``locales/<code>.json`` under a directory."""
    return write_dictionary


@pytest.fixture
def raw_home() -> str:
    """Return the hand-authored home page."""
    return RAW_HOME


@pytest.fixture
def seeded_site(site_root: Path, site_config: SiteConfig) -> Path:
    """Extract the sample pages and copy the source dictionary to every locale."""
    SiteExtractor(site_config).run()
    store = LocaleStore(site_config.locales_dir, source_locale=site_config.source_locale)
    source = store.source()
    for code in site_config.locales:
        if code != site_config.source_locale:
            meta = site_config.locales[code].to_meta()
            write_dictionary(site_root, code, {**source, META_SECTION: meta})
    return site_root
