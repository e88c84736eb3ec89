"""Typed dataclasses describing polyglot site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(frozen=True, slots=True)
class LocaleMetadata:
    """Static per-locale values that drive structural placeholder resolution."""

    code: str
    path_prefix: str
    og_locale: str
    html_lang: str
    hreflang: str
    name: str
    flag: str
    language_name: str | None = None
    instructions: str = ""

    def to_meta(self) -> dict[str, str]:
        """Return the ``_meta`` section stored alongside the locale dictionary."""
        return {
            "locale": self.code,
            "locale_path": self.path_prefix,
            "og_locale": self.og_locale,
            "html_lang": self.html_lang,
        }


@dc.dataclass(frozen=True, slots=True)
class PageDescriptor:
    """One logical page, identified by ``key`` across every locale."""

    key: str
    template: str
    output: str
    redirect_to: str | None = None

    @property
    def is_redirect(self) -> bool:
        """Return ``True`` for redirect-only pages."""
        return self.redirect_to is not None

    @property
    def url_path(self) -> str:
        """Return the clean URL path (``reviews/`` for ``reviews/index.html``)."""
        path = self.output
        if path.endswith("index.html"):
            return path[: -len("index.html")]
        if path.endswith(".html"):
            return path[: -len(".html")]
        return path

    @property
    def is_directory_index(self) -> bool:
        """Return ``True`` when the page is served as a directory index."""
        return self.output.endswith("index.html")


@dc.dataclass(slots=True)
class ExtractionVocabulary:
    """Closed vocabularies recognised by the extraction passes."""

    nav_labels: dict[str, str]
    shared_buttons: dict[str, str]
    span_classes: list[str]
    div_classes: list[str]
    link_classes: list[str]
    footer_headings: dict[str, str]
    footer_links: dict[str, str]
    region_names: dict[str, str]


@dc.dataclass(slots=True)
class TranslationConfig:
    """Settings for the HTTP translation adapter."""

    model: str = "claude-sonnet-4-20250514"
    endpoint: str = "https://api.anthropic.com/v1/messages"
    api_key_env: str = "ANTHROPIC_API_KEY"
    max_tokens: int = 8192
    site_description: str = "a product review website"
    protected_terms: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class SiteConfig:
    """Page and locale registries alongside the directories the stages use."""

    base_url: str
    brand_name: str
    source_locale: str
    locales: dict[str, LocaleMetadata]
    pages: list[PageDescriptor]
    vocabulary: ExtractionVocabulary
    source_dir: Path = Path()
    templates_dir: Path = Path("src/templates")
    locales_dir: Path = Path("src/locales")
    output_dir: Path = Path("dist")
    static_files: list[str] = dc.field(default_factory=list)
    static_dirs: list[str] = dc.field(default_factory=list)
    noindex_pages: list[str] = dc.field(default_factory=list)
    hreflang_exempt: list[str] = dc.field(default_factory=list)
    translation: TranslationConfig = dc.field(default_factory=TranslationConfig)

    @property
    def source(self) -> LocaleMetadata:
        """Return the metadata of the authoritative source locale."""
        return self.locales[self.source_locale]

    def get_page(self, page_key: str) -> PageDescriptor:
        """Return the page registered under ``page_key``."""
        for page in self.pages:
            if page.key == page_key:
                return page
        available = ", ".join(page.key for page in self.pages)
        msg = f"Unknown page '{page_key}'. Known pages: {available}"
        raise KeyError(msg)

    def select_locales(self, codes: list[str] | None = None) -> list[LocaleMetadata]:
        """Return the requested locales in registry order (all when ``None``).

        Raises
        ------
        SiteConfigError
            If any requested code is not a configured locale.
        """
        if not codes:
            return list(self.locales.values())
        unknown = [code for code in codes if code not in self.locales]
        if unknown:
            msg = f"Unknown locale(s): {', '.join(unknown)}"
            raise SiteConfigError(msg)
        return [meta for code, meta in self.locales.items() if code in codes]

    def is_hreflang_exempt(self, page: PageDescriptor) -> bool:
        """Return ``True`` when ``page`` is excluded from hreflang checks."""
        return page.is_redirect or page.key in self.hreflang_exempt


__all__ = [
    "ExtractionVocabulary",
    "LocaleMetadata",
    "PageDescriptor",
    "SiteConfig",
    "SiteConfigError",
    "TranslationConfig",
]
