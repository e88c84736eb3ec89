"""Resolve structural placeholders from locale metadata and the page path.

The hreflang block, Open Graph alternates and language switcher depend on
the full locale registry, so they are produced from Jinja templates shipped
in ``polyglot_pages/templates`` rather than looked up in a dictionary.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from polyglot_pages._constants import X_DEFAULT_HREFLANG
from polyglot_pages.placeholders import (
    CANONICAL_URL,
    HREFLANG_TAGS,
    HTML_LANG,
    LANG_SWITCHER,
    LOCALE_PATH,
    OG_LOCALE,
    OG_LOCALE_ALTERNATES,
    PAGE_URL,
    STRUCTURAL_PATTERN,
)

if typ.TYPE_CHECKING:
    from polyglot_pages.config import LocaleMetadata, PageDescriptor

HEAD_SEPARATOR = "\n    "
SWITCHER_SEPARATOR = "\n            "
DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"


def template_environment(templates_dir: Path | None = None) -> Environment:
    """Return the Jinja environment used for generated markup."""
    return Environment(
        loader=FileSystemLoader(str(templates_dir or DEFAULT_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"], default=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )


class StructuralBlocks:
    """Compute every structural placeholder value for a site's locales."""

    def __init__(
        self,
        base_url: str,
        locales: typ.Sequence[LocaleMetadata],
        *,
        source: LocaleMetadata,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        base_url : str
            Site origin without a trailing slash.
        locales : Sequence[LocaleMetadata]
            Every configured locale, in registry order; alternates always
            cover the whole registry, not just the locales being built.
        source : LocaleMetadata
            Source locale; its path is the ``x-default`` target.
        templates_dir : Path, optional
            Override for the directory holding the block templates.
        """
        self.base_url = base_url.rstrip("/")
        self.locales = list(locales)
        self.source = source
        self.env = template_environment(templates_dir)
        self._hreflang = self.env.get_template("hreflang_tags.jinja")
        self._og_alternates = self.env.get_template("og_locale_alternates.jinja")
        self._switcher = self.env.get_template("lang_switcher.jinja")

    def page_url(self, page: PageDescriptor, locale: LocaleMetadata) -> str:
        """Return the absolute URL of ``page`` in ``locale``.

        Examples
        --------
        >>> from polyglot_pages.config import LocaleMetadata, PageDescriptor
        >>> de = LocaleMetadata("de", "de/", "de_DE", "de", "de", "Deutsch", "")
        >>> blocks = StructuralBlocks("https://example.com", [de], source=de)
        >>> page = PageDescriptor("reviews", "reviews/index.html", "reviews/index.html")
        >>> blocks.page_url(page, de)
        'https://example.com/de/reviews/'
        """
        return f"{self.base_url}/{locale.path_prefix}{page.url_path}"

    def x_default_url(self, page: PageDescriptor) -> str:
        """Return the ``x-default`` target for ``page``."""
        return self.page_url(page, self.source)

    def alternates(self, page: PageDescriptor) -> list[dict[str, str]]:
        """Return ``hreflang``/``href`` pairs for every locale plus x-default."""
        links = [
            {"hreflang": meta.hreflang, "href": self.page_url(page, meta)}
            for meta in self.locales
        ]
        links.append({"hreflang": X_DEFAULT_HREFLANG, "href": self.x_default_url(page)})
        return links

    def hreflang_tags(self, page: PageDescriptor) -> str:
        """Return the ``<link rel="alternate">`` block for ``page``."""
        links = self.alternates(page)[:-1]
        return self._hreflang.render(
            links=links,
            x_default=self.x_default_url(page),
            separator=HEAD_SEPARATOR,
        )

    def og_locale_alternates(self, locale: LocaleMetadata) -> str:
        """Return ``og:locale:alternate`` tags for every other locale."""
        others = [meta.og_locale for meta in self.locales if meta.code != locale.code]
        return self._og_alternates.render(alternates=others, separator=HEAD_SEPARATOR)

    def lang_switcher(self, page: PageDescriptor, locale: LocaleMetadata) -> str:
        """Return the language switcher markup with ``locale`` marked active."""
        items = [
            {
                "href": f"/{meta.path_prefix}{page.url_path}",
                "flag": meta.flag,
                "name": meta.name,
                "active": meta.code == locale.code,
            }
            for meta in self.locales
        ]
        return self._switcher.render(
            current=locale, items=items, separator=SWITCHER_SEPARATOR
        )

    def values(self, page: PageDescriptor, locale: LocaleMetadata) -> dict[str, str]:
        """Return the text for every structural name on ``page`` in ``locale``."""
        url = self.page_url(page, locale)
        return {
            HTML_LANG: locale.html_lang,
            OG_LOCALE: locale.og_locale,
            LOCALE_PATH: locale.path_prefix,
            CANONICAL_URL: url,
            PAGE_URL: url,
            HREFLANG_TAGS: self.hreflang_tags(page),
            OG_LOCALE_ALTERNATES: self.og_locale_alternates(locale),
            LANG_SWITCHER: self.lang_switcher(page, locale),
        }

    def resolve(self, text: str, page: PageDescriptor, locale: LocaleMetadata) -> str:
        """Replace every structural placeholder in ``text``."""
        if "{{" not in text:
            return text
        values = self.values(page, locale)
        return STRUCTURAL_PATTERN.sub(lambda match: values[match.group(1)], text)


__all__ = ["StructuralBlocks", "template_environment"]
