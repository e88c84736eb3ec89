"""Sitemap entries for every ``(page, locale)`` pair of a build."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from polyglot_pages.config import LocaleMetadata, PageDescriptor

    from .structural import StructuralBlocks


@dc.dataclass(frozen=True, slots=True)
class SitemapEntry:
    """One ``<url>`` element."""

    loc: str
    lastmod: str
    changefreq: str
    priority: str
    alternates: list[dict[str, str]]


def priority_for(page: PageDescriptor, *, noindex: bool = False) -> str:
    """Return the sitemap priority for ``page``.

    Examples
    --------
    >>> from polyglot_pages.config import PageDescriptor
    >>> priority_for(PageDescriptor("home", "index.html", "index.html"))
    '1.0'
    >>> priority_for(PageDescriptor("vs", "vs/index.html", "vs/index.html"))
    '0.8'
    >>> priority_for(PageDescriptor("a", "a.html", "a.html"), noindex=True)
    '0.3'
    """
    if noindex:
        return "0.3"
    if page.url_path == "":
        return "1.0"
    if page.is_directory_index:
        return "0.8"
    return "0.6"


def changefreq_for(page: PageDescriptor) -> str:
    """Return ``weekly`` for home and index pages, ``monthly`` otherwise."""
    if page.url_path == "" or page.is_directory_index:
        return "weekly"
    return "monthly"


def build_entries(
    pages: typ.Sequence[PageDescriptor],
    locales: typ.Sequence[LocaleMetadata],
    blocks: StructuralBlocks,
    *,
    noindex_pages: typ.Collection[str] = (),
    today: dt.date | None = None,
) -> list[SitemapEntry]:
    """Return one entry per page and built locale, pages outermost."""
    lastmod = (today or dt.datetime.now(dt.UTC).date()).isoformat()
    entries: list[SitemapEntry] = []
    for page in pages:
        alternates = blocks.alternates(page)
        for locale in locales:
            entries.append(
                SitemapEntry(
                    loc=blocks.page_url(page, locale),
                    lastmod=lastmod,
                    changefreq=changefreq_for(page),
                    priority=priority_for(page, noindex=page.key in noindex_pages),
                    alternates=alternates,
                )
            )
    return entries


def render_sitemap(entries: typ.Sequence[SitemapEntry], env: Environment) -> str:
    """Render ``entries`` with the ``sitemap.xml.jinja`` template."""
    return env.get_template("sitemap.xml.jinja").render(entries=entries) + "\n"


def write_sitemap(
    path: Path, entries: typ.Sequence[SitemapEntry], env: Environment
) -> Path:
    """Write the sitemap to ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_sitemap(entries, env), encoding="utf-8")
    return path


__all__ = [
    "SitemapEntry",
    "build_entries",
    "changefreq_for",
    "priority_for",
    "render_sitemap",
    "write_sitemap",
]
