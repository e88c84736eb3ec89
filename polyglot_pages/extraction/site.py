"""Extract every registered page and persist templates plus the source dictionary."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from polyglot_pages._constants import META_SECTION, SHARED_SCOPE
from polyglot_pages.locale_store import LocaleStore

from .engine import ExtractionResult, PageExtractor

if typ.TYPE_CHECKING:
    from pathlib import Path

    from polyglot_pages.config import PageDescriptor, SiteConfig
    from polyglot_pages.locale_store import Dictionary

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class SiteExtractionReport:
    """Summary of one site extraction run."""

    templates: list[Path] = dc.field(default_factory=list)
    skipped: list[str] = dc.field(default_factory=list)
    dictionary_path: Path | None = None
    string_count: int = 0


def merge_dictionary(
    existing: typ.Mapping[str, typ.Any],
    results: typ.Mapping[str, ExtractionResult],
    *,
    meta: typ.Mapping[str, str],
    page_order: typ.Sequence[str],
) -> Dictionary:
    """Fold extraction results into an existing source dictionary.

    Page scopes gain or refresh the extracted keys; the shared scope keeps the
    first value seen for each key. Nothing already present is dropped. The
    result is ordered ``_meta``, ``shared``, then pages in registry order,
    then any other scopes already in the file.

    Examples
    --------
    >>> from polyglot_pages.extraction.engine import ExtractionResult
    >>> existing = {"shared": {"nav_about": "About"}, "home": {"h1": "Old"}}
    >>> fresh = {"home": ExtractionResult("", {"h1": "New"}, {"nav_about": "X"})}
    >>> merged = merge_dictionary(existing, fresh, meta={}, page_order=["home"])
    >>> merged["home"]["h1"], merged["shared"]["nav_about"]
    ('New', 'About')
    """
    scopes: dict[str, dict[str, typ.Any]] = {
        name: dict(value)
        for name, value in existing.items()
        if name != META_SECTION and isinstance(value, dict)
    }
    shared = scopes.setdefault(SHARED_SCOPE, {})
    for page_key, result in results.items():
        scopes.setdefault(page_key, {}).update(result.page_strings)
        for key, value in result.shared_strings.items():
            shared.setdefault(key, value)

    ordered: Dictionary = {META_SECTION: dict(meta), SHARED_SCOPE: shared}
    for page_key in page_order:
        if page_key in scopes:
            ordered[page_key] = scopes[page_key]
    for name, value in scopes.items():
        ordered.setdefault(name, value)
    return ordered


class SiteExtractor:
    """Run :class:`PageExtractor` over the page registry."""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.store = LocaleStore(config.locales_dir, source_locale=config.source_locale)

    def raw_page_path(self, page: PageDescriptor) -> Path:
        """Return the hand-authored input file for ``page``."""
        return self.config.source_dir / page.output

    def template_path(self, page: PageDescriptor) -> Path:
        """Return the template file written for ``page``."""
        return self.config.templates_dir / page.template

    def run(self, pages: typ.Sequence[PageDescriptor] | None = None) -> SiteExtractionReport:
        """Extract ``pages`` (default: all), writing templates and the dictionary."""
        report = SiteExtractionReport()
        results: dict[str, ExtractionResult] = {}
        for page in pages or self.config.pages:
            raw_path = self.raw_page_path(page)
            if not raw_path.is_file():
                logger.warning("Skipping '%s': %s not found", page.key, raw_path)
                report.skipped.append(page.key)
                continue
            extractor = PageExtractor(
                page, self.config.vocabulary, brand_name=self.config.brand_name
            )
            result = extractor.run(raw_path.read_text(encoding="utf-8"))
            out_path = self.template_path(page)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(result.template, encoding="utf-8")
            logger.info(
                "%s: %d page strings, %d shared",
                page.key,
                len(result.page_strings),
                len(result.shared_strings),
            )
            report.templates.append(out_path)
            results[page.key] = result

        merged = merge_dictionary(
            self.store.source(),
            results,
            meta=self.config.source.to_meta(),
            page_order=[page.key for page in self.config.pages],
        )
        report.dictionary_path = self.store.save(self.config.source_locale, merged)
        report.string_count = sum(
            len(value) for name, value in merged.items() if name != META_SECTION
        )
        return report


__all__ = ["SiteExtractionReport", "SiteExtractor", "merge_dictionary"]
