"""Build the complete multilingual site into the output directory.

:class:`SiteBuilder` takes one snapshot of the locale dictionaries, cleans
the output directory, renders every registered page for every locale whose
dictionary exists, copies static assets verbatim and writes ``sitemap.xml``.

Example
-------
>>> from pathlib import Path
>>> from polyglot_pages.config import load_site_config
>>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> report = SiteBuilder(config).run(["en", "de"])  # doctest: +SKIP
>>> len(report.results)  # doctest: +SKIP
24
"""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import typing as typ

from polyglot_pages._constants import ROBOTS_FILENAME, SITEMAP_FILENAME
from polyglot_pages.locale_store import LocaleStore
from polyglot_pages.rendering import (
    RenderResult,
    StructuralBlocks,
    Unresolved,
    build_entries,
    render_page,
    write_sitemap,
)

if typ.TYPE_CHECKING:
    import datetime as dt
    from pathlib import Path

    from polyglot_pages.config import LocaleMetadata, PageDescriptor, SiteConfig

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildReport:
    """What a build produced."""

    locales: list[str] = dc.field(default_factory=list)
    results: list[RenderResult] = dc.field(default_factory=list)
    missing_templates: list[str] = dc.field(default_factory=list)
    skipped_locales: list[str] = dc.field(default_factory=list)
    sitemap_path: Path | None = None

    @property
    def pages_written(self) -> int:
        """Return the number of rendered files."""
        return len(self.results)

    def unresolved(self) -> list[tuple[RenderResult, Unresolved]]:
        """Return every unresolved reference with the page it occurred on."""
        return [(result, item) for result in self.results for item in result.unresolved]


class SiteBuilder:
    """Render the page registry for the requested locales."""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.store = LocaleStore(config.locales_dir, source_locale=config.source_locale)
        self.blocks = StructuralBlocks(
            config.base_url,
            list(config.locales.values()),
            source=config.source,
        )

    def output_path(self, page: PageDescriptor, locale: LocaleMetadata) -> Path:
        """Return where ``page`` is written for ``locale``."""
        return self.config.output_dir / locale.path_prefix / page.output

    def run(
        self,
        locale_codes: list[str] | None = None,
        *,
        today: dt.date | None = None,
    ) -> BuildReport:
        """Build the site and return a :class:`BuildReport`.

        Parameters
        ----------
        locale_codes : list[str], optional
            Locales to build; defaults to the whole registry. Locales without
            a readable dictionary file are skipped with a warning.
        today : date, optional
            ``lastmod`` value for the sitemap; defaults to today's UTC date.
        """
        requested = self.config.select_locales(locale_codes)
        codes = [meta.code for meta in requested]
        snapshot = self.store.snapshot([*codes, self.config.source_locale])
        self._clean_output()
        source_dictionary = snapshot.get(self.config.source_locale, {})

        report = BuildReport()
        locales: list[LocaleMetadata] = []
        for meta in requested:
            if meta.code not in snapshot:
                logger.warning("No usable dictionary for '%s'; skipping locale", meta.code)
                report.skipped_locales.append(meta.code)
                continue
            locales.append(meta)
        report.locales = [meta.code for meta in locales]

        templates = self._load_templates(report)
        for meta in locales:
            logger.info("Building %s", meta.code)
            for page in self.config.pages:
                template = templates.get(page.key)
                if template is None:
                    continue
                result = render_page(
                    template,
                    page,
                    meta,
                    snapshot[meta.code],
                    self.blocks,
                    source_dictionary=source_dictionary,
                )
                result.output_path = self._write(self.output_path(page, meta), result.text)
                report.results.append(result)

        self._copy_static()
        entries = build_entries(
            self.config.pages,
            locales,
            self.blocks,
            noindex_pages=self.config.noindex_pages,
            today=today,
        )
        report.sitemap_path = write_sitemap(
            self.config.output_dir / SITEMAP_FILENAME, entries, self.blocks.env
        )
        self._update_robots()
        logger.info("Built %d pages", report.pages_written)
        return report

    def _clean_output(self) -> None:
        output = self.config.output_dir
        if output.exists():
            shutil.rmtree(output)
        output.mkdir(parents=True, exist_ok=True)

    def _load_templates(self, report: BuildReport) -> dict[str, str]:
        templates: dict[str, str] = {}
        for page in self.config.pages:
            path = self.config.templates_dir / page.template
            if not path.is_file():
                logger.warning("Template not found: %s", path)
                report.missing_templates.append(page.key)
                continue
            templates[page.key] = path.read_text(encoding="utf-8")
        return templates

    @staticmethod
    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def _copy_static(self) -> None:
        root = self.config.source_dir
        output = self.config.output_dir
        for name in self.config.static_files:
            src = root / name
            if not src.is_file():
                logger.debug("Static file %s not found", src)
                continue
            dest = output / name
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        for name in self.config.static_dirs:
            src = root / name
            if src.is_dir():
                shutil.copytree(src, output / name, dirs_exist_ok=True)

    def _update_robots(self) -> None:
        robots = self.config.output_dir / ROBOTS_FILENAME
        if not robots.is_file():
            return
        text = robots.read_text(encoding="utf-8")
        if "Sitemap:" in text:
            return
        text += f"\nSitemap: {self.config.base_url}/{SITEMAP_FILENAME}\n"
        robots.write_text(text, encoding="utf-8")


__all__ = ["BuildReport", "SiteBuilder"]
