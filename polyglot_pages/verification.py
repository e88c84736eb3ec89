"""Static checks over the rendered site tree.

:class:`SiteVerifier` reads the output directory (and, when present, the
templates and source dictionary) and returns a :class:`VerificationReport`.
It never modifies anything. Every check runs regardless of earlier failures:

* completeness: each ``(page, locale)`` file exists;
* unresolved placeholders: one error per leftover translation reference;
* ``undefined`` leakage in attribute values or text;
* ``<html lang>`` matches the locale;
* hreflang: one alternate per configured locale and exactly one
  ``x-default`` on every non-exempt page;
* sitemap entry count (warning) and alternates per entry (error);
* internal link targets exist (warning);
* designated pages carry ``noindex`` in every locale;
* every template reference exists in the source dictionary.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from polyglot_pages._constants import SITEMAP_FILENAME, X_DEFAULT_HREFLANG
from polyglot_pages.extraction.engine import is_internal_page_link
from polyglot_pages.locale_store import LocaleStore, LocaleStoreError
from polyglot_pages.placeholders import find_unresolved, iter_translation_refs
from polyglot_pages.rendering import lookup

if typ.TYPE_CHECKING:
    from pathlib import Path

    from polyglot_pages.config import LocaleMetadata, PageDescriptor, SiteConfig

UNDEFINED_MARKER = "undefined"

logger = logging.getLogger(__name__)


class Severity(enum.StrEnum):
    """Outcome level of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    PASS = "pass"


@dc.dataclass(frozen=True, slots=True)
class Diagnostic:
    """One finding from a verification check."""

    check: str
    severity: Severity
    message: str
    path: str | None = None

    def format(self) -> str:
        """Return the line printed for this diagnostic."""
        label = {"error": "ERROR", "warning": "WARN", "pass": "PASS"}[self.severity]
        return f"{label}: {self.message}"


@dc.dataclass(slots=True)
class VerificationReport:
    """Diagnostics collected across every check."""

    diagnostics: list[Diagnostic] = dc.field(default_factory=list)

    def add(
        self,
        check: str,
        severity: Severity,
        message: str,
        path: str | None = None,
    ) -> None:
        """Append a diagnostic."""
        self.diagnostics.append(Diagnostic(check, severity, message, path))

    def by_check(self, check: str) -> list[Diagnostic]:
        """Return diagnostics produced by ``check``."""
        return [item for item in self.diagnostics if item.check == check]

    @property
    def errors(self) -> list[Diagnostic]:
        """Return build-blocking diagnostics."""
        return [item for item in self.diagnostics if item.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Return non-blocking diagnostics."""
        return [item for item in self.diagnostics if item.severity is Severity.WARNING]

    @property
    def ok(self) -> bool:
        """Return ``True`` when no check reported an error."""
        return not self.errors


@dc.dataclass(slots=True)
class _RenderedFile:
    page: PageDescriptor
    locale: LocaleMetadata
    relative: str
    text: str
    _soup: BeautifulSoup | None = None

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.text, "html.parser")
        return self._soup


class SiteVerifier:
    """Run every check over ``config.output_dir``."""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.output_dir = config.output_dir

    def run(self, locale_codes: list[str] | None = None) -> VerificationReport:
        """Verify the requested locales (default: all) and return the report."""
        report = VerificationReport()
        locales = self.config.select_locales(locale_codes)
        files = self._check_completeness(report, locales)
        self._check_placeholders(report, files)
        self._check_undefined(report, files)
        self._check_html_lang(report, files)
        self._check_hreflang(report, files)
        self._check_sitemap(report, locales)
        self._check_internal_links(report, files)
        self._check_noindex(report, files)
        self._check_key_surface(report)
        logger.info(
            "Verification finished: %d errors, %d warnings",
            len(report.errors),
            len(report.warnings),
        )
        return report

    def relative_output(self, page: PageDescriptor, locale: LocaleMetadata) -> str:
        """Return the output path of ``page`` relative to the output root."""
        return f"{locale.path_prefix}{page.output}"

    def _check_completeness(
        self, report: VerificationReport, locales: list[LocaleMetadata]
    ) -> list[_RenderedFile]:
        files: list[_RenderedFile] = []
        total = len(self.config.pages)
        for locale in locales:
            found = 0
            for page in self.config.pages:
                relative = self.relative_output(page, locale)
                path = self.output_dir / relative
                if not path.is_file():
                    report.add(
                        "completeness", Severity.ERROR, f"Missing: {relative}", relative
                    )
                    continue
                found += 1
                text = path.read_text(encoding="utf-8")
                files.append(_RenderedFile(page, locale, relative, text))
            if found == total:
                report.add(
                    "completeness", Severity.PASS, f"{locale.code}: {found}/{total} files"
                )
        return files

    def _check_placeholders(
        self, report: VerificationReport, files: list[_RenderedFile]
    ) -> None:
        found = 0
        for item in files:
            for token in find_unresolved(item.text):
                found += 1
                report.add(
                    "placeholders",
                    Severity.ERROR,
                    f"{item.relative}: unresolved {token}",
                    item.relative,
                )
        if not found:
            report.add("placeholders", Severity.PASS, "No unresolved {{t.}} placeholders")

    def _check_undefined(self, report: VerificationReport, files: list[_RenderedFile]) -> None:
        found = 0
        for item in files:
            count = _count_undefined(item.soup)
            if count:
                found += count
                report.add(
                    "undefined",
                    Severity.ERROR,
                    f'{item.relative}: {count} "{UNDEFINED_MARKER}" occurrences',
                    item.relative,
                )
        if not found:
            report.add("undefined", Severity.PASS, 'No "undefined" strings found')

    def _check_html_lang(self, report: VerificationReport, files: list[_RenderedFile]) -> None:
        correct = 0
        for item in files:
            root = item.soup.find("html")
            lang = root.get("lang") if root is not None else None
            expected = item.locale.html_lang
            if not lang:
                report.add(
                    "html-lang",
                    Severity.ERROR,
                    f"{item.relative}: missing <html lang>",
                    item.relative,
                )
            elif lang != expected:
                report.add(
                    "html-lang",
                    Severity.ERROR,
                    f'{item.relative}: lang="{lang}" expected "{expected}"',
                    item.relative,
                )
            else:
                correct += 1
        report.add("html-lang", Severity.PASS, f"{correct} files have correct html lang")

    def _check_hreflang(self, report: VerificationReport, files: list[_RenderedFile]) -> None:
        expected = [meta.hreflang for meta in self.config.locales.values()]
        correct = 0
        for item in files:
            if self.config.is_hreflang_exempt(item.page):
                continue
            values = [
                str(tag.get("hreflang"))
                for tag in item.soup.find_all("link", hreflang=True)
            ]
            missing = [code for code in expected if code not in values]
            defaults = values.count(X_DEFAULT_HREFLANG)
            if missing:
                report.add(
                    "hreflang",
                    Severity.ERROR,
                    f"{item.relative}: missing hreflang for {', '.join(missing)}",
                    item.relative,
                )
            elif defaults != 1:
                report.add(
                    "hreflang",
                    Severity.ERROR,
                    f"{item.relative}: expected one x-default hreflang, found {defaults}",
                    item.relative,
                )
            else:
                correct += 1
        report.add("hreflang", Severity.PASS, f"{correct} files have correct hreflang tags")

    def _check_sitemap(self, report: VerificationReport, locales: list[LocaleMetadata]) -> None:
        path = self.output_dir / SITEMAP_FILENAME
        if not path.is_file():
            report.add("sitemap", Severity.ERROR, f"{SITEMAP_FILENAME} not found")
            return
        soup = BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")
        entries = soup.find_all("url")
        indexed = [
            meta
            for meta in locales
            if (self.output_dir / meta.path_prefix / "index.html").is_file()
        ]
        expected = len(self.config.pages) * len(indexed)
        summary = (
            f"Sitemap: {len(entries)} URLs ({len(self.config.pages)} pages x "
            f"{len(indexed)} locales)"
        )
        if len(entries) == expected:
            report.add("sitemap", Severity.PASS, summary)
        else:
            report.add(
                "sitemap",
                Severity.WARNING,
                f"Sitemap: {len(entries)} URLs (expected {expected})",
            )
        bare = [entry for entry in entries if not entry.find_all("xhtml:link")]
        for entry in bare:
            loc = entry.find("loc")
            where = loc.get_text(strip=True) if loc else "?"
            report.add(
                "sitemap",
                Severity.ERROR,
                f"Sitemap entry {where} has no xhtml:link alternates",
            )
        if entries and not bare:
            report.add(
                "sitemap", Severity.PASS, "Every sitemap entry has xhtml:link alternates"
            )

    def _check_internal_links(
        self, report: VerificationReport, files: list[_RenderedFile]
    ) -> None:
        checked = 0
        broken = 0
        for item in files:
            for tag in item.soup.find_all(href=True):
                href = str(tag["href"])
                if "#" in href or not is_internal_page_link(href):
                    continue
                checked += 1
                if not self._link_exists(href):
                    broken += 1
                    report.add(
                        "links",
                        Severity.WARNING,
                        f"Broken link: {item.relative} -> {href}",
                        item.relative,
                    )
        if broken:
            report.add("links", Severity.WARNING, f"{broken}/{checked} broken internal links")
        else:
            report.add("links", Severity.PASS, f"{checked} internal links checked, all valid")

    def _link_exists(self, href: str) -> bool:
        path = urlsplit(href).path.lstrip("/")
        if not path or path.endswith("/"):
            return (self.output_dir / path / "index.html").is_file()
        candidates = [path, f"{path}.html", f"{path}/index.html"]
        if path.endswith(".html"):
            candidates.append(f"{path[: -len('.html')]}/index.html")
        return any((self.output_dir / candidate).is_file() for candidate in candidates)

    def _check_noindex(self, report: VerificationReport, files: list[_RenderedFile]) -> None:
        for item in files:
            if item.page.key not in self.config.noindex_pages:
                continue
            if _has_noindex(item.soup):
                report.add("noindex", Severity.PASS, f"{item.relative} has noindex")
            else:
                report.add(
                    "noindex",
                    Severity.ERROR,
                    f"{item.relative}: missing noindex",
                    item.relative,
                )

    def _check_key_surface(self, report: VerificationReport) -> None:
        store = LocaleStore(self.config.locales_dir, source_locale=self.config.source_locale)
        if not store.exists(self.config.source_locale):
            report.add("key-surface", Severity.WARNING, "Source dictionary not found; skipped")
            return
        try:
            source = store.source()
        except LocaleStoreError as exc:
            report.add("key-surface", Severity.ERROR, str(exc))
            return
        missing = 0
        for page in self.config.pages:
            path = self.config.templates_dir / page.template
            if not path.is_file():
                continue
            seen: set[tuple[str, str]] = set()
            for ref in iter_translation_refs(path.read_text(encoding="utf-8")):
                if (ref.scope, ref.key) in seen:
                    continue
                seen.add((ref.scope, ref.key))
                if lookup(source, ref.scope, ref.key):
                    continue
                missing += 1
                report.add(
                    "key-surface",
                    Severity.ERROR,
                    f"{page.template}: {ref.text} missing from source dictionary",
                    page.template,
                )
        if not missing:
            report.add(
                "key-surface",
                Severity.PASS,
                "All template keys exist in the source dictionary",
            )


def _count_undefined(soup: BeautifulSoup) -> int:
    count = 0
    for tag in soup.find_all(True):
        count += sum(1 for value in tag.attrs.values() if value == UNDEFINED_MARKER)
        if tag.name in {"script", "style"}:
            continue
        count += sum(
            1
            for child in tag.find_all(string=True, recursive=False)
            if child.strip() == UNDEFINED_MARKER
        )
    return count


def _has_noindex(soup: BeautifulSoup) -> bool:
    for tag in soup.find_all("meta", attrs={"name": True, "content": True}):
        if str(tag["name"]).lower() in {"robots", "googlebot"} and "noindex" in str(
            tag["content"]
        ).lower():
            return True
    return False


__all__ = ["Diagnostic", "Severity", "SiteVerifier", "VerificationReport"]
