"""Cyclopts CLI entrypoint for the multilingual site pipeline.

The ``polyglot`` console script runs the four stages in order:
``polyglot extract`` turns the hand-authored pages into templates and the
source dictionary, ``polyglot translate`` fills the other locale
dictionaries, ``polyglot build`` renders every page for every locale and
``polyglot verify`` checks the result before deployment.

Examples
--------
Build only English and German:

>>> from polyglot_pages.cli import app
>>> app(["build", "--locales", "en,de"])  # doctest: +SKIP

Translate two scopes into French:

>>> app(["translate", "--locales", "fr", "--sections", "shared,home"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from .builder import SiteBuilder
from .config import load_site_config
from .extraction import SiteExtractor
from .locale_store import LocaleStore, LocaleStoreError
from .translation import MessagesTranslator
from .verification import SiteVerifier

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="polyglot", help="Extract, translate, build and verify a multilingual site.")

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="POLYGLOT_CONFIG")
]
LocalesOption = typ.Annotated[
    str | None, Parameter(help="Comma-separated locale codes (default: all)")
]
VerboseOption = typ.Annotated[bool, Parameter(help="Enable debug logging")]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _split_csv(value: str | None) -> list[str] | None:
    """Split ``a,b`` into ``["a", "b"]``; ``None`` or blank means no filter."""
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


@app.command(help="Extract templates and the source dictionary from raw pages.")
def extract(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    verbose: VerboseOption = False,
) -> None:
    """Extract every registered page.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``POLYGLOT_CONFIG``).
    verbose : bool, optional
        Log at DEBUG level.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    report = SiteExtractor(site_config).run()
    for path in report.templates:
        print(f"wrote {_format_path(path)}")
    if report.dictionary_path is not None:
        print(
            f"wrote {_format_path(report.dictionary_path)} "
            f"({report.string_count} strings)"
        )
    for page_key in report.skipped:
        print(f"skipped {page_key}: raw page not found")


@app.command(help="Translate stale dictionary scopes into the target locales.")
def translate(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    locales: LocalesOption = None,
    sections: typ.Annotated[
        str | None, Parameter(help="Comma-separated scopes (default: all)")
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Refresh each target locale one scope at a time.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file.
    locales : str or None, optional
        Comma-separated locale codes; defaults to every non-source locale.
    sections : str or None, optional
        Comma-separated dictionary scopes; defaults to every source scope.
    verbose : bool, optional
        Log at DEBUG level.

    Raises
    ------
    SystemExit
        With status 1 when the API key environment variable is not set.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    api_key_env = site_config.translation.api_key_env
    api_key = os.getenv(api_key_env)
    if not api_key:
        print(f"Error: {api_key_env} environment variable not set", file=sys.stderr)
        raise SystemExit(1)

    targets = [
        meta
        for meta in site_config.select_locales(_split_csv(locales))
        if meta.code != site_config.source_locale
    ]
    store = LocaleStore(site_config.locales_dir, source_locale=site_config.source_locale)
    translator = MessagesTranslator(site_config.translation, api_key=api_key)
    try:
        for meta in targets:
            try:
                result = store.refresh_locale(
                    meta, translator, sections=_split_csv(sections)
                )
            except LocaleStoreError as exc:
                print(f"{meta.code}: skipped, {exc}", file=sys.stderr)
                continue
            print(
                f"{meta.code}: {len(result.translated)} translated, "
                f"{len(result.skipped)} up to date, {len(result.failed)} failed"
            )
    finally:
        translator.close()


@app.command(help="Render every page for every locale into the output directory.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    locales: LocalesOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Build the static multilingual site.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file.
    locales : str or None, optional
        Comma-separated locale codes; defaults to the whole registry.
    verbose : bool, optional
        Log at DEBUG level.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    report = SiteBuilder(site_config).run(_split_csv(locales))
    for result in report.results:
        if result.output_path is not None:
            print(f"wrote {_format_path(result.output_path)}")
    if report.sitemap_path is not None:
        print(f"wrote {_format_path(report.sitemap_path)}")
    print(
        f"Built {report.pages_written} pages for {', '.join(report.locales) or 'no locales'}"
    )


@app.command(help="Check the rendered site before deployment.")
def verify(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    locales: LocalesOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Run every verification check and print the diagnostics.

    Raises
    ------
    SystemExit
        With status 1 when any check reports an error.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    report = SiteVerifier(site_config).run(_split_csv(locales))
    for diagnostic in report.diagnostics:
        print(diagnostic.format())
    print(f"Results: {len(report.errors)} errors, {len(report.warnings)} warnings")
    if not report.ok:
        print("FAIL - Fix errors before deploying")
        raise SystemExit(1)
    print("PASS with warnings" if report.warnings else "ALL CHECKS PASSED")


def main() -> None:
    """Invoke the Cyclopts application behind the ``polyglot`` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
