"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_locale_metadata,
    _build_page_descriptor,
    _build_translation_config,
    _normalize_base_url,
    _optional_str,
    _resolve_dir,
    _string_list,
)
from .models import LocaleMetadata, PageDescriptor, SiteConfig, SiteConfigError
from .vocabulary import _build_vocabulary


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing pages, locales and directories.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``). Relative directories inside the file resolve
        against the file's parent directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with the ordered page and locale registries.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required sections or fields are missing or invalid (for example,
        no pages, duplicate page keys, or an unknown source locale).
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from polyglot_pages.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> [locale.code for locale in config.select_locales()]  # doctest: +SKIP
    ['en', 'de', 'fr', 'no', 'da', 'sv']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    site_raw = raw.get("site") or {}
    root = path.parent

    locales = _build_locales(raw.get("locales") or {})
    source_locale = str(site_raw.get("source_locale", "en"))
    if source_locale not in locales:
        msg = f"Source locale '{source_locale}' is not among the configured locales."
        raise SiteConfigError(msg)

    pages = _build_pages(raw.get("pages") or [])

    return SiteConfig(
        base_url=_normalize_base_url(site_raw.get("base_url")),
        brand_name=_optional_str(site_raw.get("brand_name")) or "",
        source_locale=source_locale,
        locales=locales,
        pages=pages,
        vocabulary=_build_vocabulary(raw.get("extraction")),
        source_dir=_resolve_dir(site_raw.get("source_dir"), default=".", root=root),
        templates_dir=_resolve_dir(
            site_raw.get("templates_dir"), default="src/templates", root=root
        ),
        locales_dir=_resolve_dir(
            site_raw.get("locales_dir"), default="src/locales", root=root
        ),
        output_dir=_resolve_dir(site_raw.get("output_dir"), default="dist", root=root),
        static_files=_string_list(site_raw.get("static_files")),
        static_dirs=_string_list(site_raw.get("static_dirs")),
        noindex_pages=_string_list(site_raw.get("noindex_pages")),
        hreflang_exempt=_string_list(site_raw.get("hreflang_exempt")),
        translation=_build_translation_config(raw.get("translation")),
    )


def _build_locales(payload: object) -> dict[str, LocaleMetadata]:
    """Build the ordered locale registry from the ``locales`` mapping."""
    if not isinstance(payload, dict) or not payload:
        msg = "No locales defined in site configuration."
        raise SiteConfigError(msg)
    locales: dict[str, LocaleMetadata] = {}
    for code, entry in payload.items():
        match entry:
            case dict():
                locales[str(code)] = _build_locale_metadata(str(code), entry)
            case _:
                msg = f"Locale '{code}' must be a mapping."
                raise SiteConfigError(msg)
    return locales


def _build_pages(payload: object) -> list[PageDescriptor]:
    """Build the ordered page registry, rejecting duplicate keys."""
    if not isinstance(payload, list) or not payload:
        msg = "No pages defined in site configuration."
        raise SiteConfigError(msg)
    pages: list[PageDescriptor] = []
    seen: set[str] = set()
    for index, entry in enumerate(payload, start=1):
        page = _build_page_descriptor(index, entry)
        if page.key in seen:
            msg = f"Duplicate page key '{page.key}'."
            raise SiteConfigError(msg)
        seen.add(page.key)
        pages.append(page)
    return pages


__all__ = ["load_site_config"]
