"""Render templates into per-locale pages and derive the sitemap.

Rendering is a pure function of the template, the page descriptor, one
locale's dictionary and the locale registry; :mod:`polyglot_pages.builder`
drives it over every page and locale and writes the results to disk.
"""

from .models import MissingKind, RenderResult, Resolution, Resolved, Unresolved
from .renderer import json_string_escape, lookup, render_page, resolve_translations
from .sitemap import SitemapEntry, build_entries, render_sitemap, write_sitemap
from .structural import StructuralBlocks, template_environment

__all__ = [
    "MissingKind",
    "RenderResult",
    "Resolution",
    "Resolved",
    "SitemapEntry",
    "StructuralBlocks",
    "Unresolved",
    "build_entries",
    "json_string_escape",
    "lookup",
    "render_page",
    "render_sitemap",
    "resolve_translations",
    "template_environment",
    "write_sitemap",
]
