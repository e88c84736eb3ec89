"""Load and validate the polyglot site configuration.

This subpackage parses the project's ``site.yaml`` file into strongly typed
dataclasses: the ordered page registry (:class:`PageDescriptor`), the locale
registry (:class:`LocaleMetadata`), the extraction vocabulary and the
directories each pipeline stage reads from or writes to. The primary entry
point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from polyglot_pages.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> site.get_page("home").output  # doctest: +SKIP
'index.html'
"""

from .loader import load_site_config
from .models import (
    ExtractionVocabulary,
    LocaleMetadata,
    PageDescriptor,
    SiteConfig,
    SiteConfigError,
    TranslationConfig,
)
from .vocabulary import default_vocabulary

__all__ = [
    "ExtractionVocabulary",
    "LocaleMetadata",
    "PageDescriptor",
    "SiteConfig",
    "SiteConfigError",
    "TranslationConfig",
    "default_vocabulary",
    "load_site_config",
]
