"""Convert hand-authored pages into templates and a source dictionary.

:func:`extract_page` handles a single document; :class:`SiteExtractor` walks
the configured page registry, writes each template and merges the extracted
strings into the source locale's dictionary.
"""

from .engine import ExtractionResult, PageExtractor, extract_page, should_skip
from .keys import KeyCounter
from .regions import opaque_line_numbers
from .site import SiteExtractionReport, SiteExtractor, merge_dictionary
from .structured_data import extract_structured_data

__all__ = [
    "ExtractionResult",
    "KeyCounter",
    "PageExtractor",
    "SiteExtractionReport",
    "SiteExtractor",
    "extract_page",
    "extract_structured_data",
    "merge_dictionary",
    "opaque_line_numbers",
    "should_skip",
]
