"""Extract editorial text from embedded JSON-LD blocks.

Each ``<script type="application/ld+json">`` block is parsed and walked
recursively through nested objects and arrays. String values of a fixed set
of text fields are replaced by translation placeholders keyed
``jsonld_<block>_<field>_<n>``; URLs, ISO dates, schema.org identifiers and
the names of non-editorial entity types (brands, organisations, people,
ratings, offers) stay literal. A block that is not valid JSON is left exactly
as it was.
"""

from __future__ import annotations

import json
import logging
import re
import typing as typ

from polyglot_pages.placeholders import is_placeholder_text, translation

JSON_LD_PATTERN = re.compile(
    r'(<script type="application/ld\+json">)([\s\S]*?)(</script>)'
)
TEXT_FIELDS = ("description", "reviewBody", "headline", "slogan", "name", "text", "award")
NAME_EXEMPT_TYPES = frozenset(
    {
        "Brand",
        "Organization",
        "Person",
        "ImageObject",
        "Rating",
        "AggregateRating",
        "AggregateOffer",
        "Offer",
        "EducationalOccupationalCredential",
    }
)
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MIN_TEXT_LENGTH = 10
JSON_INDENT = 8

logger = logging.getLogger(__name__)


class StructuredDataExtractor:
    """Rewrite JSON-LD blocks for one page, collecting extracted strings."""

    def __init__(self, scope: str) -> None:
        self.scope = scope
        self.strings: dict[str, str] = {}
        self._block_index = 0
        self._key_index = 0
        self._prefix = ""

    def rewrite(self, html: str) -> str:
        """Return ``html`` with every JSON-LD block's text fields templated."""
        return JSON_LD_PATTERN.sub(self._rewrite_block, html)

    def _rewrite_block(self, match: re.Match[str]) -> str:
        self._block_index += 1
        opening, body, closing = match.groups()
        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            logger.warning(
                "Skipping malformed JSON-LD block %d in '%s': %s",
                self._block_index,
                self.scope,
                exc,
            )
            return match.group(0)

        self._prefix = f"jsonld_{self._block_index}"
        self._key_index = 0
        before = len(self.strings)
        self._walk(data)
        if len(self.strings) == before:
            return match.group(0)
        encoded = json.dumps(data, indent=JSON_INDENT, ensure_ascii=False)
        return f"{opening}\n    {encoded}\n    {closing}"

    def _walk(self, node: object) -> None:
        if isinstance(node, list):
            for item in node:
                self._walk(item)
            return
        if not isinstance(node, dict):
            return
        obj = typ.cast("dict[str, typ.Any]", node)
        for field in TEXT_FIELDS:
            value = obj.get(field)
            if isinstance(value, str) and _is_translatable(obj, field, value):
                self._key_index += 1
                key = f"{self._prefix}_{field}_{self._key_index}"
                self.strings[key] = value
                obj[field] = translation(self.scope, key)
        for value in obj.values():
            if isinstance(value, dict | list):
                self._walk(value)


def _is_translatable(obj: typ.Mapping[str, typ.Any], field: str, value: str) -> bool:
    """Return ``True`` when ``value`` is editorial text worth translating."""
    if len(value) <= MIN_TEXT_LENGTH or is_placeholder_text(value):
        return False
    if value.startswith("http") or ISO_DATE_PATTERN.match(value):
        return False
    if "schema.org" in value:
        return False
    if field == "name":
        if _entity_types(obj) & NAME_EXEMPT_TYPES:
            return False
        if "ListItem" in _entity_types(obj) and obj.get("item"):
            return False
    return True


def _entity_types(obj: typ.Mapping[str, typ.Any]) -> set[str]:
    raw = obj.get("@type")
    if isinstance(raw, str):
        return {raw}
    if isinstance(raw, list):
        return {item for item in raw if isinstance(item, str)}
    return set()


def extract_structured_data(html: str, scope: str) -> tuple[str, dict[str, str]]:
    """Template the JSON-LD blocks in ``html`` for the page ``scope``.

    Returns
    -------
    tuple[str, dict[str, str]]
        The rewritten document and the extracted ``key -> text`` mapping.

    Examples
    --------
    >>> doc = (
    ...     '<script type="application/ld+json">'
    ...     '{"@type": "Product", "description": "A long product description."}'
    ...     '</script>'
    ... )
    >>> _, strings = extract_structured_data(doc, "home")
    >>> strings
    {'jsonld_1_description_1': 'A long product description.'}
    """
    extractor = StructuredDataExtractor(scope)
    rewritten = extractor.rewrite(html)
    return rewritten, extractor.strings


__all__ = [
    "JSON_LD_PATTERN",
    "NAME_EXEMPT_TYPES",
    "TEXT_FIELDS",
    "StructuredDataExtractor",
    "extract_structured_data",
]
