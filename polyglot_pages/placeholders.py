"""Placeholder grammar shared by the extraction and rendering stages.

Templates carry two placeholder families, both wrapped in ``{{...}}``:

* translation references ``{{t.<scope>.<key>}}`` resolved by dictionary
  lookup, where ``scope`` is a page key or ``shared``;
* structural references such as ``{{canonicalUrl}}`` resolved from locale
  metadata and the page path.

Keys are restricted to alphanumerics, underscores and a little punctuation
that survives inside double-quoted HTML attributes and JSON strings, so a
placeholder can be substituted anywhere in the document text.

Examples
--------
>>> from polyglot_pages.placeholders import translation, iter_translation_refs
>>> translation("home", "h1")
'{{t.home.h1}}'
>>> [ref.key for ref in iter_translation_refs('<h1>{{t.home.h1}}</h1>')]
['h1']
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

HTML_LANG = "htmlLang"
OG_LOCALE = "ogLocale"
LOCALE_PATH = "localePath"
CANONICAL_URL = "canonicalUrl"
PAGE_URL = "pageUrl"
HREFLANG_TAGS = "hreflangTags"
OG_LOCALE_ALTERNATES = "ogLocaleAlternates"
LANG_SWITCHER = "langSwitcher"

STRUCTURAL_NAMES: frozenset[str] = frozenset(
    {
        HTML_LANG,
        OG_LOCALE,
        LOCALE_PATH,
        CANONICAL_URL,
        PAGE_URL,
        HREFLANG_TAGS,
        OG_LOCALE_ALTERNATES,
        LANG_SWITCHER,
    }
)

OPEN_DELIMITER = "{{"
CLOSE_DELIMITER = "}}"

SCOPE_CHARS = r"[A-Za-z0-9_]+"
KEY_CHARS = r"[A-Za-z0-9_&+'\"(). -]+"
TRANSLATION_PATTERN = re.compile(rf"\{{\{{t\.({SCOPE_CHARS})\.({KEY_CHARS})\}}\}}")
# Catches anything that looks like a translation reference, including
# malformed ones the strict pattern would not resolve.
LOOSE_TRANSLATION_PATTERN = re.compile(r"\{\{t\.[^}]+\}\}")
STRUCTURAL_PATTERN = re.compile(
    r"\{\{(" + "|".join(sorted(STRUCTURAL_NAMES)) + r")\}\}"
)


@dc.dataclass(frozen=True, slots=True)
class TranslationRef:
    """A ``(scope, key)`` reference resolved through a locale dictionary."""

    scope: str
    key: str

    @property
    def text(self) -> str:
        """Return the literal placeholder text for this reference."""
        return translation(self.scope, self.key)


@dc.dataclass(frozen=True, slots=True)
class StructuralRef:
    """A symbolic reference resolved from locale metadata and page path."""

    name: str

    @property
    def text(self) -> str:
        """Return the literal placeholder text for this reference."""
        return structural(self.name)


Placeholder = TranslationRef | StructuralRef


def translation(scope: str, key: str) -> str:
    """Return the placeholder text referencing ``key`` within ``scope``."""
    return f"{OPEN_DELIMITER}t.{scope}.{key}{CLOSE_DELIMITER}"


def structural(name: str) -> str:
    """Return the placeholder text for the structural ``name``.

    Raises
    ------
    ValueError
        If ``name`` is not one of :data:`STRUCTURAL_NAMES`.
    """
    if name not in STRUCTURAL_NAMES:
        msg = f"Unknown structural placeholder '{name}'."
        raise ValueError(msg)
    return f"{OPEN_DELIMITER}{name}{CLOSE_DELIMITER}"


def is_placeholder_text(value: str) -> bool:
    """Return ``True`` when ``value`` already starts with a placeholder."""
    return value.lstrip().startswith(OPEN_DELIMITER)


def contains_placeholder(value: str) -> bool:
    """Return ``True`` when ``value`` contains the placeholder delimiter."""
    return OPEN_DELIMITER in value


def parse(token: str) -> Placeholder | None:
    """Parse a single placeholder token, returning ``None`` when it is not one.

    Examples
    --------
    >>> parse("{{t.shared.nav_reviews}}")
    TranslationRef(scope='shared', key='nav_reviews')
    >>> parse("{{langSwitcher}}")
    StructuralRef(name='langSwitcher')
    >>> parse("{{unknown}}") is None
    True
    """
    match = TRANSLATION_PATTERN.fullmatch(token)
    if match:
        return TranslationRef(match.group(1), match.group(2))
    match = STRUCTURAL_PATTERN.fullmatch(token)
    if match:
        return StructuralRef(match.group(1))
    return None


def iter_translation_refs(text: str) -> cabc.Iterator[TranslationRef]:
    """Yield every well-formed translation reference in ``text`` in order."""
    for match in TRANSLATION_PATTERN.finditer(text):
        yield TranslationRef(match.group(1), match.group(2))


def iter_structural_refs(text: str) -> cabc.Iterator[StructuralRef]:
    """Yield every structural reference in ``text`` in order."""
    for match in STRUCTURAL_PATTERN.finditer(text):
        yield StructuralRef(match.group(1))


def find_unresolved(text: str) -> list[str]:
    """Return every translation-looking placeholder left in ``text``."""
    return LOOSE_TRANSLATION_PATTERN.findall(text)


__all__ = [
    "CANONICAL_URL",
    "HREFLANG_TAGS",
    "HTML_LANG",
    "LANG_SWITCHER",
    "LOCALE_PATH",
    "LOOSE_TRANSLATION_PATTERN",
    "OG_LOCALE",
    "OG_LOCALE_ALTERNATES",
    "PAGE_URL",
    "STRUCTURAL_NAMES",
    "STRUCTURAL_PATTERN",
    "TRANSLATION_PATTERN",
    "Placeholder",
    "StructuralRef",
    "TranslationRef",
    "contains_placeholder",
    "find_unresolved",
    "is_placeholder_text",
    "iter_structural_refs",
    "iter_translation_refs",
    "parse",
    "structural",
    "translation",
]
