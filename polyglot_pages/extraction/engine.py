"""Turn one hand-authored page into a locale-agnostic template.

:class:`PageExtractor` runs a fixed sequence of passes over the page text.
Each pass rewrites the in-progress document, so later passes only see what
earlier ones left untouched:

1. metadata (``<title>``, description, keywords, Open Graph, Twitter);
2. structural attributes (``lang``, canonical, page URL, ``og:locale``);
3. JSON-LD structured data;
4. the navigation link list, which also gains the language switcher;
5. body text, line by line, outside opaque regions;
6. the footer vocabulary;
7. the region popup;
8. root-relative internal links, which gain the locale path prefix.

Every matcher requires literal, non-placeholder content, so running the
extractor over its own output changes nothing and yields no new strings.
Redirect-only pages receive only the language, canonical and redirect
target rewrites.

Example
-------
>>> from polyglot_pages.config import PageDescriptor, default_vocabulary
>>> page = PageDescriptor(key="home", template="index.html", output="index.html")
>>> result = extract_page("<h1>Hello world</h1>", page, default_vocabulary())
>>> result.template
'<h1>{{t.home.h1}}</h1>'
>>> result.page_strings
{'h1': 'Hello world'}
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from polyglot_pages._constants import ASSET_EXTENSIONS, ASSET_PATH_PREFIXES, SHARED_SCOPE
from polyglot_pages.placeholders import (
    CANONICAL_URL,
    HREFLANG_TAGS,
    HTML_LANG,
    LANG_SWITCHER,
    LOCALE_PATH,
    OG_LOCALE,
    OG_LOCALE_ALTERNATES,
    PAGE_URL,
    contains_placeholder,
    structural,
    translation,
)

from .keys import KeyCounter, class_category, data_label_key, heading_key
from .regions import opaque_line_numbers
from .structured_data import extract_structured_data

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from polyglot_pages.config import ExtractionVocabulary, PageDescriptor

TITLE_PATTERN = re.compile(r"<title>([\s\S]*?)</title>")
META_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r'(<meta name="title" content=")([^"]*)(")'), "meta_name_title"),
    (re.compile(r'(<meta name="description" content=")([^"]*)(")'), "meta_description"),
    (re.compile(r'(<meta name="keywords" content=")([^"]*)(")'), "meta_keywords"),
    (re.compile(r'(<meta property="og:title" content=")([^"]*)(")'), "og_title"),
    (
        re.compile(r'(<meta property="og:description" content=")([^"]*)(")'),
        "og_description",
    ),
    (re.compile(r'(<meta name="twitter:title" content=")([^"]*)(")'), "twitter_title"),
    (
        re.compile(r'(<meta name="twitter:description" content=")([^"]*)(")'),
        "twitter_description",
    ),
)

HTML_LANG_PATTERN = re.compile(r'(<html\b[^>]*?\blang=")(?!\{\{)[^"]*(")')
CANONICAL_PATTERN = re.compile(r'<link rel="canonical" href="(?!\{\{)[^"]*">')
OG_URL_PATTERN = re.compile(r'<meta property="og:url" content="(?!\{\{)[^"]*"\s*/?>')
TWITTER_URL_PATTERN = re.compile(
    r'<meta name="twitter:url" content="(?!\{\{)[^"]*"\s*/?>'
)
OG_LOCALE_PATTERN = re.compile(
    r'<meta property="og:locale" content="(?!\{\{)[^"]*"\s*/?>'
)
HEAD_INDENT = "\n    "

NAV_BLOCK_PATTERN = re.compile(r'(<ul class="nav-links">)([\s\S]*?)(</ul>)')
NAV_INDENT = "\n        "

HEADING_PATTERNS = tuple(
    (f"h{level}", re.compile(rf"(<h{level}(?:\s[^>]*)?>)(.+?)(</h{level}>)"))
    for level in range(1, 5)
)
PARAGRAPH_PATTERN = re.compile(r"(<p(?:\s[^>]*)?>)(.+?)(</p>)")
TABLE_HEADER_PATTERN = re.compile(r"(<th(?:\s[^>]*)?>)([^<{]+)(</th>)")
DATA_LABEL_PATTERN = re.compile(r'data-label="([^"]+)"')
BUTTON_PATTERN = re.compile(
    r'(<(?:button|a)\s[^>]*class="[^"]*btn[^"]*"[^>]*>)([^<]+)(</(?:button|a)>)'
)

FOOTER_BLOCK_PATTERN = re.compile(r'(<footer class="footer">)([\s\S]*?)(</footer>)')
FOOTER_TAGLINE_PATTERN = re.compile(r'(<p class="footer-tagline">)([^<]+)(</p>)')
FOOTER_DISCLAIMER_PATTERN = re.compile(r'(<p class="disclaimer">)([^<]+)(</p>)')

REGION_TITLE_PATTERN = re.compile(
    r'(<div class="region-popup-content">[\s\S]*?<button[^>]*>[^<]*</button>\s*\n\s*<h3>)'
    r"([^<]+)(</h3>)"
)
REGION_SUBTITLE_PATTERN = re.compile(r'(<p class="region-popup-subtitle">)([^<]+)(</p>)')
REGION_DISCOUNT_PATTERN = re.compile(r'(<p class="region-discount">)([\s\S]*?)(</p>)')

INTERNAL_HREF_PATTERN = re.compile(r'href="(/[^"]*?)"')
ASSET_PATTERN = re.compile(r"\.(" + "|".join(ASSET_EXTENSIONS) + r")(\?|$)")

INLINE_MARKUP_PATTERN = re.compile(r"<[^>]+>")
SYMBOLIC_PATTERN = re.compile(r"^[\d.,/%€$£+×~≈°]+$")
NUMERIC_ID_PATTERN = re.compile(r"^#?\d+$")


def should_skip(text: str) -> bool:
    """Return ``True`` when ``text`` is not worth a dictionary entry.

    Skips empty or single-character strings (after removing inline markup),
    numbers, prices and symbols, bare numeric ids, and anything that already
    starts with a placeholder.

    Examples
    --------
    >>> [should_skip(value) for value in ("€899", "#12", "<b>A</b>", "Hello")]
    [True, True, True, False]
    """
    clean = INLINE_MARKUP_PATTERN.sub("", text).strip()
    if len(clean) < 2:
        return True
    if SYMBOLIC_PATTERN.match(clean) or NUMERIC_ID_PATTERN.match(clean):
        return True
    return clean.startswith("{{") or text.strip().startswith("{{")


def is_internal_page_link(path: str) -> bool:
    """Return ``True`` for root-relative links to pages rather than assets."""
    if not path.startswith("/") or path.startswith("//"):
        return False
    if contains_placeholder(path) or ASSET_PATTERN.search(path):
        return False
    return not path.startswith(ASSET_PATH_PREFIXES)


@dc.dataclass(slots=True)
class ExtractionResult:
    """Template text plus the strings extracted from one page.

    Attributes
    ----------
    template : str
        The page with placeholders in place of translatable content.
    page_strings : dict[str, str]
        Strings scoped to the page key.
    shared_strings : dict[str, str]
        Strings contributed to the shared scope.
    """

    template: str
    page_strings: dict[str, str]
    shared_strings: dict[str, str]

    @property
    def is_unchanged(self) -> bool:
        """Return ``True`` when the pass contributed no strings at all."""
        return not self.page_strings and not self.shared_strings


class PageExtractor:
    """Run the extraction passes for one page with page-local key counters."""

    def __init__(
        self,
        page: PageDescriptor,
        vocabulary: ExtractionVocabulary,
        *,
        brand_name: str = "",
    ) -> None:
        """Initialize the extractor.

        Parameters
        ----------
        page : PageDescriptor
            Page whose key becomes the dictionary scope for page strings.
        vocabulary : ExtractionVocabulary
            Closed vocabularies for navigation, buttons, CSS classes, footer
            and region strings.
        brand_name : str, optional
            Wordmark used in the copyright line; when empty the rights
            fragment is not extracted.
        """
        self.page = page
        self.scope = page.key
        self.vocabulary = vocabulary
        self.brand_name = brand_name
        self.keys = KeyCounter()
        self.page_strings: dict[str, str] = {}
        self.shared_strings: dict[str, str] = {}
        self._span_patterns = [
            (
                class_category("span", cls),
                re.compile(rf'(<span class="{re.escape(cls)}[^"]*">)([^<]+)(</span>)'),
            )
            for cls in vocabulary.span_classes
        ]
        self._div_patterns = [
            (
                class_category("div", cls),
                re.compile(rf'(<div class="{re.escape(cls)}">)([^<]+)(</div>)'),
            )
            for cls in vocabulary.div_classes
        ]
        self._link_patterns = [
            (
                class_category("link", cls),
                re.compile(
                    rf'(<a\s[^>]*class="[^"]*{re.escape(cls)}[^"]*"[^>]*>)([^<]+)(</a>)'
                ),
            )
            for cls in vocabulary.link_classes
        ]

    def run(self, html: str) -> ExtractionResult:
        """Extract ``html`` and return the template with its strings."""
        self.keys = KeyCounter()
        self.page_strings = {}
        self.shared_strings = {}
        if self.page.is_redirect:
            html = self._template_redirect(html)
        else:
            for step in self._passes():
                html = step(html)
        return ExtractionResult(
            template=html,
            page_strings=dict(self.page_strings),
            shared_strings=dict(self.shared_strings),
        )

    def _passes(self) -> list[cabc.Callable[[str], str]]:
        return [
            self._extract_meta,
            self._template_structural,
            self._extract_structured_data,
            self._template_nav,
            self._extract_body_text,
            self._template_footer,
            self._template_region_popup,
            self._template_internal_links,
        ]

    def _add_page(self, key: str, value: str) -> str:
        self.page_strings[key] = value
        return translation(self.scope, key)

    def _add_shared(self, key: str, value: str) -> str:
        self.shared_strings.setdefault(key, value)
        return translation(SHARED_SCOPE, key)

    # -- metadata -----------------------------------------------------------

    def _extract_meta(self, html: str) -> str:
        def _title(match: re.Match[str]) -> str:
            text = match.group(1)
            if not text.strip() or contains_placeholder(text):
                return match.group(0)
            return f"<title>{self._add_page('meta_title', text.strip())}</title>"

        html = TITLE_PATTERN.sub(_title, html, count=1)
        for pattern, key in META_PATTERNS:
            html = pattern.sub(self._meta_replacer(key), html, count=1)
        return html

    def _meta_replacer(self, key: str) -> cabc.Callable[[re.Match[str]], str]:
        def _replace(match: re.Match[str]) -> str:
            opening, value, closing = match.groups()
            if not value.strip() or contains_placeholder(value):
                return match.group(0)
            return f"{opening}{self._add_page(key, value)}{closing}"

        return _replace

    # -- structural ---------------------------------------------------------

    def _template_structural(self, html: str) -> str:
        html = HTML_LANG_PATTERN.sub(rf"\g<1>{structural(HTML_LANG)}\g<2>", html, count=1)
        html = CANONICAL_PATTERN.sub(
            lambda _m: (
                f'<link rel="canonical" href="{structural(CANONICAL_URL)}">'
                f"{HEAD_INDENT}{structural(HREFLANG_TAGS)}"
            ),
            html,
            count=1,
        )
        html = OG_URL_PATTERN.sub(
            lambda _m: f'<meta property="og:url" content="{structural(PAGE_URL)}">',
            html,
            count=1,
        )
        html = TWITTER_URL_PATTERN.sub(
            lambda _m: f'<meta name="twitter:url" content="{structural(PAGE_URL)}">',
            html,
            count=1,
        )
        return OG_LOCALE_PATTERN.sub(
            lambda _m: (
                f'<meta property="og:locale" content="{structural(OG_LOCALE)}">'
                f"{HEAD_INDENT}{structural(OG_LOCALE_ALTERNATES)}"
            ),
            html,
            count=1,
        )

    # -- structured data ----------------------------------------------------

    def _extract_structured_data(self, html: str) -> str:
        html, strings = extract_structured_data(html, self.scope)
        self.page_strings.update(strings)
        return html

    # -- navigation ---------------------------------------------------------

    def _template_nav(self, html: str) -> str:
        switcher = structural(LANG_SWITCHER)
        needs_switcher = switcher not in html

        def _replace(match: re.Match[str]) -> str:
            nonlocal needs_switcher
            opening, content, closing = match.groups()
            for label, key in self.vocabulary.nav_labels.items():
                pattern = re.compile(rf">{re.escape(label)}</a>")
                if pattern.search(content):
                    placeholder = self._add_shared(key, label)
                    content = pattern.sub(lambda _m, p=placeholder: f">{p}</a>", content)
            block = f"{opening}{content}{closing}"
            if needs_switcher:
                needs_switcher = False
                block = f"{block}{NAV_INDENT}{switcher}"
            return block

        return NAV_BLOCK_PATTERN.sub(_replace, html)

    # -- body text ----------------------------------------------------------

    def _extract_body_text(self, html: str) -> str:
        lines = html.split("\n")
        masked = opaque_line_numbers(html)
        for index, line in enumerate(lines):
            if index in masked or "{{t." in line:
                continue
            lines[index] = self._extract_line(line)
        return "\n".join(lines)

    def _extract_line(self, line: str) -> str:
        for category, pattern in HEADING_PATTERNS:
            line = self._replace_first(line, pattern, category)
        line = self._replace_first(line, PARAGRAPH_PATTERN, "p")
        line = TABLE_HEADER_PATTERN.sub(self._table_header, line)
        line = DATA_LABEL_PATTERN.sub(self._data_label, line)
        for category, pattern in self._span_patterns:
            line = self._replace_first(line, pattern, category, strict=True)
        for category, pattern in self._div_patterns:
            line = self._replace_first(line, pattern, category, strict=True)
        line = self._replace_button(line)
        for category, pattern in self._link_patterns:
            line = self._replace_first(line, pattern, category, strict=True)
        return line

    def _replace_first(
        self,
        line: str,
        pattern: re.Pattern[str],
        category: str,
        *,
        strict: bool = False,
    ) -> str:
        """Template the first match of ``pattern`` under a page-scoped key.

        ``strict`` matchers also reject text containing a placeholder
        anywhere, not only at the start.
        """
        match = pattern.search(line)
        if not match:
            return line
        text = match.group(2)
        if should_skip(text) or (strict and contains_placeholder(text)):
            return line
        placeholder = self._add_page(self.keys.next(category), text.strip())
        replacement = f"{match.group(1)}{placeholder}{match.group(3)}"
        return line[: match.start()] + replacement + line[match.end() :]

    def _table_header(self, match: re.Match[str]) -> str:
        opening, text, closing = match.groups()
        label = text.strip()
        if not label or should_skip(label):
            return match.group(0)
        return f"{opening}{self._add_shared(heading_key(label), label)}{closing}"

    def _data_label(self, match: re.Match[str]) -> str:
        value = match.group(1)
        if not value.strip() or contains_placeholder(value):
            return match.group(0)
        placeholder = self._add_shared(data_label_key(value), value)
        return f'data-label="{placeholder}"'

    def _replace_button(self, line: str) -> str:
        match = BUTTON_PATTERN.search(line)
        if not match:
            return line
        text = match.group(2)
        if should_skip(text) or contains_placeholder(text):
            return line
        label = text.strip()
        shared_key = self.vocabulary.shared_buttons.get(label)
        if shared_key:
            placeholder = self._add_shared(shared_key, label)
        else:
            placeholder = self._add_page(self.keys.next("btn"), label)
        replacement = f"{match.group(1)}{placeholder}{match.group(3)}"
        return line[: match.start()] + replacement + line[match.end() :]

    # -- footer -------------------------------------------------------------

    def _template_footer(self, html: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            opening, content, closing = match.groups()
            content = self._template_footer_content(content)
            return f"{opening}{content}{closing}"

        return FOOTER_BLOCK_PATTERN.sub(_replace, html, count=1)

    def _template_footer_content(self, content: str) -> str:
        content = self._replace_shared(content, FOOTER_TAGLINE_PATTERN, "footer_tagline")
        for text, key in self.vocabulary.footer_headings.items():
            literal = f"<h4>{text}</h4>"
            if literal in content:
                placeholder = self._add_shared(key, text)
                content = content.replace(literal, f"<h4>{placeholder}</h4>")
        for text, key in self.vocabulary.footer_links.items():
            pattern = re.compile(rf">{re.escape(text)}</a>")
            if pattern.search(content):
                placeholder = self._add_shared(key, text)
                content = pattern.sub(lambda _m, p=placeholder: f">{p}</a>", content)
        content = self._replace_shared(
            content, FOOTER_DISCLAIMER_PATTERN, "footer_disclaimer"
        )
        if self.brand_name:
            content = self._template_copyright(content)
        return content

    def _template_copyright(self, content: str) -> str:
        pattern = re.compile(
            rf"((?:&copy;|©) \d+ {re.escape(self.brand_name)}\. )([^<]+)(<a)"
        )

        def _replace(match: re.Match[str]) -> str:
            prefix, rights, anchor = match.groups()
            if not rights.strip() or contains_placeholder(rights):
                return match.group(0)
            placeholder = self._add_shared("footer_rights", rights.strip())
            return f"{prefix}{placeholder} {anchor}"

        return pattern.sub(_replace, content, count=1)

    def _replace_shared(self, text: str, pattern: re.Pattern[str], key: str) -> str:
        """Template the first match of ``pattern`` under the shared ``key``."""

        def _replace(match: re.Match[str]) -> str:
            opening, value, closing = match.groups()
            if not value.strip() or contains_placeholder(value):
                return match.group(0)
            return f"{opening}{self._add_shared(key, value.strip())}{closing}"

        return pattern.sub(_replace, text, count=1)

    # -- region popup -------------------------------------------------------

    def _template_region_popup(self, html: str) -> str:
        html = self._replace_shared(html, REGION_TITLE_PATTERN, "region_title")
        html = self._replace_shared(html, REGION_SUBTITLE_PATTERN, "region_subtitle")
        html = self._replace_shared(html, REGION_DISCOUNT_PATTERN, "region_discount_text")
        for name, key in self.vocabulary.region_names.items():
            literal = f'<span class="region-name">{name}</span>'
            if literal in html:
                placeholder = self._add_shared(key, name)
                html = html.replace(literal, f'<span class="region-name">{placeholder}</span>')
        return html

    # -- links --------------------------------------------------------------

    def _template_internal_links(self, html: str) -> str:
        return INTERNAL_HREF_PATTERN.sub(_prefix_internal_link, html)

    # -- redirect pages -----------------------------------------------------

    def _template_redirect(self, html: str) -> str:
        target = self.page.redirect_to or ""
        html = HTML_LANG_PATTERN.sub(rf"\g<1>{structural(HTML_LANG)}\g<2>", html, count=1)
        html = CANONICAL_PATTERN.sub(
            lambda _m: f'<link rel="canonical" href="{structural(CANONICAL_URL)}">',
            html,
            count=1,
        )
        localized = f"/{structural(LOCALE_PATH)}{target}"
        refresh = re.compile(
            rf'(<meta http-equiv="refresh" content="\d+;\s*url=)/{re.escape(target)}(")'
        )
        html = refresh.sub(lambda m: f"{m.group(1)}{localized}{m.group(2)}", html, count=1)
        return html.replace(f'href="/{target}"', f'href="{localized}"', 1)


def _prefix_internal_link(match: re.Match[str]) -> str:
    path = match.group(1)
    if not is_internal_page_link(path):
        return match.group(0)
    return f'href="/{structural(LOCALE_PATH)}{path[1:]}"'


def extract_page(
    html: str,
    page: PageDescriptor,
    vocabulary: ExtractionVocabulary,
    *,
    brand_name: str = "",
) -> ExtractionResult:
    """Extract one page; see :class:`PageExtractor` for the pass order."""
    return PageExtractor(page, vocabulary, brand_name=brand_name).run(html)


__all__ = [
    "ExtractionResult",
    "PageExtractor",
    "extract_page",
    "is_internal_page_link",
    "should_skip",
]
