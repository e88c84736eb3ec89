"""Locate opaque regions that generic body-text scanning must not touch.

Script and style elements, the footer sub-tree and the region popup are
found by tokenizing the document. Spans follow element nesting, so a
one-line footer or a popup inside nested containers is masked exactly.
"""

from __future__ import annotations

import sys
import typing as typ
from html.parser import HTMLParser

RAW_TEXT_TAGS = frozenset({"script", "style"})
MASKED_TAGS = frozenset({"footer"})
MASKED_CLASSES = frozenset({"footer", "region-popup", "region-popup-content"})


class _OpaqueRegionScanner(HTMLParser):
    """Record the inclusive line span of every opaque element."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.regions: list[tuple[int, int]] = []
        self._active_tag: str | None = None
        self._active_start = 0
        self._depth = 0

    def handle_starttag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        line = self.getpos()[0]
        if self._active_tag is not None:
            if tag == self._active_tag:
                self._depth += 1
            return
        if tag in RAW_TEXT_TAGS or tag in MASKED_TAGS or _has_masked_class(attrs):
            self._active_tag = tag
            self._active_start = line
            self._depth = 1

    def handle_endtag(self, tag: str) -> None:
        if tag != self._active_tag:
            return
        self._depth -= 1
        if self._depth == 0:
            self.regions.append((self._active_start, self.getpos()[0]))
            self._active_tag = None

    def close(self) -> None:
        super().close()
        if self._active_tag is not None:
            # Unclosed region runs to the end of the document.
            self.regions.append((self._active_start, sys.maxsize))
            self._active_tag = None


def _has_masked_class(attrs: typ.Iterable[tuple[str, str | None]]) -> bool:
    for name, value in attrs:
        if name == "class" and value:
            if MASKED_CLASSES.intersection(value.split()):
                return True
    return False


def opaque_line_numbers(html: str) -> set[int]:
    """Return the zero-based indices of lines inside opaque regions.

    Examples
    --------
    >>> doc = "<p>a</p>\\n<script>\\nvar x;\\n</script>\\n<p>b</p>"
    >>> sorted(opaque_line_numbers(doc))
    [1, 2, 3]
    """
    scanner = _OpaqueRegionScanner()
    scanner.feed(html)
    scanner.close()
    total = html.count("\n") + 1
    masked: set[int] = set()
    for start, end in scanner.regions:
        masked.update(range(start - 1, min(end, total)))
    return masked


__all__ = ["MASKED_CLASSES", "RAW_TEXT_TAGS", "opaque_line_numbers"]
