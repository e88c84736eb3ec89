"""Deterministic dictionary key generation for extracted strings."""

from __future__ import annotations

import dataclasses as dc
import re

_SLUG_RUN = re.compile(r"[^a-z0-9]+")
_SLUG_CHAR = re.compile(r"[^a-z0-9]")


@dc.dataclass(slots=True)
class KeyCounter:
    """Per-page counters that number repeated categories in document order.

    The first key in a category is the bare category name; later ones get a
    ``_<n>`` suffix, so unchanged content always reproduces the same keys.

    Examples
    --------
    >>> counter = KeyCounter()
    >>> [counter.next("p"), counter.next("p"), counter.next("h1")]
    ['p', 'p_2', 'h1']
    """

    counts: dict[str, int] = dc.field(default_factory=dict)

    def next(self, category: str) -> str:
        """Return the next key for ``category``."""
        count = self.counts.get(category, 0) + 1
        self.counts[category] = count
        return category if count == 1 else f"{category}_{count}"


def class_category(prefix: str, css_class: str) -> str:
    """Return the counter category for an element carrying ``css_class``."""
    return f"{prefix}_{css_class.replace('-', '_')}"


def heading_key(text: str) -> str:
    """Return the shared key for a table header label (``th_<slug>``)."""
    slug = _SLUG_RUN.sub("_", text.lower()).strip("_")
    return f"th_{slug}"


def data_label_key(value: str) -> str:
    """Return the shared key for a ``data-label`` value (``dl_<slug>``)."""
    return f"dl_{_SLUG_CHAR.sub('_', value.lower())}"


__all__ = ["KeyCounter", "class_category", "data_label_key", "heading_key"]
