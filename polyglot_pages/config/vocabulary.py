"""Default extraction vocabularies and the builder that merges overrides.

The extraction passes only recognise closed sets of strings and CSS classes:
navigation labels, call-to-action buttons, semantic span/div classes, footer
headings and links, and region names. Sites extend or replace these lists
through the ``extraction`` block of the configuration file.
"""

from __future__ import annotations

import typing as typ

from .helpers import _string_list, _string_mapping
from .models import ExtractionVocabulary

DEFAULT_NAV_LABELS: dict[str, str] = {
    "Reviews": "nav_reviews",
    "Compare": "nav_compare",
    "Discounts": "nav_discounts",
    "About": "nav_about",
    "Comparison": "nav_comparison",
    "All Reviews": "nav_all_reviews",
}

DEFAULT_SHARED_BUTTONS: dict[str, str] = {
    "Review": "btn_review",
    "Buy": "btn_buy",
    "Buy Now": "btn_buy_now",
}

DEFAULT_SPAN_CLASSES: list[str] = [
    "section-tag",
    "review-badge",
    "score-label",
    "stat-label",
    "stat-key",
    "savings-text",
    "savings-amount",
    "code-label",
    "partner-desc",
    "partner-discount",
    "spec-label",
    "finding-value",
    "finding-basis",
    "tldr-highlight-label",
    "review-updated",
    "discount-badge-new",
    "discount-badge",
    "discount-badge-none",
    "region-popup-subtitle",
]

DEFAULT_DIV_CLASSES: list[str] = ["stat-number", "stat-label"]

DEFAULT_LINK_CLASSES: list[str] = ["discount-details-link", "discount-cta-btn"]

DEFAULT_FOOTER_HEADINGS: dict[str, str] = {
    "Discount Codes": "footer_col_discounts",
    "Resources": "footer_col_resources",
    "Compare": "footer_col_compare",
    "Comparisons": "footer_col_comparisons",
}

DEFAULT_FOOTER_LINKS: dict[str, str] = {
    "All Discount Codes": "fl_all_discounts",
    "Exclusive Codes": "fl_exclusive_codes",
    "Partner Brands": "fl_partner_brands",
    "About Us": "fl_about",
    "All Comparisons": "fl_all_comparisons",
    "Methodology": "fl_methodology",
    "Affiliate Disclosure": "fl_disclosure",
}

DEFAULT_REGION_NAMES: dict[str, str] = {
    "Europe": "region_europe",
    "United States": "region_us",
}


def default_vocabulary() -> ExtractionVocabulary:
    """Return a fresh vocabulary populated with the built-in defaults."""
    return ExtractionVocabulary(
        nav_labels=dict(DEFAULT_NAV_LABELS),
        shared_buttons=dict(DEFAULT_SHARED_BUTTONS),
        span_classes=list(DEFAULT_SPAN_CLASSES),
        div_classes=list(DEFAULT_DIV_CLASSES),
        link_classes=list(DEFAULT_LINK_CLASSES),
        footer_headings=dict(DEFAULT_FOOTER_HEADINGS),
        footer_links=dict(DEFAULT_FOOTER_LINKS),
        region_names=dict(DEFAULT_REGION_NAMES),
    )


def _build_vocabulary(payload: typ.Mapping[str, typ.Any] | None) -> ExtractionVocabulary:
    """Merge the ``extraction`` mapping from YAML over the default vocabulary.

    Mapping entries (labels to keys) extend the defaults; list entries
    (CSS classes) replace them when present.
    """
    vocabulary = default_vocabulary()
    if not payload:
        return vocabulary
    for field in (
        "nav_labels",
        "shared_buttons",
        "footer_headings",
        "footer_links",
        "region_names",
    ):
        extra = _string_mapping(payload.get(field), field=field)
        getattr(vocabulary, field).update(extra)
    for field in ("span_classes", "div_classes", "link_classes"):
        if field in payload:
            setattr(vocabulary, field, _string_list(payload.get(field)))
    return vocabulary


__all__ = [
    "DEFAULT_DIV_CLASSES",
    "DEFAULT_FOOTER_HEADINGS",
    "DEFAULT_FOOTER_LINKS",
    "DEFAULT_LINK_CLASSES",
    "DEFAULT_NAV_LABELS",
    "DEFAULT_REGION_NAMES",
    "DEFAULT_SHARED_BUTTONS",
    "DEFAULT_SPAN_CLASSES",
    "_build_vocabulary",
    "default_vocabulary",
]
