"""Render one template for one locale.

Structural placeholders are resolved first, then every translation
reference is looked up in the locale's dictionary. A reference that cannot
be resolved stays in the output verbatim and is recorded as an
:class:`Unresolved` entry so verification can report it. Values substituted
inside a JSON-LD block are escaped as JSON string content so the block stays
parseable.
"""

from __future__ import annotations

import json
import logging
import typing as typ

from polyglot_pages.extraction.structured_data import JSON_LD_PATTERN
from polyglot_pages.placeholders import TRANSLATION_PATTERN, TranslationRef

from .models import MissingKind, RenderResult, Resolution, Resolved, Unresolved

if typ.TYPE_CHECKING:
    import re

    from polyglot_pages.config import LocaleMetadata, PageDescriptor

    from .structural import StructuralBlocks

logger = logging.getLogger(__name__)


def lookup(
    dictionary: typ.Mapping[str, typ.Any], scope: str, key: str
) -> str | None:
    """Return the string at ``dictionary[scope][key]``, or ``None``.

    Non-string values are treated as absent so they are never coerced into
    the output.

    Examples
    --------
    >>> lookup({"home": {"h1": "Hi", "n": 3}}, "home", "h1")
    'Hi'
    >>> lookup({"home": {"h1": "Hi", "n": 3}}, "home", "n") is None
    True
    """
    section = dictionary.get(scope)
    if not isinstance(section, dict):
        return None
    value = section.get(key)
    return value if isinstance(value, str) else None


def json_string_escape(value: str) -> str:
    r"""Return ``value`` escaped for use between the quotes of a JSON string.

    ``</`` is written as ``<\/`` so the value cannot close its script
    element.

    Examples
    --------
    >>> json_string_escape('The "Luxe" pad')
    'The \\"Luxe\\" pad'
    >>> json_string_escape("a</script>")
    'a<\\/script>'
    """
    return json.dumps(value, ensure_ascii=False)[1:-1].replace("</", "<\\/")


def resolve_translations(
    text: str,
    dictionary: typ.Mapping[str, typ.Any],
    *,
    source_dictionary: typ.Mapping[str, typ.Any] | None = None,
    escape: typ.Callable[[str], str] | None = None,
) -> tuple[str, list[Resolution]]:
    """Replace translation references in ``text`` using ``dictionary``.

    Parameters
    ----------
    text : str
        Template text with structural placeholders already resolved.
    dictionary : Mapping[str, Any]
        Target locale dictionary.
    source_dictionary : Mapping[str, Any], optional
        Source locale dictionary used to classify misses. When omitted,
        ``dictionary`` is assumed to be the source.
    escape : Callable[[str], str], optional
        Applied to each substituted value; values are inserted as they are
        when omitted.

    Returns
    -------
    tuple[str, list[Resolution]]
        The rendered text and one resolution record per reference, in
        document order. :class:`Resolved` records hold the unescaped value.
    """
    source = dictionary if source_dictionary is None else source_dictionary
    resolutions: list[Resolution] = []

    def _replace(match: re.Match[str]) -> str:
        ref = TranslationRef(match.group(1), match.group(2))
        value = lookup(dictionary, ref.scope, ref.key)
        if value is not None:
            resolutions.append(Resolved(ref, value))
            return value if escape is None else escape(value)
        if lookup(source, ref.scope, ref.key) is None:
            kind = MissingKind.MISSING_SOURCE_KEY
        else:
            kind = MissingKind.MISSING_TRANSLATION
        logger.debug("Missing %s.%s (%s)", ref.scope, ref.key, kind)
        resolutions.append(Unresolved(ref, kind))
        return match.group(0)

    return TRANSLATION_PATTERN.sub(_replace, text), resolutions


def render_page(
    template: str,
    page: PageDescriptor,
    locale: LocaleMetadata,
    dictionary: typ.Mapping[str, typ.Any],
    blocks: StructuralBlocks,
    *,
    source_dictionary: typ.Mapping[str, typ.Any] | None = None,
) -> RenderResult:
    """Render ``template`` for ``page`` in ``locale``.

    Never raises for missing keys; see :func:`resolve_translations`.
    """
    text = blocks.resolve(template, page, locale)
    parts: list[str] = []
    resolutions: list[Resolution] = []
    position = 0
    for match in JSON_LD_PATTERN.finditer(text):
        markup, found = resolve_translations(
            text[position : match.start()],
            dictionary,
            source_dictionary=source_dictionary,
        )
        body, in_block = resolve_translations(
            match.group(2),
            dictionary,
            source_dictionary=source_dictionary,
            escape=json_string_escape,
        )
        parts.extend((markup, match.group(1), body, match.group(3)))
        resolutions.extend(found)
        resolutions.extend(in_block)
        position = match.end()
    tail, found = resolve_translations(
        text[position:], dictionary, source_dictionary=source_dictionary
    )
    parts.append(tail)
    resolutions.extend(found)

    result = RenderResult(
        page=page, locale=locale.code, text="".join(parts), resolutions=resolutions
    )
    missing = result.unresolved
    if missing:
        logger.warning(
            "%s/%s: %d unresolved placeholder(s)", locale.code, page.key, len(missing)
        )
    return result


__all__ = ["json_string_escape", "lookup", "render_page", "resolve_translations"]
