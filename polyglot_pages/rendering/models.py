"""Typed results produced while rendering one page for one locale."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from polyglot_pages.config import PageDescriptor
    from polyglot_pages.placeholders import TranslationRef


class MissingKind(enum.StrEnum):
    """Why a translation reference could not be resolved."""

    MISSING_TRANSLATION = "missing-translation"
    MISSING_SOURCE_KEY = "missing-source-key"


@dc.dataclass(frozen=True, slots=True)
class Resolved:
    """A reference replaced with dictionary text."""

    ref: TranslationRef
    text: str


@dc.dataclass(frozen=True, slots=True)
class Unresolved:
    """A reference left verbatim in the output.

    ``kind`` separates keys absent only from the target locale (expected
    while translation is in progress) from keys absent even from the source
    dictionary, which means templates and dictionary have drifted.
    """

    ref: TranslationRef
    kind: MissingKind

    @property
    def is_fatal(self) -> bool:
        """Return ``True`` when the source dictionary itself lacks the key."""
        return self.kind is MissingKind.MISSING_SOURCE_KEY


Resolution = Resolved | Unresolved


@dc.dataclass(slots=True)
class RenderResult:
    """Rendered text for one ``(page, locale)`` pair plus its resolutions."""

    page: PageDescriptor
    locale: str
    text: str
    resolutions: list[Resolution] = dc.field(default_factory=list)
    output_path: Path | None = None

    @property
    def unresolved(self) -> list[Unresolved]:
        """Return the references that were left as literal placeholders."""
        return [item for item in self.resolutions if isinstance(item, Unresolved)]


__all__ = ["MissingKind", "RenderResult", "Resolution", "Resolved", "Unresolved"]
