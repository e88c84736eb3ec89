"""Per-locale string dictionaries persisted as JSON files.

Each locale owns one file mapping ``scope -> key -> text``. The source
locale's file defines the complete key surface; other locales may be partial
while translation is in progress. A ``_meta`` section records the locale's
structural values and is never treated as a translatable scope.

Refreshing a locale walks the source scopes one at a time. A scope whose key
count already equals the source's is considered translated and skipped;
anything else is sent to the translator and replaced wholesale. The file is
rewritten atomically after every scope, so an interrupted run leaves valid
JSON and a re-run resumes where it stopped.

Example
-------
>>> from pathlib import Path
>>> store = LocaleStore(Path("src/locales"), source_locale="en")
>>> store.get("de", "home", "h1")  # doctest: +SKIP
'Die besten Matratzen'
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import os
import tempfile
import typing as typ
from pathlib import Path

from polyglot_pages._constants import LOCALE_FILE_TEMPLATE, META_SECTION
from polyglot_pages.translation import TranslationError

if typ.TYPE_CHECKING:
    from polyglot_pages.config import LocaleMetadata
    from polyglot_pages.translation import Translator

Dictionary = dict[str, dict[str, typ.Any]]

logger = logging.getLogger(__name__)


class LocaleStoreError(RuntimeError):
    """Raised when a dictionary file exists but cannot be decoded."""


@dc.dataclass(slots=True)
class RefreshReport:
    """Outcome of refreshing one locale.

    Attributes
    ----------
    locale : str
        Locale code that was refreshed.
    translated : list[str]
        Scopes replaced with fresh translations.
    skipped : list[str]
        Scopes whose key count already matched the source.
    failed : list[str]
        Scopes the translator could not handle; their prior state is kept.
    missing : list[str]
        Requested scopes absent from the source dictionary.
    """

    locale: str
    translated: list[str] = dc.field(default_factory=list)
    skipped: list[str] = dc.field(default_factory=list)
    failed: list[str] = dc.field(default_factory=list)
    missing: list[str] = dc.field(default_factory=list)


def is_scope_complete(
    source_scope: typ.Mapping[str, typ.Any],
    target_scope: typ.Mapping[str, typ.Any] | None,
) -> bool:
    """Return ``True`` when ``target_scope`` has as many keys as the source.

    Only key counts are compared: a renamed key or edited source text is not
    detected.

    Examples
    --------
    >>> is_scope_complete({"a": "1", "b": "2"}, {"a": "x", "b": "y"})
    True
    >>> is_scope_complete({"a": "1", "b": "2"}, {"a": "x"})
    False
    >>> is_scope_complete({"a": "1"}, None)
    False
    """
    if not target_scope:
        return False
    return len(target_scope) == len(source_scope)


def translatable_scopes(dictionary: typ.Mapping[str, typ.Any]) -> list[str]:
    """Return every scope name in ``dictionary`` except the metadata section."""
    return [
        name
        for name, value in dictionary.items()
        if name != META_SECTION and isinstance(value, dict)
    ]


def write_json_atomic(path: Path, data: typ.Mapping[str, typ.Any]) -> None:
    """Write ``data`` as JSON to ``path`` via a sibling temporary file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class LocaleStore:
    """Read and write the dictionary files under one directory."""

    def __init__(self, directory: Path, *, source_locale: str) -> None:
        self.directory = directory
        self.source_locale = source_locale
        self._cache: dict[str, Dictionary] = {}

    def path(self, locale: str) -> Path:
        """Return the dictionary file for ``locale``."""
        return self.directory / LOCALE_FILE_TEMPLATE.format(code=locale)

    def exists(self, locale: str) -> bool:
        """Return ``True`` when a dictionary file exists for ``locale``."""
        return self.path(locale).is_file()

    def load(self, locale: str) -> Dictionary:
        """Return the dictionary for ``locale`` (empty when no file exists).

        Raises
        ------
        LocaleStoreError
            If the file is not a JSON object.
        """
        if locale in self._cache:
            return self._cache[locale]
        path = self.path(locale)
        if not path.is_file():
            data: Dictionary = {}
        else:
            try:
                loaded = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                msg = f"Dictionary '{path}' is not valid JSON: {exc}"
                raise LocaleStoreError(msg) from exc
            if not isinstance(loaded, dict):
                msg = f"Dictionary '{path}' must contain a JSON object."
                raise LocaleStoreError(msg)
            data = loaded
        self._cache[locale] = data
        return data

    def save(self, locale: str, data: Dictionary) -> Path:
        """Persist ``data`` for ``locale`` atomically and return the path."""
        path = self.path(locale)
        write_json_atomic(path, data)
        self._cache[locale] = data
        return path

    def source(self) -> Dictionary:
        """Return the source locale's dictionary."""
        return self.load(self.source_locale)

    def get(self, locale: str, scope: str, key: str) -> str | None:
        """Return the text for ``(scope, key)`` in ``locale`` or ``None``.

        Non-string values count as absent.
        """
        section = self.load(locale).get(scope)
        if not isinstance(section, dict):
            return None
        value = section.get(key)
        return value if isinstance(value, str) else None

    def snapshot(self, locales: typ.Iterable[str]) -> dict[str, Dictionary]:
        """Return deep copies of the requested dictionaries that exist on disk.

        Builds render from this snapshot so nothing written during the build
        can change what a later page sees. A dictionary that cannot be
        decoded is logged and left out, as if it did not exist.
        """
        self._cache.clear()
        snapshot: dict[str, Dictionary] = {}
        for code in locales:
            if not self.exists(code):
                continue
            try:
                data = self.load(code)
            except LocaleStoreError as exc:
                logger.warning("Ignoring dictionary for '%s': %s", code, exc)
                continue
            snapshot[code] = json.loads(json.dumps(data))
        return snapshot

    def refresh_locale(
        self,
        locale: LocaleMetadata,
        translator: Translator,
        *,
        sections: typ.Sequence[str] | None = None,
    ) -> RefreshReport:
        """Translate every stale scope of ``locale`` and persist each result.

        Parameters
        ----------
        locale : LocaleMetadata
            Target locale; its ``_meta`` section is rewritten first.
        translator : Translator
            Collaborator turning one source scope into the target language.
        sections : Sequence[str], optional
            Restrict the refresh to these scopes. Defaults to every source
            scope except ``_meta``.

        Returns
        -------
        RefreshReport
            Which scopes were translated, skipped, failed or missing.
        """
        source = self.source()
        target = self.load(locale.code)
        target[META_SECTION] = locale.to_meta()
        report = RefreshReport(locale=locale.code)
        for scope in sections or translatable_scopes(source):
            source_scope = source.get(scope)
            if not isinstance(source_scope, dict):
                logger.warning("Scope '%s' is not in the source dictionary", scope)
                report.missing.append(scope)
                continue
            if is_scope_complete(source_scope, target.get(scope)):
                logger.info(
                    "%s/%s already translated (%d keys)",
                    locale.code,
                    scope,
                    len(source_scope),
                )
                report.skipped.append(scope)
                continue
            logger.info(
                "%s/%s: translating %d keys", locale.code, scope, len(source_scope)
            )
            try:
                result = translator(scope, source_scope, locale)
                _check_key_set(scope, source_scope, result)
            except TranslationError as exc:
                logger.warning("%s/%s failed: %s", locale.code, scope, exc)
                report.failed.append(scope)
            else:
                target[scope] = dict(result)
                report.translated.append(scope)
            self.save(locale.code, target)
        if not report.translated and not report.failed:
            self.save(locale.code, target)
        return report


def _check_key_set(
    scope: str,
    source: typ.Mapping[str, typ.Any],
    result: typ.Mapping[str, typ.Any],
) -> None:
    if set(result) != set(source):
        missing = sorted(set(source) - set(result))
        extra = sorted(set(result) - set(source))
        msg = f"Key set mismatch for '{scope}': missing={missing} extra={extra}"
        raise TranslationError(msg)


__all__ = [
    "Dictionary",
    "LocaleStore",
    "LocaleStoreError",
    "RefreshReport",
    "is_scope_complete",
    "translatable_scopes",
    "write_json_atomic",
]
