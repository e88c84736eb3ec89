"""Utility helpers shared by the polyglot configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import (
    LocaleMetadata,
    PageDescriptor,
    SiteConfigError,
    TranslationConfig,
)

REQUIRED_LOCALE_FIELDS = ("og_locale", "html_lang", "name")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_list(value: str | list[object] | None) -> list[str]:
    """Normalize a whitespace-separated string or list into non-empty strings."""
    if isinstance(value, str):
        return [segment for segment in value.split() if segment]
    if isinstance(value, list):
        normalized: list[str] = []
        for segment in value:
            text = str(segment).strip()
            if text:
                normalized.append(text)
        return normalized
    return []


def _string_mapping(value: object | None, *, field: str) -> dict[str, str]:
    """Return ``value`` as a ``str -> str`` mapping, rejecting other shapes."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Extraction setting '{field}' must be a mapping."
        raise SiteConfigError(msg)
    return {str(label): str(key) for label, key in value.items()}


def _resolve_dir(value: object | None, *, default: str, root: Path) -> Path:
    """Resolve a configured directory relative to the config file's folder."""
    path = Path(str(value)) if value else Path(default)
    if path.is_absolute():
        return path
    return root / path


def _normalize_base_url(value: object | None) -> str:
    """Return the site base URL without a trailing slash."""
    text = _optional_str(value)
    if not text:
        msg = "Site configuration is missing 'base_url'."
        raise SiteConfigError(msg)
    return text.rstrip("/")


def _normalize_prefix(value: object | None) -> str:
    """Return a URL path prefix that is empty or ends with exactly one slash."""
    text = (_optional_str(value) or "").strip("/")
    return f"{text}/" if text else ""


def _build_locale_metadata(code: str, payload: typ.Mapping[str, typ.Any]) -> LocaleMetadata:
    """Build a LocaleMetadata entry, defaulting the path prefix to ``<code>/``."""
    missing = [name for name in REQUIRED_LOCALE_FIELDS if not payload.get(name)]
    if missing:
        msg = f"Locale '{code}' is missing: {', '.join(missing)}"
        raise SiteConfigError(msg)
    html_lang = str(payload["html_lang"])
    prefix = payload.get("path_prefix", f"{code}/")
    return LocaleMetadata(
        code=code,
        path_prefix=_normalize_prefix(prefix),
        og_locale=str(payload["og_locale"]),
        html_lang=html_lang,
        hreflang=str(payload.get("hreflang") or html_lang),
        name=str(payload["name"]),
        flag=str(payload.get("flag", "")),
        language_name=_optional_str(payload.get("language_name")),
        instructions=str(payload.get("instructions", "") or ""),
    )


def _build_page_descriptor(index: int, payload: object) -> PageDescriptor:
    """Build a PageDescriptor from one entry of the ``pages`` list."""
    if not isinstance(payload, dict):
        msg = f"Page entry #{index} must be a mapping."
        raise SiteConfigError(msg)
    key = _optional_str(payload.get("key"))
    template = _optional_str(payload.get("template"))
    if not key or not template:
        msg = f"Page entry #{index} requires 'key' and 'template'."
        raise SiteConfigError(msg)
    output = _optional_str(payload.get("output")) or template
    redirect_to = _optional_str(payload.get("redirect_to"))
    return PageDescriptor(
        key=key,
        template=template.lstrip("/"),
        output=output.lstrip("/"),
        redirect_to=redirect_to.lstrip("/") if redirect_to else None,
    )


def _build_translation_config(payload: typ.Mapping[str, typ.Any] | None) -> TranslationConfig:
    """Build TranslationConfig from the optional ``translation`` mapping."""
    base = TranslationConfig()
    if not payload:
        return base
    return TranslationConfig(
        model=str(payload.get("model", base.model)),
        endpoint=str(payload.get("endpoint", base.endpoint)),
        api_key_env=str(payload.get("api_key_env", base.api_key_env)),
        max_tokens=int(payload.get("max_tokens", base.max_tokens)),
        site_description=str(payload.get("site_description", base.site_description)),
        protected_terms=_string_list(payload.get("protected_terms")),
    )


__all__ = [
    "REQUIRED_LOCALE_FIELDS",
    "_build_locale_metadata",
    "_build_page_descriptor",
    "_build_translation_config",
    "_normalize_base_url",
    "_normalize_prefix",
    "_optional_str",
    "_resolve_dir",
    "_string_list",
    "_string_mapping",
]
