r"""Translate one dictionary scope at a time through an HTTP messages API.

The locale store only depends on the :class:`Translator` protocol: a callable
taking the scope name, the source ``key -> text`` mapping and the target
locale, returning a mapping with exactly the same keys or raising
:class:`TranslationError`. :class:`MessagesTranslator` implements it against
an Anthropic-style ``/v1/messages`` endpoint.

Example
-------
>>> from polyglot_pages.config import LocaleMetadata, TranslationConfig
>>> translator = MessagesTranslator(TranslationConfig(), api_key="sk-example")
>>> german = LocaleMetadata(
...     code="de", path_prefix="de/", og_locale="de_DE", html_lang="de",
...     hreflang="de", name="Deutsch", flag="", language_name="German",
... )
>>> translator("home", {"h1": "Hello"}, german)  # doctest: +SKIP
{'h1': 'Hallo'}
"""

from __future__ import annotations

import json
import logging
import re
import typing as typ
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

if typ.TYPE_CHECKING:
    from polyglot_pages.config import LocaleMetadata, TranslationConfig

ANTHROPIC_VERSION = "2023-06-01"
FENCE_PATTERN = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")

SYSTEM_PROMPT = """\
You are a professional translator for {site}. Translate the JSON values from \
English to {language}.

CRITICAL RULES:
1. ONLY translate the VALUES, never the keys
2. Return valid JSON with identical structure
3. Preserve ALL HTML tags (<br>, <span>, <strong>, <a>, etc.) exactly as-is
4. Do NOT translate these names and identifiers: {protected}
5. Do NOT translate: prices, scores, measurements, dates, URLs, CSS classes
6. {instructions}
7. For meta_title and og_title: keep them under 60 characters when possible
8. For meta_description: keep under 160 characters
9. Preserve any {{{{t.xxx}}}} template placeholders exactly as-is"""

logger = logging.getLogger(__name__)


class TranslationError(RuntimeError):
    """Raised when a scope cannot be translated."""


class Translator(typ.Protocol):
    """Callable that translates one scope into a target locale."""

    def __call__(
        self,
        scope: str,
        source: typ.Mapping[str, str],
        locale: LocaleMetadata,
    ) -> dict[str, str]:
        """Return ``source`` translated, keyed identically."""
        ...


def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=4,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504, 529),
        allowed_methods=("POST",),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def parse_response_text(text: str) -> dict[str, str]:
    """Decode the model's reply, tolerating a surrounding code fence.

    Raises
    ------
    TranslationError
        If the reply is not a JSON object of strings.

    Examples
    --------
    >>> parse_response_text('```json\\n{"h1": "Hallo"}\\n```')
    {'h1': 'Hallo'}
    """
    body = text.strip()
    fenced = FENCE_PATTERN.search(body)
    if fenced:
        body = fenced.group(1).strip()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        msg = f"Translator reply was not valid JSON: {body[:200]}"
        raise TranslationError(msg) from exc
    if not isinstance(payload, dict) or not all(
        isinstance(value, str) for value in payload.values()
    ):
        msg = "Translator reply must be a JSON object of strings."
        raise TranslationError(msg)
    return {str(key): value for key, value in payload.items()}


class MessagesTranslator:
    """Translate scopes by posting them to a messages-style LLM endpoint."""

    def __init__(
        self,
        config: TranslationConfig,
        *,
        api_key: str,
        session: requests.Session | None = None,
        timeout: float = 120.0,
    ) -> None:
        """Initialise the adapter.

        Parameters
        ----------
        config : TranslationConfig
            Model, endpoint, token budget and site wording for the prompt.
        api_key : str
            Secret sent in the ``x-api-key`` header.
        session : requests.Session, optional
            Session to reuse; defaults to one with a retrying adapter mounted.
        timeout : float, optional
            Per-request timeout in seconds.
        """
        self.config = config
        self.timeout = timeout
        self._session = session or _build_session()
        self._headers = {
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def system_prompt(self, locale: LocaleMetadata) -> str:
        """Return the system prompt for ``locale``."""
        protected = ", ".join(self.config.protected_terms) or "brand and product names"
        return SYSTEM_PROMPT.format(
            site=self.config.site_description,
            language=locale.language_name or locale.name,
            protected=protected,
            instructions=locale.instructions or "Natural, conversational tone.",
        )

    def __call__(
        self,
        scope: str,
        source: typ.Mapping[str, str],
        locale: LocaleMetadata,
    ) -> dict[str, str]:
        """Translate ``source`` for ``locale``; see :class:`Translator`."""
        language = locale.language_name or locale.name
        user_prompt = (
            f'Translate this JSON section ("{scope}") to {language}. '
            "Return ONLY the translated JSON object, no markdown fences:\n\n"
            f"{json.dumps(dict(source), indent=2, ensure_ascii=False)}"
        )
        body = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "system": self.system_prompt(locale),
            "messages": [{"role": "user", "content": user_prompt}],
        }
        try:
            response = self._session.post(
                self.config.endpoint,
                headers=self._headers,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach translator for '{scope}' -> {locale.code}: {exc}"
            raise TranslationError(msg) from exc

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            msg = (
                f"Translator request for '{scope}' -> {locale.code} failed with "
                f"status {response.status_code}: {response.text[:200]}"
            )
            raise TranslationError(msg)

        try:
            payload = response.json()
        except requests.JSONDecodeError as exc:
            msg = f"Translator response for '{scope}' was not valid JSON"
            raise TranslationError(msg) from exc

        text = _first_text_block(payload)
        if text is None:
            msg = f"Translator response for '{scope}' carried no text content"
            raise TranslationError(msg)
        logger.debug("Received %d characters for %s/%s", len(text), locale.code, scope)
        return parse_response_text(text)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()


def _first_text_block(payload: object) -> str | None:
    if not isinstance(payload, dict):
        return None
    content = payload.get("content")
    if not isinstance(content, list):
        return None
    for block in content:
        if isinstance(block, dict) and isinstance(block.get("text"), str):
            return block["text"]
    return None


__all__ = [
    "MessagesTranslator",
    "TranslationError",
    "Translator",
    "parse_response_text",
]
