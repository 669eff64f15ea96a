"""
Google Translate via the public web endpoint.

Uses ``translate.googleapis.com/translate_a/single`` with ``client=gtx``.
It doesn't require an API key but is rate limited and undocumented, so
it may break if Google changes the response shape.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from mjtoolbox.config import REQUEST_TIMEOUT
from mjtoolbox.translate.base import (
    ErrorKind,
    TranslationContext,
    TranslationError,
    TranslationResult,
    Translator,
)

logger = logging.getLogger(__name__)


class GoogleFreeTranslator(Translator):
    """Free Google Translate (gtx client).

    Usage:
        translator = GoogleFreeTranslator()
        result = translator.translate("A cat on a roof.")
    """

    key = "google"
    API_URL = "https://translate.googleapis.com/translate_a/single"

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout or REQUEST_TIMEOUT

    @property
    def name(self) -> str:
        return "Google Translate"

    def translate(
        self,
        text: str,
        context: Optional[TranslationContext] = None,
    ) -> TranslationResult:
        context = context or TranslationContext()
        source_lang = self._normalize_lang(context.source_lang)
        target_lang = self._normalize_lang(context.target_lang)

        params = {
            "client": "gtx",
            "sl": source_lang,
            "tl": target_lang,
            "dt": "t",
            "q": text,
        }
        logger.debug(f"Google request: {source_lang}->{target_lang}, {len(text)} chars")

        try:
            response = requests.get(self.API_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Google translation request failed: {e}")
            raise TranslationError(str(e), kind=ErrorKind.NETWORK, provider=self.name) from e

        try:
            data = response.json()
        except ValueError as e:
            raise TranslationError(
                "Response is not valid JSON", kind=ErrorKind.MALFORMED_RESPONSE, provider=self.name
            ) from e

        try:
            translated = "".join(chunk[0] for chunk in data[0] if chunk and chunk[0])
        except (TypeError, IndexError, KeyError) as e:
            raise TranslationError(
                "Unexpected response format", kind=ErrorKind.MALFORMED_RESPONSE, provider=self.name
            ) from e

        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={
                "translator": self.name,
                "src_lang": source_lang,
                "dest_lang": target_lang,
            },
        )

    @staticmethod
    def _normalize_lang(lang: str) -> str:
        """Map short codes to the ones the endpoint expects."""
        lang_map = {
            "zh": "zh-CN",
            "zh-cn": "zh-CN",
            "zh-tw": "zh-TW",
            "chinese": "zh-CN",
            "english": "en",
            "japanese": "ja",
        }
        lang_lower = lang.lower().strip()
        return lang_map.get(lang_lower, lang_lower)
