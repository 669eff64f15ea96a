"""
Baidu Translate (fanyi.baidu.com general translation API).

Requests are signed with ``md5(appid + q + salt + secret)``. Credentials
come from the constructor or from KeyManager (``baidu-appid`` and
``baidu-secret``, or the BAIDU_APP_ID / BAIDU_SECRET_KEY env vars).

Error codes are mapped to ErrorKind here:
    54004 -> INSUFFICIENT_BALANCE
    52001 (timeout), 52002 (system error) -> NETWORK
    anything else -> OTHER
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Optional

import requests

from mjtoolbox.config import REQUEST_TIMEOUT
from mjtoolbox.keys import KeyManager
from mjtoolbox.translate.base import (
    ErrorKind,
    TranslationContext,
    TranslationError,
    TranslationResult,
    Translator,
)

logger = logging.getLogger(__name__)

ERROR_KINDS = {
    "54004": ErrorKind.INSUFFICIENT_BALANCE,
    "52001": ErrorKind.NETWORK,
    "52002": ErrorKind.NETWORK,
}


def sign(app_id: str, text: str, salt: str, secret_key: str) -> str:
    return hashlib.md5((app_id + text + salt + secret_key).encode("utf-8")).hexdigest()


class BaiduTranslator(Translator):
    """Baidu general translation API.

    Usage:
        translator = BaiduTranslator(app_id="2022...", secret_key="...")
        result = translator.translate("A cat on a roof.")
    """

    key = "baidu"
    API_URL = "https://api.fanyi.baidu.com/api/trans/vip/translate"

    def __init__(
        self,
        app_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        key_manager: Optional[KeyManager] = None,
        timeout: Optional[float] = None,
    ):
        self._app_id = app_id
        self._secret_key = secret_key
        self._key_manager = key_manager
        self.timeout = timeout or REQUEST_TIMEOUT

    @property
    def name(self) -> str:
        return "Baidu Translate"

    def _credentials(self) -> tuple[str, str]:
        app_id, secret_key = self._app_id, self._secret_key
        if not (app_id and secret_key):
            manager = self._key_manager or KeyManager()
            app_id = app_id or manager.get_key("baidu-appid")
            secret_key = secret_key or manager.get_key("baidu-secret")
        if not (app_id and secret_key):
            raise TranslationError(
                "Baidu credentials not configured. Set BAIDU_APP_ID and BAIDU_SECRET_KEY "
                "or run: mjtoolbox keys set baidu-appid / baidu-secret",
                kind=ErrorKind.OTHER,
                provider=self.name,
            )
        return app_id, secret_key

    def translate(
        self,
        text: str,
        context: Optional[TranslationContext] = None,
    ) -> TranslationResult:
        context = context or TranslationContext()
        app_id, secret_key = self._credentials()
        salt = str(int(time.time() * 1000))

        params = {
            "q": text,
            "from": context.source_lang,
            "to": context.target_lang,
            "appid": app_id,
            "salt": salt,
            "sign": sign(app_id, text, salt, secret_key),
        }
        logger.debug(f"Baidu request: {context.source_lang}->{context.target_lang}, {len(text)} chars")

        try:
            response = requests.get(self.API_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Baidu translation request failed: {e}")
            raise TranslationError(str(e), kind=ErrorKind.NETWORK, provider=self.name) from e

        try:
            data = response.json()
        except ValueError as e:
            raise TranslationError(
                "Response is not valid JSON", kind=ErrorKind.MALFORMED_RESPONSE, provider=self.name
            ) from e

        if not isinstance(data, dict):
            raise TranslationError(
                "Unexpected response format", kind=ErrorKind.MALFORMED_RESPONSE, provider=self.name
            )

        if "error_code" in data:
            code = str(data["error_code"])
            message = data.get("error_msg", "unknown error")
            logger.warning(f"Baidu returned error {code}: {message}")
            raise TranslationError(
                message,
                kind=ERROR_KINDS.get(code, ErrorKind.OTHER),
                code=code,
                provider=self.name,
            )

        results = data.get("trans_result")
        if not results:
            raise TranslationError(
                "Translation result missing from response",
                kind=ErrorKind.MALFORMED_RESPONSE,
                provider=self.name,
            )

        try:
            # Baidu returns one entry per input line
            translated = "\n".join(item["dst"] for item in results)
        except (TypeError, KeyError) as e:
            raise TranslationError(
                "Unexpected response format", kind=ErrorKind.MALFORMED_RESPONSE, provider=self.name
            ) from e

        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={
                "translator": self.name,
                "src_lang": data.get("from", context.source_lang),
                "dest_lang": data.get("to", context.target_lang),
            },
        )
