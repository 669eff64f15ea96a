"""
Base translator interface and implementations.

This module defines:
- Abstract Translator interface that all backends implement
- TranslationError / ErrorKind, populated by each backend so callers never
  have to sniff provider-specific codes
- EchoTranslator for testing and offline dry-runs
- The backend registry used by the CLI and the prompt session

Design Philosophy:
- Translators are stateless: they receive all context in each call
- All translators return TranslationResult with metadata
- Failures raise TranslationError; they never return the source text
  disguised as a translation
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from mjtoolbox.config import DEFAULT_SOURCE_LANG, DEFAULT_TARGET_LANG


class ErrorKind(Enum):
    """Provider-independent classification of a translation failure."""
    INSUFFICIENT_BALANCE = "insufficient_balance"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"
    OTHER = "other"


INSUFFICIENT_BALANCE_MESSAGE = (
    "Translation service balance is insufficient, "
    "please contact the administrator to top up"
)


class TranslationError(Exception):
    """A failed translation request.

    Attributes:
        kind: Provider-independent error class
        message: Provider message (or our own description)
        code: Provider error code, if any
        provider: Name of the backend that failed
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.OTHER,
        code: Optional[str] = None,
        provider: str = "",
    ):
        self.message = message
        self.kind = kind
        self.code = code
        self.provider = provider
        super().__init__(f"{code}: {message}" if code else message)


def user_message(error: TranslationError) -> str:
    """Normalise a translation failure into a user-facing message."""
    if error.kind is ErrorKind.INSUFFICIENT_BALANCE:
        return INSUFFICIENT_BALANCE_MESSAGE
    return f"Translation failed: {error}"


@dataclass
class TranslationResult:
    """Result of a translation operation.

    Attributes:
        text: The translated text
        source_text: Original source text
        metadata: Additional info (backend, languages, ...)
    """
    text: str
    source_text: str
    metadata: dict = field(default_factory=dict)


@dataclass
class TranslationContext:
    """Language pair for a request. ``auto`` lets the provider detect the source."""
    source_lang: str = DEFAULT_SOURCE_LANG
    target_lang: str = DEFAULT_TARGET_LANG


class Translator(ABC):
    """Abstract base class for all translation backends."""

    #: Registry key used by ``create_translator``
    key: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a display name (e.g., 'Google Translate')."""

    @abstractmethod
    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        """Translate ``text``.

        Raises:
            TranslationError: on any provider or transport failure
        """


# Full-width equivalents used by EchoTranslator's "cjk" mode
_CJK_PUNCTUATION = str.maketrans({".": "。", "!": "！", "?": "？", ",": "，"})


class EchoTranslator(Translator):
    """A deterministic offline translator.

    Modes:
    - 'echo': Return the input unchanged
    - 'prefix': Add [TRANSLATED] prefix
    - 'cjk': Swap Latin sentence punctuation for full-width CJK marks, so
      sentence alignment can be exercised without a provider
    """

    key = "echo"
    MODES = ("echo", "prefix", "cjk")

    def __init__(self, mode: str = "cjk"):
        if mode not in self.MODES:
            raise ValueError(f"Unknown echo mode: {mode}. Available: {', '.join(self.MODES)}")
        self.mode = mode

    @property
    def name(self) -> str:
        return f"echo-{self.mode}"

    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        if self.mode == "echo":
            translated = text
        elif self.mode == "prefix":
            translated = f"[TRANSLATED] {text}"
        else:
            translated = text.translate(_CJK_PUNCTUATION)

        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={"translator": self.name, "mode": self.mode},
        )


def available_backends() -> list[str]:
    """Backend names accepted by ``create_translator``, default first."""
    return ["google", "baidu", "echo"]


def create_translator(backend: str, **kwargs) -> Translator:
    """Factory function to create a translator by name.

    Args:
        backend: Translator backend name
        **kwargs: Backend-specific arguments

    Supported backends and aliases:
        - google, googlefree, gtx: Google Translate web endpoint (no key)
        - baidu, fanyi: Baidu Translate (needs app id + secret)
        - echo, dummy, test: Offline deterministic translator
    """
    backend_lower = backend.lower().replace("_", "-")

    if backend_lower in ("google", "googlefree", "google-free", "gtx"):
        from mjtoolbox.translate.google import GoogleFreeTranslator
        return GoogleFreeTranslator(timeout=kwargs.get("timeout"))

    elif backend_lower in ("baidu", "fanyi"):
        from mjtoolbox.translate.baidu import BaiduTranslator
        return BaiduTranslator(
            app_id=kwargs.get("app_id"),
            secret_key=kwargs.get("secret_key"),
            key_manager=kwargs.get("key_manager"),
            timeout=kwargs.get("timeout"),
        )

    elif backend_lower in ("echo", "dummy", "test"):
        return EchoTranslator(mode=kwargs.get("mode", "cjk"))

    raise ValueError(
        f"Unknown translator backend: {backend}. "
        f"Available backends: {', '.join(available_backends())}"
    )
