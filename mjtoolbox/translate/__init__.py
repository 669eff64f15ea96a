"""
Translation gateway for MJ-Toolbox.

This module provides:
- Translator base class and interface
- TranslationError / ErrorKind and the user-facing message mapping
- Backends: Google (gtx, no key), Baidu (signed), Echo (offline)
"""

from mjtoolbox.translate.base import (
    ErrorKind,
    EchoTranslator,
    TranslationContext,
    TranslationError,
    TranslationResult,
    Translator,
    available_backends,
    create_translator,
    user_message,
)

__all__ = [
    "ErrorKind",
    "EchoTranslator",
    "TranslationContext",
    "TranslationError",
    "TranslationResult",
    "Translator",
    "available_backends",
    "create_translator",
    "user_message",
]
