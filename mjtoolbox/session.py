"""
Prompt session: the state a presentation layer holds.

This module ties the core together:
1. The prompt string is the single source of truth
2. Every mutation re-derives the PromptAnalysis from scratch
3. The description text is translated asynchronously
4. The translation is aligned sentence-by-sentence with the description

Design Philosophy:
- No incremental patching: analysis and sentence pairs are replaced wholesale
- Translation runs off the event loop (``asyncio.to_thread``) because the
  backends use blocking HTTP
- Each translation request gets a sequence number; a response that is not
  for the latest request is discarded, so a slow stale reply can never
  overwrite a newer result, and editing the prompt invalidates any request
  still in flight
- Translation failures only mark the translation state as failed; the
  analysis stays usable and ``translate()`` can simply be called again
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable

from mjtoolbox import editor
from mjtoolbox.align import align
from mjtoolbox.catalog import available_parameters
from mjtoolbox.config import DEFAULT_BACKEND, DEFAULT_SOURCE_LANG, DEFAULT_TARGET_LANG
from mjtoolbox.decompose import analyze
from mjtoolbox.models import (
    ParameterDefinition,
    PromptAnalysis,
    TranslationState,
    TranslationStatus,
)
from mjtoolbox.translate.base import (
    TranslationContext,
    TranslationError,
    Translator,
    create_translator,
    user_message,
)

logger = logging.getLogger(__name__)

FAILED_TRANSLATION_TEXT = "Translation failed"

# Called with the new state whenever the translation state changes
StateCallback = Callable[[TranslationState], None]


@dataclass
class SessionConfig:
    """Configuration for a prompt session."""
    backend: str = DEFAULT_BACKEND
    source_lang: str = DEFAULT_SOURCE_LANG
    target_lang: str = DEFAULT_TARGET_LANG
    translator_kwargs: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Serialize config for logging/debugging."""
        return {
            "backend": self.backend,
            "source_lang": self.source_lang,
            "target_lang": self.target_lang,
        }


class PromptSession:
    """Holds one prompt and everything derived from it.

    Usage:
        session = PromptSession(SessionConfig(backend="echo"))
        session.set_prompt("A cat. A dog! --ar 16:9")
        session.add_parameter("chaos")
        state = asyncio.run(session.translate())
        for pair in state.pairs:
            print(pair.original, pair.translated)
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        translator: Translator | None = None,
        on_translation: StateCallback | None = None,
    ):
        self.config = config or SessionConfig()
        self.translator = translator or create_translator(
            self.config.backend, **self.config.translator_kwargs
        )
        self.on_translation = on_translation
        self._prompt = ""
        self._analysis = PromptAnalysis()
        self._translation = TranslationState()
        self._latest_request = 0

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def analysis(self) -> PromptAnalysis:
        return self._analysis

    @property
    def translation(self) -> TranslationState:
        return self._translation

    # ------------------------------------------------------------------
    # Prompt mutations (synchronous, each re-derives the analysis)
    # ------------------------------------------------------------------

    def set_prompt(self, prompt: str) -> PromptAnalysis:
        """Replace the prompt and re-derive the analysis.

        Any translation still in flight belongs to the old description, so it
        is invalidated and the translation state is reset to idle.
        """
        self._prompt = prompt or ""
        self._analysis = analyze(self._prompt)
        self._publish(TranslationState(request_id=self._next_request()))
        return self._analysis

    def update_parameter(self, name: str, value: str = "") -> PromptAnalysis:
        """Set ``--name`` to ``value`` (blank uses the catalog default).

        Raises:
            ParameterNotFoundError: if the flag is not in the prompt
        """
        return self.set_prompt(editor.update_parameter(self._prompt, name, value))

    def add_parameter(self, name: str) -> PromptAnalysis:
        return self.set_prompt(editor.add_parameter(self._prompt, name))

    def remove_parameter(self, name: str) -> PromptAnalysis:
        return self.set_prompt(editor.remove_parameter(self._prompt, name))

    def available_parameters(self) -> list[ParameterDefinition]:
        return available_parameters(self._analysis)

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def _next_request(self) -> int:
        self._latest_request += 1
        return self._latest_request

    def _is_stale(self, request_id: int) -> bool:
        return request_id != self._latest_request

    def _publish(self, state: TranslationState) -> TranslationState:
        self._translation = state
        if self.on_translation is not None:
            self.on_translation(state)
        return state

    async def translate(self) -> TranslationState:
        """Translate the current description text and align it.

        Returns:
            The session's translation state after this request settles. If a
            newer request was issued meanwhile, this request's outcome is
            dropped and the (newer) current state is returned.
        """
        request_id = self._next_request()
        text = self._analysis.description_text

        if not text:
            return self._publish(TranslationState(request_id=request_id))

        self._publish(TranslationState(status=TranslationStatus.PENDING, request_id=request_id))
        context = TranslationContext(
            source_lang=self.config.source_lang,
            target_lang=self.config.target_lang,
        )

        try:
            result = await asyncio.to_thread(self.translator.translate, text, context)
        except Exception as e:
            if self._is_stale(request_id):
                logger.debug(f"Dropping stale failure for request {request_id}: {e}")
                return self._translation
            if isinstance(e, TranslationError):
                error = e
            else:
                logger.exception(f"Unexpected error from {self.translator.name}")
                error = TranslationError(str(e), provider=self.translator.name)
            logger.warning(f"Translation with {self.translator.name} failed: {error}")
            return self._publish(TranslationState(
                status=TranslationStatus.FAILED,
                translated_text=FAILED_TRANSLATION_TEXT,
                error=user_message(error),
                request_id=request_id,
            ))

        if self._is_stale(request_id):
            logger.debug(
                f"Dropping stale response for request {request_id} "
                f"(latest is {self._latest_request})"
            )
            return self._translation

        return self._publish(TranslationState(
            status=TranslationStatus.DONE,
            translated_text=result.text,
            pairs=align(text, result.text),
            request_id=request_id,
        ))
