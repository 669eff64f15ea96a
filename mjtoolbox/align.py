"""
Sentence alignment between a description and its translation.

Pairs source sentences with translated sentences by position so both can
be highlighted together. Splitting is purely punctuation-based: Latin
terminators (. ! ?) followed by whitespace on the source side, CJK
terminators (。！？) on the translated side, where whitespace is optional.

This is a best-effort heuristic; nothing checks that sentence ``i`` of the
translation actually renders sentence ``i`` of the source.
"""

from __future__ import annotations

import re

from mjtoolbox.models import SentencePair

SOURCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')
TRANSLATED_BOUNDARY = re.compile(r'(?<=[。！？])\s*')


def _split(text: str, boundary: re.Pattern) -> list[str]:
    if not text:
        return []
    return [part.strip() for part in boundary.split(text) if part.strip()]


def split_source_sentences(text: str) -> list[str]:
    return _split(text, SOURCE_BOUNDARY)


def split_translated_sentences(text: str) -> list[str]:
    return _split(text, TRANSLATED_BOUNDARY)


def align(original: str, translated: str) -> list[SentencePair]:
    """Zip source and translated sentences by index.

    The result always has one pair per source sentence. Missing
    translations are left empty; surplus translated sentences are dropped.

    Example:
        >>> [p.translated for p in align("One. Two.", "一。")]
        ['一。', '']
    """
    source_parts = split_source_sentences(original)
    translated_parts = split_translated_sentences(translated)
    return [
        SentencePair(
            original=part,
            translated=translated_parts[i] if i < len(translated_parts) else "",
            index=i,
        )
        for i, part in enumerate(source_parts)
    ]
