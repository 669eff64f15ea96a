"""
Prompt decomposition: images, description and parameters.

This module takes a raw Midjourney prompt apart into three facets:
- Image references (http(s) URLs to image files, s.mj.run short links)
- Free-text description lines
- ``--flag value`` parameters

Design:
- Extraction scans always run over the ORIGINAL text, so every flag is
  captured even when its surroundings are dropped from the description
- Description isolation is an ordered pipeline of named steps; each step
  sees the output of the previous one, so order matters
- ``analyze`` is total: any string (or None) yields a PromptAnalysis
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable

from mjtoolbox.models import ExtractedParameter, PromptAnalysis

logger = logging.getLogger(__name__)


# ============================================================================
# Pattern Definitions
# ============================================================================

IMAGE_EXTENSIONS = ("jpg", "jpeg", "gif", "png", "webp", "bmp", "svg")

# Image URLs: direct links ending in an image extension, or s.mj.run short links
IMAGE_URL_PATTERN = re.compile(
    r'https?://(?:[^\s<>"\']+?\.(?:' + "|".join(IMAGE_EXTENSIONS) + r')'
    r'|s\.mj\.run/[^\s<>"\']+)'
    r'(?:\?[^\s<>"\']*)?',
    re.IGNORECASE,
)

# Flags: --name, optionally followed by ':' or whitespace and a value token.
# A value never starts with '--', so "--tile --ar 16:9" yields two flags.
PARAMETER_PATTERN = re.compile(r'--([a-zA-Z0-9]+)(?:[:\s]+(?!--)(\S+))?')

# @name mentions with an optional (...) group right after
MENTION_PATTERN = re.compile(r'@[^\s()]*(?:\([^)]*\))?')

# 16:9 style ratios
RATIO_PATTERN = re.compile(r'\b\d+:\d+\b')

# Integers or decimals that are not part of a word ("V6" survives)
BARE_NUMBER_PATTERN = re.compile(r'\b\d+(?:\.\d+)?\b')

# Parenthesised asides
PARENTHETICAL_PATTERN = re.compile(r'\([^)]*\)')

TRAILING_COMMA_PATTERN = re.compile(r'\s*,\s*$')

FLAG_MARKER = "--"


# ============================================================================
# Extraction
# ============================================================================

def extract_image_urls(text: str) -> tuple[str, ...]:
    """All image URLs in ``text``, first-seen order, duplicates removed."""
    return tuple(dict.fromkeys(IMAGE_URL_PATTERN.findall(text)))


def extract_parameters(text: str) -> tuple[ExtractedParameter, ...]:
    """Every flag occurrence in ``text``, in order. Duplicates are kept."""
    return tuple(
        ExtractedParameter(name=m.group(1), value=m.group(2) or "", enabled=True)
        for m in PARAMETER_PATTERN.finditer(text)
    )


# ============================================================================
# Description Isolation Steps
# ============================================================================

def strip_image_urls(text: str, image_urls: Iterable[str] = ()) -> str:
    """Remove image URLs.

    Known URLs are removed literally; the pattern is applied afterwards so
    the step also works standalone.
    """
    for url in image_urls:
        text = text.replace(url, "")
    return IMAGE_URL_PATTERN.sub("", text)


def strip_flags(text: str) -> str:
    """Drop everything from the first ``--`` to the end of the text."""
    cut = text.find(FLAG_MARKER)
    if cut == -1:
        return text
    return text[:cut]


def strip_mentions(text: str) -> str:
    return MENTION_PATTERN.sub("", text)


def strip_ratios(text: str) -> str:
    return RATIO_PATTERN.sub("", text)


def strip_bare_numbers(text: str) -> str:
    return BARE_NUMBER_PATTERN.sub("", text)


def strip_parentheticals(text: str) -> str:
    return PARENTHETICAL_PATTERN.sub("", text)


def strip_trailing_comma(text: str) -> str:
    return TRAILING_COMMA_PATTERN.sub("", text).strip()


DescriptionStep = Callable[[str], str]

# Order matters: ratios go before bare numbers, otherwise "16:9" would
# leave a stray ":" behind.
DESCRIPTION_STEPS: tuple[tuple[str, DescriptionStep], ...] = (
    ("strip_flags", strip_flags),
    ("strip_mentions", strip_mentions),
    ("strip_ratios", strip_ratios),
    ("strip_bare_numbers", strip_bare_numbers),
    ("strip_parentheticals", strip_parentheticals),
    ("strip_trailing_comma", strip_trailing_comma),
)


def isolate_description(text: str, image_urls: Iterable[str] = ()) -> str:
    """Run the description pipeline over ``text``.

    Args:
        text: Original prompt
        image_urls: URLs already extracted from ``text``

    Returns:
        Description text with URLs, flags, mentions, ratios, numbers and
        parenthesised asides removed
    """
    result = strip_image_urls(text, image_urls)
    for _, step in DESCRIPTION_STEPS:
        result = step(result)
    return result


def split_descriptions(text: str) -> tuple[str, ...]:
    """Split on line breaks, trim, and drop empty lines."""
    return tuple(line.strip() for line in text.splitlines() if line.strip())


# ============================================================================
# Entry Point
# ============================================================================

def analyze(text: str | None) -> PromptAnalysis:
    """Decompose a prompt into images, descriptions and parameters.

    Args:
        text: Raw prompt as typed by the user

    Returns:
        A fresh PromptAnalysis. Empty or malformed input yields empty
        collections; this function never raises on string input.
    """
    if not text:
        return PromptAnalysis()

    image_urls = extract_image_urls(text)
    parameters = extract_parameters(text)
    descriptions = split_descriptions(isolate_description(text, image_urls))

    logger.debug(f"Found images: {list(image_urls)}")
    logger.debug(f"Found descriptions: {list(descriptions)}")
    logger.debug(f"Found parameters: {[p.as_flag() for p in parameters]}")

    return PromptAnalysis(
        image_urls=image_urls,
        descriptions=descriptions,
        parameters=parameters,
    )
