"""
Core data models for MJ-Toolbox.

These models describe a prompt after it has been taken apart: the image
references it embeds, the free-text description, and the ``--flag``
parameters, plus the sentence pairs produced once the description has
been translated.

Design Philosophy:
- The prompt string is the single source of truth
- Derived models are frozen and replaced wholesale on every re-analysis
- Serializable: every model can be converted to a dict for JSON output
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ValueType(Enum):
    """Kind of value a catalog parameter accepts."""
    NUMBER = "number"
    TEXT = "text"
    CHOICE = "choice"


@dataclass(frozen=True)
class ParameterDefinition:
    """Static metadata for a known ``--flag``.

    Attributes:
        key: Flag name as typed after ``--`` (unique)
        display_name: Human-readable name
        description: What the flag controls
        value_type: number, text or choice
        allowed_values: Suggested or permitted values, in display order
        minimum: Lower bound (numeric flags only)
        maximum: Upper bound (numeric flags only)
        default_value: Value used when none is given
        example: Short usage hint
    """
    key: str
    display_name: str
    description: str
    value_type: ValueType = ValueType.TEXT
    allowed_values: tuple[str, ...] = ()
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    default_value: Optional[str] = None
    example: Optional[str] = None

    @property
    def range_label(self) -> str:
        if self.minimum is not None and self.maximum is not None:
            return f"{format_number(self.minimum)} - {format_number(self.maximum)}"
        return "unbounded"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "display_name": self.display_name,
            "description": self.description,
            "value_type": self.value_type.value,
            "allowed_values": list(self.allowed_values),
            "minimum": self.minimum,
            "maximum": self.maximum,
            "default_value": self.default_value,
            "example": self.example,
        }


@dataclass(frozen=True)
class ExtractedParameter:
    """One ``--name value`` occurrence found in a prompt.

    ``enabled`` is always True when produced by the decomposer. Disabling a
    flag means removing it from the prompt.
    """
    name: str
    value: str = ""
    enabled: bool = True

    def as_flag(self) -> str:
        return f"--{self.name} {self.value}" if self.value else f"--{self.name}"

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value, "enabled": self.enabled}


@dataclass(frozen=True)
class PromptAnalysis:
    """Result of decomposing a prompt.

    Attributes:
        image_urls: Image references in first-seen order, no duplicates
        descriptions: Non-empty trimmed description lines
        parameters: Every flag occurrence, in order of appearance
    """
    image_urls: tuple[str, ...] = ()
    descriptions: tuple[str, ...] = ()
    parameters: tuple[ExtractedParameter, ...] = ()

    @property
    def description_text(self) -> str:
        """Description lines joined back together, as sent to translation."""
        return "\n".join(self.descriptions)

    @property
    def is_empty(self) -> bool:
        return not (self.image_urls or self.descriptions or self.parameters)

    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]

    def to_dict(self) -> dict:
        return {
            "image_urls": list(self.image_urls),
            "descriptions": list(self.descriptions),
            "parameters": [p.to_dict() for p in self.parameters],
        }


@dataclass(frozen=True)
class SentencePair:
    """A source sentence and the translated sentence at the same position."""
    original: str
    translated: str
    index: int

    def to_dict(self) -> dict:
        return {"original": self.original, "translated": self.translated, "index": self.index}


class TranslationStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TranslationState:
    """Translation-side state owned by a prompt session.

    Replaced wholesale after every completed request; ``request_id`` is the
    sequence number of the request that produced it.
    """
    status: TranslationStatus = TranslationStatus.IDLE
    translated_text: str = ""
    pairs: list[SentencePair] = field(default_factory=list)
    error: Optional[str] = None
    request_id: int = 0

    @property
    def failed(self) -> bool:
        return self.status is TranslationStatus.FAILED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "translated_text": self.translated_text,
            "pairs": [p.to_dict() for p in self.pairs],
            "error": self.error,
            "request_id": self.request_id,
        }


def format_number(value: float) -> str:
    """Render a bound the way it would be typed in a prompt (10.0 -> '10')."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
