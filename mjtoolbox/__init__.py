"""
MJ-Toolbox: analyse, edit and translate Midjourney prompts.

Takes a free-form prompt apart into image references, description text
and ``--flag`` parameters, edits parameters as plain string transforms,
and aligns a translated description sentence by sentence.

License: MIT
"""

__version__ = "0.1.0"

from mjtoolbox.models import (
    ExtractedParameter,
    ParameterDefinition,
    PromptAnalysis,
    SentencePair,
    ValueType,
)
from mjtoolbox.decompose import analyze
from mjtoolbox.editor import add_parameter, remove_parameter, update_parameter
from mjtoolbox.align import align

__all__ = [
    "ExtractedParameter",
    "ParameterDefinition",
    "PromptAnalysis",
    "SentencePair",
    "ValueType",
    "analyze",
    "add_parameter",
    "remove_parameter",
    "update_parameter",
    "align",
]
