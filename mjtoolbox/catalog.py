"""
Catalog of known Midjourney parameters.

Static registry of every ``--flag`` the toolbox knows about. Lookup of an
unknown key returns None, which callers treat as a generic flag without
metadata.

The default-value policy in ``resolve_default`` decides what gets written
into a prompt when a flag is added without a value:
    1. the definition's default_value
    2. numeric flags: the minimum, else "1"
    3. the first allowed value
    4. "1"
"""

from __future__ import annotations

from typing import Iterable, Optional

from mjtoolbox.models import (
    ParameterDefinition,
    PromptAnalysis,
    ValueType,
    format_number,
)

FALLBACK_VALUE = "1"

_VERSIONS = ("5.0", "5.1", "5.2", "6.0")

_DEFINITIONS = (
    ParameterDefinition(
        key="ar",
        display_name="Aspect Ratio",
        description=(
            "Sets the width:height ratio of the image, e.g. 16:9 for widescreen. "
            "Used to control composition and fit different displays."
        ),
        value_type=ValueType.TEXT,
        allowed_values=("1:1", "16:9", "9:16", "4:3", "3:4", "2:1", "1:2"),
        example="16:9 for a widescreen image, 1:1 for a square one",
    ),
    ParameterDefinition(
        key="chaos",
        display_name="Chaos",
        description=(
            "Controls how varied the results are. Higher values give more "
            "unusual and unexpected generations. Range 0-100."
        ),
        value_type=ValueType.NUMBER,
        minimum=0,
        maximum=100,
        example="Higher values produce more creative, surprising results",
    ),
    ParameterDefinition(
        key="quality",
        display_name="Quality",
        description=(
            "Controls rendering quality and detail. .25 is fast and rough, "
            ".5 is medium, 1 is the highest quality (slowest)."
        ),
        value_type=ValueType.CHOICE,
        allowed_values=(".25", ".5", "1"),
        default_value="1",
        example="1 for final work, .25 for quick tests",
    ),
    ParameterDefinition(
        key="seed",
        display_name="Seed",
        description=(
            "Sets the random seed. The same seed produces similar images, "
            "which helps when making small adjustments."
        ),
        value_type=ValueType.NUMBER,
        example="Keeps the base look stable while other parameters change",
    ),
    ParameterDefinition(
        key="stop",
        display_name="Stop",
        description=(
            "Stops generation at the given completion percentage. Range 10-100; "
            "useful to preview an image before it is finished."
        ),
        value_type=ValueType.NUMBER,
        minimum=10,
        maximum=100,
        example="Lower values show the rough result sooner",
    ),
    ParameterDefinition(
        key="style",
        display_name="Style",
        description=(
            "Controls the overall style. raw gives a more literal, photographic "
            "look with less of the model's artistic interpretation."
        ),
        value_type=ValueType.TEXT,
        allowed_values=("raw",),
        example="raw when the description must be followed precisely",
    ),
    ParameterDefinition(
        key="stylize",
        display_name="Stylize",
        description=(
            "Strength of the model's artistic styling. Range 0-1000, default 100. "
            "Higher is more stylised, lower is closer to realism."
        ),
        value_type=ValueType.NUMBER,
        minimum=0,
        maximum=1000,
        default_value="100",
        example="Low values (around 20) suit photographic results",
    ),
    ParameterDefinition(
        key="tile",
        display_name="Tile",
        description="Generates images that tile seamlessly, for backgrounds and textures.",
        value_type=ValueType.TEXT,
        example="Wallpapers, fabric patterns and other repeating images",
    ),
    ParameterDefinition(
        key="version",
        display_name="Version",
        description=(
            "Selects the Midjourney model version. Versions differ in features; "
            "V5 and later allow finer control over detail."
        ),
        value_type=ValueType.TEXT,
        allowed_values=_VERSIONS,
        example="V6.0 is the newest and understands prompts best",
    ),
    ParameterDefinition(
        key="weird",
        display_name="Weird",
        description=(
            "Adds quirky, surreal qualities. Range 0-3000; higher values give "
            "stranger images."
        ),
        value_type=ValueType.NUMBER,
        minimum=0,
        maximum=3000,
        example="High values give creative, surreal results",
    ),
    ParameterDefinition(
        key="iw",
        display_name="Image Weight",
        description=(
            "How strongly the reference images influence the result. Range 0-2: "
            "0 ignores them, 1 balances image and text, 2 follows the images closely."
        ),
        value_type=ValueType.NUMBER,
        minimum=0,
        maximum=2,
        default_value="1",
        example="2 when the output must closely follow the reference style",
    ),
    ParameterDefinition(
        key="v",
        display_name="Version",
        description=(
            "Shorthand for the model version. V5.0-V5.2 lean towards realism, "
            "V6.0 has better text understanding and creativity."
        ),
        value_type=ValueType.CHOICE,
        allowed_values=_VERSIONS,
        default_value="6.0",
        example="V6.0 for creative scenes, V5.2 for realistic photos",
    ),
    ParameterDefinition(
        key="s",
        display_name="Stylize",
        description=(
            "Shorthand for stylize. Range 0-1000; higher values look more "
            "artistic, lower values more realistic. 100 is the default."
        ),
        value_type=ValueType.NUMBER,
        minimum=0,
        maximum=1000,
        default_value="100",
        example="Low (around 20) for photos, high (around 750) for artwork",
    ),
)

PARAMETER_CATALOG: dict[str, ParameterDefinition] = {d.key: d for d in _DEFINITIONS}


def lookup(key: str) -> Optional[ParameterDefinition]:
    """Return the definition for ``key``, or None for an unknown flag."""
    return PARAMETER_CATALOG.get(key)


def catalog_keys() -> list[str]:
    return list(PARAMETER_CATALOG)


def resolve_default(key: str) -> str:
    """Value to write for ``key`` when the user supplies none."""
    definition = lookup(key)
    if definition is None:
        return FALLBACK_VALUE
    if definition.default_value:
        return definition.default_value
    if definition.value_type is ValueType.NUMBER:
        if definition.minimum is not None:
            return format_number(definition.minimum)
        return FALLBACK_VALUE
    if definition.allowed_values:
        return definition.allowed_values[0]
    return FALLBACK_VALUE


def available_parameters(analysis: PromptAnalysis) -> list[ParameterDefinition]:
    """Catalog entries not yet present in the analysed prompt."""
    present = set(analysis.parameter_names())
    return [d for d in _DEFINITIONS if d.key not in present]


def describe(key: str) -> str:
    """Multi-line help text for a flag."""
    definition = lookup(key)
    if definition is None:
        return f"--{key}: no catalog entry (unknown flag)"

    lines = [f"--{definition.key}  {definition.display_name} ({definition.value_type.value})"]
    lines.append(definition.description)
    if definition.allowed_values:
        lines.append(f"Values: {', '.join(definition.allowed_values)}")
    if definition.value_type is ValueType.NUMBER:
        lines.append(f"Range: {definition.range_label}")
    lines.append(f"Default: {resolve_default(key)}")
    if definition.example:
        lines.append(f"Example: {definition.example}")
    return "\n".join(lines)


def iter_definitions(keys: Iterable[str] | None = None) -> list[ParameterDefinition]:
    """Definitions for ``keys`` (all when None), skipping unknown names."""
    if keys is None:
        return list(_DEFINITIONS)
    return [PARAMETER_CATALOG[k] for k in keys if k in PARAMETER_CATALOG]
