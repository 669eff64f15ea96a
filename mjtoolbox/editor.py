"""
Parameter editing as pure prompt-string transforms.

None of these functions extract anything: each returns a new prompt string
and the caller re-runs ``analyze`` on it to get a consistent analysis.
"""

from __future__ import annotations

import re

from mjtoolbox.catalog import resolve_default


class ParameterNotFoundError(LookupError):
    """Raised when editing a flag that does not occur in the prompt."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"--{name} does not occur in the prompt")


def _occurrence_pattern(name: str) -> re.Pattern:
    # The lookahead keeps "--s" from matching the start of "--stylize"
    return re.compile(
        rf'--{re.escape(name)}(?![a-zA-Z0-9])(?:[:\s]+(?!--)\S+)?\s*'
    )


def update_parameter(prompt: str, name: str, candidate_value: str = "") -> str:
    """Rewrite the first ``--name`` occurrence with a new value.

    Args:
        prompt: Current prompt
        name: Flag name without the leading dashes
        candidate_value: Value typed by the user; blank means "use the default"

    Returns:
        The new prompt, stripped

    Raises:
        ParameterNotFoundError: if ``--name`` is not in the prompt
    """
    value = (candidate_value or "").strip() or resolve_default(name)
    pattern = _occurrence_pattern(name)
    if not pattern.search(prompt):
        raise ParameterNotFoundError(name)
    # A callable replacement keeps backslashes in the value literal
    return pattern.sub(lambda _: f"--{name} {value} ", prompt, count=1).strip()


def add_parameter(prompt: str, name: str) -> str:
    """Append ``--name <default>`` to the prompt."""
    return f"{prompt} --{name} {resolve_default(name)}".strip()


def remove_parameter(prompt: str, name: str) -> str:
    """Delete the first ``--name[ value]`` occurrence.

    Raises:
        ParameterNotFoundError: if ``--name`` is not in the prompt
    """
    pattern = _occurrence_pattern(name)
    match = pattern.search(prompt)
    if match is None:
        raise ParameterNotFoundError(name)
    head = prompt[:match.start()].rstrip(" \t")
    tail = prompt[match.end():]
    if head and tail and not head.endswith("\n"):
        head += " "
    return (head + tail).strip()
