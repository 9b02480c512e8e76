"""Step name helpers: placeholder substitution and identifier humanizing."""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from .models import StepDeclaration, StepType

_PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


def substitute_parameters(template: str, parameters: Mapping[str, str]) -> str:
    """Replace ``{key}`` placeholders with parameter values.

    Unknown keys and unbalanced braces are left in the text as written.
    """

    if not template:
        return ""

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in parameters:
            return str(parameters[key])
        return match.group(0)

    return _PLACEHOLDER_PATTERN.sub(_substitute, template)


def remove_prefix(text: str | None, prefix: str) -> str | None:
    if not text:
        return None
    if text.lower().startswith(prefix.lower()):
        if len(text) == len(prefix):
            # nothing meaningful left to show
            return None
        return text[len(prefix):]
    return text


def with_first_letter_lowercase(text: str | None) -> str:
    if not text or not text.strip():
        return ""
    return text[0].lower() + text[1:]


def with_spaces(text: str) -> str:
    """Turn ``Snake_case`` or ``PascalCase`` identifiers into lowercase words."""

    if "_" in text:
        return text.replace("_", " ").lstrip().lower()

    pieces: list[str] = []
    for index, char in enumerate(text):
        if char.isupper() and index > 0:
            follows_lower = text[index - 1].islower()
            starts_word = index + 1 < len(text) and text[index + 1].islower()
            if follows_lower or starts_word:
                pieces.append(" ")
        pieces.append(char)
    return "".join(pieces).lower()


class StepName:
    """Display name derived from a step identifier such as ``Given_a_user``."""

    def __init__(self, kind: StepType, raw_name: str) -> None:
        self.kind = kind
        self.raw_name = raw_name

    @property
    def pretty_name(self) -> str:
        stripped = remove_prefix(self.raw_name, self.kind.value)
        if stripped is None:
            return ""
        return with_first_letter_lowercase(with_spaces(stripped).strip())

    def __repr__(self) -> str:
        return f"StepName({self.kind.value!r}, {self.raw_name!r})"


def step_from_callable(
    kind: StepType,
    func: Callable[..., Any],
    *,
    suppress_output: bool = False,
    expects_exception: bool = False,
) -> StepDeclaration:
    """Declare a step from a Python function, naming it after the function."""

    return StepDeclaration(
        kind=kind,
        name=StepName(kind, func.__name__).pretty_name,
        source_description=f"{func.__module__}.{func.__qualname__}",
        suppress_output=suppress_output,
        expects_exception=expects_exception,
    )
