"""Display tokens used when rendering scenario reports."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from .models import StepType

ENV_VAR_NAME = "SCENARIO_REPORT_SETTINGS"


class TokenType(str, Enum):
    FEATURE = "feature"
    SCENARIO = "scenario"
    SCENARIO_OUTLINE = "scenario_outline"


class SeparatorType(str, Enum):
    INDENT = "indent"
    AND = "and"


def _default_tokens() -> dict[TokenType, str]:
    return {
        TokenType.FEATURE: "Feature: ",
        TokenType.SCENARIO: "Scenario: ",
        TokenType.SCENARIO_OUTLINE: "Scenario Outline: ",
    }


def _default_steps() -> dict[StepType, str]:
    return {step_type: step_type.value for step_type in StepType}


def _default_separators() -> dict[SeparatorType, str]:
    return {
        SeparatorType.INDENT: "    ",
        SeparatorType.AND: "And",
    }


class ReportSettings(BaseModel):
    """Maps abstract report elements to the strings shown in output.

    Every mapping is filled with English Gherkin defaults, so a settings
    file only needs to list the keys it changes::

        tokens:
          feature: "Fonctionnalité : "
        steps:
          Given: Soit
        separators:
          and: Et
    """

    tokens: dict[TokenType, str] = Field(default_factory=_default_tokens)
    steps: dict[StepType, str] = Field(default_factory=_default_steps)
    separators: dict[SeparatorType, str] = Field(default_factory=_default_separators)

    def model_post_init(self, __context: object) -> None:
        self.tokens = {**_default_tokens(), **self.tokens}
        self.steps = {**_default_steps(), **self.steps}
        self.separators = {**_default_separators(), **self.separators}

    @classmethod
    def from_file(cls, path: Path) -> "ReportSettings":
        if not path.exists():
            raise FileNotFoundError(f"Settings file {path} not found")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"Settings file {path} is not valid YAML: {exc}") from exc
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls.model_validate(raw)

    def get_token(self, token_type: TokenType) -> str:
        return self.tokens[token_type]

    def get_step(self, step_type: StepType) -> str:
        return self.steps[step_type]

    def get_separator(self, separator_type: SeparatorType) -> str:
        return self.separators[separator_type]


def load_settings(cli_override: Path | None = None) -> ReportSettings:
    """
    Resolve report settings with priority: CLI parameter > Environment variable > Defaults.

    Args:
        cli_override: Optional settings file passed on the command line

    Returns:
        ReportSettings instance
    """
    if cli_override is not None:
        return ReportSettings.from_file(cli_override)

    env_value = os.environ.get(ENV_VAR_NAME)
    if env_value:
        return ReportSettings.from_file(Path(env_value))

    return ReportSettings()
