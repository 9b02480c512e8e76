"""Step, scenario and report models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class StepType(str, Enum):
    """Kind of a scenario step, in execution order."""

    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"


class ReportKind(str, Enum):
    """Which part of a scenario a report covers."""

    ENTIRE_SCENARIO = "entire"
    CURRENT_TEST = "current"


class StepDeclaration(BaseModel):
    """One declared step of a scenario."""

    model_config = ConfigDict(frozen=True)

    kind: StepType
    name: str = ""
    source_description: str
    suppress_output: bool = False
    expects_exception: bool = False


class StepRecord(BaseModel):
    """A registered step with its name rendered at registration time."""

    declaration: StepDeclaration
    rendered_name: str


class FeatureDeclaration(BaseModel):
    summary: str
    details: list[str] = Field(default_factory=list)


class ScenarioDeclaration(BaseModel):
    description: Optional[str] = None
    outline: bool = False


class ReportingContext(BaseModel):
    """Report text split into feature, scenario and step blocks."""

    feature_lines: list[str] = Field(default_factory=list)
    scenario_lines: list[str] = Field(default_factory=list)
    step_lines: list[str] = Field(default_factory=list)

    def blocks(self) -> list[list[str]]:
        return [self.feature_lines, self.scenario_lines, self.step_lines]

    def render(self, newline: str = "\n") -> str:
        """Join the non-empty blocks, separating them with a blank line."""

        return (newline * 2).join(newline.join(block) for block in self.blocks() if block)

    def as_serializable(self) -> dict[str, Any]:
        return {
            "feature": list(self.feature_lines),
            "scenario": list(self.scenario_lines),
            "steps": list(self.step_lines),
        }
