"""Scenario definition loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from .metadata import ScenarioTestMetadata
from .models import FeatureDeclaration, ScenarioDeclaration, StepDeclaration, StepType
from .runner_context import CurrentTestLookup
from .settings import ReportSettings


class StepDefinition(BaseModel):
    """Single step entry of a scenario file."""

    kind: StepType
    name: str = ""
    source: Optional[str] = None
    suppress_output: bool = False
    expects_exception: bool = False


class ScenarioDefinition(BaseModel):
    """Declarative description of one scenario and its steps."""

    name: str
    feature: Optional[FeatureDeclaration] = None
    scenario: ScenarioDeclaration = Field(default_factory=ScenarioDeclaration)
    tags: list[str] = Field(default_factory=list)
    suppress_output: bool = False
    parameters: dict[str, Any] = Field(default_factory=dict)
    steps: list[StepDefinition] = Field(default_factory=list)

    def step_declarations(self) -> list[StepDeclaration]:
        declarations: list[StepDeclaration] = []
        for index, step in enumerate(self.steps, start=1):
            declarations.append(
                StepDeclaration(
                    kind=step.kind,
                    name=step.name,
                    source_description=step.source or f"{self.name}.{step.kind.value}{index}",
                    suppress_output=step.suppress_output,
                    expects_exception=step.expects_exception,
                )
            )
        return declarations


def load_definition(path: Path) -> ScenarioDefinition:
    """Load and validate a scenario YAML file."""

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Scenario file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Scenario file {path} must contain a mapping")
    return ScenarioDefinition.model_validate(data)


def build_metadata(
    definition: ScenarioDefinition,
    *,
    settings: ReportSettings | None = None,
    current_test: CurrentTestLookup | None = None,
    parameters: Mapping[str, str] | None = None,
) -> ScenarioTestMetadata:
    """Create scenario metadata, setting parameters before registering steps."""

    metadata = ScenarioTestMetadata(
        definition.name,
        settings=settings,
        feature=definition.feature,
        scenario=definition.scenario,
        tags=definition.tags,
        suppress_output=definition.suppress_output,
        current_test=current_test,
    )
    for name, value in {**definition.parameters, **(parameters or {})}.items():
        metadata.set_parameter(name, value)
    for declaration in definition.step_declarations():
        metadata.add_step(declaration)
    return metadata
