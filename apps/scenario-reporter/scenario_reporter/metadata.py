"""Per-scenario step registry and report assembly."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import structlog

from .models import (
    FeatureDeclaration,
    ReportingContext,
    ReportKind,
    ScenarioDeclaration,
    StepDeclaration,
    StepRecord,
    StepType,
)
from .runner_context import CurrentTestLookup, TestNameUnavailableError
from .settings import ReportSettings, SeparatorType, TokenType
from .step_names import StepName, substitute_parameters, with_spaces

LOGGER = structlog.get_logger("scenario_reporter")

CONTEXT_UNKNOWN = "!!! Test Context Unknown -- check your test runner !!!"
TEST_NAME_UNAVAILABLE = "!!! Cannot get test name -- check your test runner !!!"
UNKNOWN_TEST = "!!! Unknown Test '{name}' !!!"


class ScenarioMetadataError(RuntimeError):
    """Base class for structural errors in a scenario declaration."""


class DuplicateWhenStepError(ScenarioMetadataError):
    """Raised when a scenario declares more than one When step."""


class UnsupportedReportKindError(ScenarioMetadataError):
    """Raised when a report is requested for an unknown report kind."""


class ScenarioTestMetadata:
    """Collects the steps of one scenario and renders them as Gherkin text.

    Step names are rendered once, when the step is added, using the
    parameters set up to that point.
    """

    def __init__(
        self,
        scenario_name: str,
        *,
        settings: ReportSettings | None = None,
        feature: FeatureDeclaration | None = None,
        scenario: ScenarioDeclaration | None = None,
        tags: Iterable[str] = (),
        suppress_output: bool = False,
        current_test: Optional[CurrentTestLookup] = None,
    ) -> None:
        self.scenario_name = scenario_name
        self.settings = settings or ReportSettings()
        self.feature = feature
        self.scenario = scenario or ScenarioDeclaration()
        self.tags = list(tags)
        self._is_output_suppressed = suppress_output
        self._current_test = current_test
        self._steps: dict[StepType, list[StepRecord]] = {step_type: [] for step_type in StepType}
        self._parameters: dict[str, str] = {}
        self._logger = LOGGER.bind(scenario=scenario_name)

    def add_step(self, step: StepDeclaration) -> StepRecord:
        existing_when = self._steps[StepType.WHEN]
        if step.kind is StepType.WHEN and existing_when:
            raise DuplicateWhenStepError(
                "Currently, only a single 'When' is supported, found: "
                f"{existing_when[0].declaration.source_description} and {step.source_description}"
            )

        rendered_name = "" if step.suppress_output else substitute_parameters(step.name, self._parameters)
        if step.kind is StepType.WHEN and not rendered_name and not step.suppress_output:
            rendered_name = StepName(StepType.WHEN, self.scenario_name).pretty_name

        record = StepRecord(declaration=step, rendered_name=rendered_name)
        self._steps[step.kind].append(record)
        self._logger.debug(
            "step_registered",
            kind=step.kind.value,
            source=step.source_description,
            rendered_name=rendered_name,
        )
        return record

    def set_parameter(self, name: str, value: object) -> None:
        self._parameters[name] = str(value)
        self._logger.debug("parameter_set", name=name)

    @property
    def given_steps(self) -> list[StepDeclaration]:
        return self._declarations(StepType.GIVEN)

    @property
    def when_step(self) -> StepDeclaration | None:
        steps = self._declarations(StepType.WHEN)
        return steps[0] if steps else None

    @property
    def then_steps(self) -> list[StepDeclaration]:
        return self._declarations(StepType.THEN)

    @property
    def parameters(self) -> Mapping[str, str]:
        return MappingProxyType(self._parameters)

    @property
    def is_output_suppressed(self) -> bool:
        return self._is_output_suppressed

    def create_report_for_entire_scenario(self) -> ReportingContext:
        return self.build_report(ReportKind.ENTIRE_SCENARIO)

    def create_report_for_current_test(self) -> ReportingContext:
        return self.build_report(ReportKind.CURRENT_TEST)

    def build_report(self, kind: ReportKind | str) -> ReportingContext:
        try:
            kind = ReportKind(kind)
        except ValueError as exc:
            raise UnsupportedReportKindError(f"Unknown report type '{kind}'") from exc

        feature_lines = self._feature_report()
        scenario_lines = self._scenario_report()

        step_lines = self._step_report(StepType.GIVEN) + self._step_report(StepType.WHEN)
        if kind is ReportKind.ENTIRE_SCENARIO:
            step_lines += self._step_report(StepType.THEN)
        else:
            current_line = self._current_then_report()
            if current_line:
                step_lines.append(current_line)

        self._logger.debug("report_built", kind=kind.value, step_lines=len(step_lines))
        return ReportingContext(
            feature_lines=feature_lines,
            scenario_lines=scenario_lines,
            step_lines=step_lines,
        )

    def _declarations(self, step_type: StepType) -> list[StepDeclaration]:
        return [record.declaration for record in self._steps[step_type]]

    def _feature_report(self) -> list[str]:
        if self.feature is None:
            return []
        indent = self.settings.get_separator(SeparatorType.INDENT)
        lines = [f"{self.settings.get_token(TokenType.FEATURE)}{self.feature.summary}"]
        lines.extend(f"{indent}{line}" for line in self.feature.details)
        return lines

    def _scenario_report(self) -> list[str]:
        lines = [f"@{tag}" for tag in self.tags]
        token = TokenType.SCENARIO_OUTLINE if self.scenario.outline else TokenType.SCENARIO
        description = self.scenario.description
        if not description or not description.strip():
            description = with_spaces(self.scenario_name)
        lines.append(f"{self.settings.get_token(token)}{description}")
        return lines

    def _step_report(self, step_type: StepType) -> list[str]:
        indent = self.settings.get_separator(SeparatorType.INDENT)
        lines: list[str] = []
        for record in self._steps[step_type]:
            if not record.rendered_name:
                continue
            if lines:
                lines.append(f"{indent}{self._with_separator(record)}")
            else:
                lines.append(self._with_step_keyword(record))
        return lines

    def _with_step_keyword(self, record: StepRecord) -> str:
        return f"{self.settings.get_step(record.declaration.kind)} {record.rendered_name}"

    def _with_separator(self, record: StepRecord) -> str:
        return f"{self.settings.get_separator(SeparatorType.AND)} {record.rendered_name}"

    def _current_then_report(self) -> str:
        if self._current_test is None:
            self._logger.warning("current_test_unresolved", reason="no_context")
            return CONTEXT_UNKNOWN

        try:
            test_name = self._current_test()
        except TestNameUnavailableError as exc:
            self._logger.warning("current_test_unresolved", reason="name_unavailable", error=str(exc))
            return TEST_NAME_UNAVAILABLE
        if test_name is None:
            self._logger.warning("current_test_unresolved", reason="no_context")
            return CONTEXT_UNKNOWN

        current = test_name.split(".")[-1]
        for record in self._steps[StepType.THEN]:
            if record.declaration.source_description.split(".")[-1] == current:
                # suppressed steps stay out of every report
                return self._with_step_keyword(record) if record.rendered_name else ""

        self._logger.warning("current_test_unresolved", reason="no_matching_step", test=current)
        return UNKNOWN_TEST.format(name=current)
