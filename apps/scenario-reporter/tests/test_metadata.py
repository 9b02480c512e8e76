from __future__ import annotations

import pytest

from scenario_reporter.metadata import (
    CONTEXT_UNKNOWN,
    TEST_NAME_UNAVAILABLE,
    DuplicateWhenStepError,
    ScenarioTestMetadata,
    UnsupportedReportKindError,
)
from scenario_reporter.models import (
    FeatureDeclaration,
    ReportKind,
    ScenarioDeclaration,
    StepDeclaration,
    StepType,
)
from scenario_reporter.runner_context import TestNameUnavailableError, fixed_test_name, pytest_current_test
from scenario_reporter.settings import ReportSettings
from scenario_reporter.step_names import step_from_callable


def _step(kind: StepType, name: str, source: str, **flags: bool) -> StepDeclaration:
    return StepDeclaration(kind=kind, name=name, source_description=source, **flags)


def _login_metadata(settings: ReportSettings, current_test=None) -> ScenarioTestMetadata:
    metadata = ScenarioTestMetadata(
        "User_logs_in",
        settings=settings,
        feature=FeatureDeclaration(summary="Login", details=["users must authenticate"]),
        scenario=ScenarioDeclaration(description=""),
        tags=["smoke"],
        current_test=current_test,
    )
    metadata.add_step(_step(StepType.GIVEN, "a registered user", "tests.login.User_logs_in.given_user"))
    metadata.add_step(_step(StepType.WHEN, "they log in", "tests.login.User_logs_in.when_login"))
    metadata.add_step(_step(StepType.THEN, "they see the dashboard", "tests.login.User_logs_in.then_dashboard"))
    metadata.add_step(_step(StepType.THEN, "their session is active", "tests.login.User_logs_in.then_session"))
    return metadata


class When_test_throws_an_exception_that_is_not_caught_scenario:
    def When(self) -> None:
        raise RuntimeError("boom")

    def Then(self) -> None:
        pass


def test_entire_scenario_report(token_settings: ReportSettings) -> None:
    report = _login_metadata(token_settings).build_report(ReportKind.ENTIRE_SCENARIO)

    assert report.feature_lines == ["<FeatureToken>Login", "<Indent>users must authenticate"]
    assert report.scenario_lines == ["@smoke", "<ScenarioToken>user logs in"]
    assert report.step_lines == [
        "<GivenToken> a registered user",
        "<WhenToken> they log in",
        "<ThenToken> they see the dashboard",
        "<Indent><AndToken> their session is active",
    ]


def test_current_test_report_uses_first_line_formatting(token_settings: ReportSettings) -> None:
    metadata = _login_metadata(token_settings, current_test=fixed_test_name("User_logs_in.then_session"))

    report = metadata.build_report(ReportKind.CURRENT_TEST)

    assert report.step_lines == [
        "<GivenToken> a registered user",
        "<WhenToken> they log in",
        "<ThenToken> their session is active",
    ]


def test_current_test_matches_on_last_dot_segment(token_settings: ReportSettings) -> None:
    metadata = _login_metadata(token_settings, current_test=fixed_test_name("then_dashboard"))

    report = metadata.create_report_for_current_test()

    assert report.step_lines[-1] == "<ThenToken> they see the dashboard"


def test_current_test_without_context_renders_placeholder(token_settings: ReportSettings) -> None:
    for lookup in (None, fixed_test_name(None)):
        report = _login_metadata(token_settings, current_test=lookup).build_report(ReportKind.CURRENT_TEST)
        assert report.step_lines[-1] == CONTEXT_UNKNOWN


def test_current_test_with_unreadable_name_renders_placeholder(token_settings: ReportSettings) -> None:
    def broken_lookup() -> str:
        raise TestNameUnavailableError("no name")

    report = _login_metadata(token_settings, current_test=broken_lookup).build_report(ReportKind.CURRENT_TEST)

    assert report.step_lines[-1] == TEST_NAME_UNAVAILABLE


def test_current_test_without_matching_then_renders_placeholder(token_settings: ReportSettings) -> None:
    metadata = _login_metadata(token_settings, current_test=fixed_test_name("tests.Other.then_missing"))

    report = metadata.build_report(ReportKind.CURRENT_TEST)

    assert report.step_lines[-1] == "!!! Unknown Test 'then_missing' !!!"


def test_current_test_resolves_running_pytest_test(token_settings: ReportSettings) -> None:
    metadata = ScenarioTestMetadata("Pytest_lookup", settings=token_settings, current_test=pytest_current_test)
    metadata.add_step(_step(StepType.THEN, "first check", "suite.test_something_else"))
    metadata.add_step(
        _step(StepType.THEN, "this very test", "suite.test_current_test_resolves_running_pytest_test")
    )

    report = metadata.build_report(ReportKind.CURRENT_TEST)

    assert report.step_lines == ["<ThenToken> this very test"]


def test_second_when_step_is_rejected() -> None:
    metadata = ScenarioTestMetadata("Two_whens")
    metadata.add_step(_step(StepType.WHEN, "first", "suite.Two_whens.when_first"))

    with pytest.raises(DuplicateWhenStepError) as excinfo:
        metadata.add_step(_step(StepType.WHEN, "second", "suite.Two_whens.when_second"))

    message = str(excinfo.value)
    assert "suite.Two_whens.when_first" in message
    assert "suite.Two_whens.when_second" in message
    assert metadata.when_step is not None
    assert metadata.when_step.name == "first"


def test_when_step_is_optional() -> None:
    metadata = ScenarioTestMetadata("No_when")
    metadata.add_step(_step(StepType.GIVEN, "something", "suite.given"))

    assert metadata.when_step is None
    assert [step.name for step in metadata.given_steps] == ["something"]
    assert metadata.then_steps == []


def test_unsupported_report_kind() -> None:
    metadata = ScenarioTestMetadata("Any_scenario")

    with pytest.raises(UnsupportedReportKindError):
        metadata.build_report("everything")


def test_report_kind_accepts_values() -> None:
    metadata = ScenarioTestMetadata("Any_scenario")
    metadata.add_step(_step(StepType.THEN, "done", "suite.then_done"))

    assert metadata.build_report("entire").step_lines == ["Then done"]


def test_parameters_are_substituted_at_registration(token_settings: ReportSettings) -> None:
    metadata = ScenarioTestMetadata("Parameterised", settings=token_settings)
    metadata.set_parameter("user", "alice")
    metadata.set_parameter("user", "bob")
    metadata.add_step(_step(StepType.GIVEN, "user {user} with role {role}", "suite.given_user"))
    metadata.set_parameter("user", "carol")
    metadata.set_parameter("role", "admin")
    metadata.add_step(_step(StepType.GIVEN, "role {role}", "suite.given_role"))

    report = metadata.build_report(ReportKind.ENTIRE_SCENARIO)

    assert report.step_lines == [
        "<GivenToken> user bob with role {role}",
        "<Indent><AndToken> role admin",
    ]
    assert dict(metadata.parameters) == {"user": "carol", "role": "admin"}


def test_suppressed_steps_never_reported(token_settings: ReportSettings) -> None:
    metadata = ScenarioTestMetadata(
        "Quiet_scenario",
        settings=token_settings,
        current_test=fixed_test_name("suite.then_hidden"),
    )
    metadata.add_step(_step(StepType.GIVEN, "hidden setup", "suite.given_hidden", suppress_output=True))
    metadata.add_step(_step(StepType.GIVEN, "visible setup", "suite.given_visible"))
    metadata.add_step(_step(StepType.WHEN, "", "suite.when_hidden", suppress_output=True))
    metadata.add_step(_step(StepType.THEN, "hidden check", "suite.then_hidden", suppress_output=True))
    metadata.add_step(_step(StepType.THEN, "visible check", "suite.then_visible"))

    entire = metadata.build_report(ReportKind.ENTIRE_SCENARIO)
    current = metadata.build_report(ReportKind.CURRENT_TEST)

    assert entire.step_lines == ["<GivenToken> visible setup", "<ThenToken> visible check"]
    assert current.step_lines == ["<GivenToken> visible setup"]
    for line in entire.step_lines + current.step_lines:
        assert "hidden" not in line


def test_unnamed_when_falls_back_to_scenario_name(token_settings: ReportSettings) -> None:
    metadata = ScenarioTestMetadata("User_logs_in_scenario", settings=token_settings)
    metadata.add_step(_step(StepType.WHEN, "", "suite.when"))

    report = metadata.build_report(ReportKind.ENTIRE_SCENARIO)

    assert report.step_lines == ["<WhenToken> user logs in scenario"]


def test_steps_declared_from_callables() -> None:
    scenario = When_test_throws_an_exception_that_is_not_caught_scenario
    metadata = ScenarioTestMetadata(scenario.__name__)
    metadata.add_step(step_from_callable(StepType.WHEN, scenario.When, expects_exception=True))
    metadata.add_step(step_from_callable(StepType.THEN, scenario.Then))

    report = metadata.create_report_for_entire_scenario()

    assert report.scenario_lines == ["Scenario: when test throws an exception that is not caught scenario"]
    assert report.step_lines == ["When test throws an exception that is not caught scenario"]
    assert metadata.when_step.expects_exception is True
    assert metadata.when_step.source_description.endswith(
        "When_test_throws_an_exception_that_is_not_caught_scenario.When"
    )
    assert metadata.then_steps[0].expects_exception is False


def test_scenario_outline_and_explicit_description() -> None:
    metadata = ScenarioTestMetadata(
        "Ignored_name",
        scenario=ScenarioDeclaration(description="Checkout with <items>", outline=True),
    )

    report = metadata.build_report(ReportKind.ENTIRE_SCENARIO)

    assert report.feature_lines == []
    assert report.scenario_lines == ["Scenario Outline: Checkout with <items>"]
    assert report.step_lines == []


def test_output_suppressed_flag_is_kept() -> None:
    assert ScenarioTestMetadata("Loud").is_output_suppressed is False
    assert ScenarioTestMetadata("Quiet", suppress_output=True).is_output_suppressed is True


def test_reporting_context_render(token_settings: ReportSettings) -> None:
    report = _login_metadata(token_settings).build_report(ReportKind.ENTIRE_SCENARIO)

    assert report.render() == "\n".join(
        [
            "<FeatureToken>Login",
            "<Indent>users must authenticate",
            "",
            "@smoke",
            "<ScenarioToken>user logs in",
            "",
            "<GivenToken> a registered user",
            "<WhenToken> they log in",
            "<ThenToken> they see the dashboard",
            "<Indent><AndToken> their session is active",
        ]
    )
