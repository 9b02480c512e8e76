"""Ensure the package under test is importable when running from the repo root."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from scenario_reporter.models import StepType  # noqa: E402
from scenario_reporter.settings import ReportSettings  # noqa: E402


@pytest.fixture
def token_settings() -> ReportSettings:
    """Settings whose tokens are easy to spot in assertions."""

    return ReportSettings(
        tokens={
            "feature": "<FeatureToken>",
            "scenario": "<ScenarioToken>",
            "scenario_outline": "<OutlineToken>",
        },
        steps={
            StepType.GIVEN: "<GivenToken>",
            StepType.WHEN: "<WhenToken>",
            StepType.THEN: "<ThenToken>",
        },
        separators={"indent": "<Indent>", "and": "<AndToken>"},
    )
