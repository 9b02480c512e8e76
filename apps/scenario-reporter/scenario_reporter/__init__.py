"""Given/When/Then step registry and scenario report rendering."""
from __future__ import annotations

from .loader import ScenarioDefinition, StepDefinition, build_metadata, load_definition
from .metadata import (
    DuplicateWhenStepError,
    ScenarioMetadataError,
    ScenarioTestMetadata,
    UnsupportedReportKindError,
)
from .models import (
    FeatureDeclaration,
    ReportingContext,
    ReportKind,
    ScenarioDeclaration,
    StepDeclaration,
    StepRecord,
    StepType,
)
from .runner_context import TestNameUnavailableError, fixed_test_name, pytest_current_test
from .settings import ReportSettings, SeparatorType, TokenType, load_settings
from .step_names import (
    StepName,
    step_from_callable,
    remove_prefix,
    substitute_parameters,
    with_first_letter_lowercase,
    with_spaces,
)

__all__ = [
    # Models
    "FeatureDeclaration",
    "ReportingContext",
    "ReportKind",
    "ScenarioDeclaration",
    "StepDeclaration",
    "StepRecord",
    "StepType",
    # Metadata
    "DuplicateWhenStepError",
    "ScenarioMetadataError",
    "ScenarioTestMetadata",
    "UnsupportedReportKindError",
    # Step names
    "StepName",
    "step_from_callable",
    "remove_prefix",
    "substitute_parameters",
    "with_first_letter_lowercase",
    "with_spaces",
    # Settings
    "ReportSettings",
    "SeparatorType",
    "TokenType",
    "load_settings",
    # Runner context
    "TestNameUnavailableError",
    "fixed_test_name",
    "pytest_current_test",
    # Loader
    "ScenarioDefinition",
    "StepDefinition",
    "build_metadata",
    "load_definition",
]
