"""CLI entrypoint for scenario-reporter."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

if __package__ in {None, ""}:
    sys.path.append(str(Path(__file__).resolve().parents[1]))
    __package__ = "scenario_reporter"

from .console_reporter import ConsoleReporter
from .loader import build_metadata, load_definition
from .logging_utils import configure_logging
from .metadata import ScenarioMetadataError
from .models import ReportKind
from .output_config import get_log_format, get_output_format
from .runner_context import fixed_test_name, pytest_current_test
from .settings import load_settings

app = typer.Typer(help="Render Given/When/Then reports from declarative scenario files.")


def _parse_parameters(pairs: list[str]) -> dict[str, str]:
    result: dict[str, str] = {}
    for item in pairs:
        if "=" not in item:
            raise typer.BadParameter("Parameters must be in key=value format")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Parameter name cannot be empty")
        result[key] = value.strip()
    return result


@app.command()
def report(
    scenario: Path = typer.Option(..., exists=True, dir_okay=False, help="Scenario definition YAML."),
    kind: ReportKind = typer.Option(ReportKind.ENTIRE_SCENARIO, help="Report the whole scenario or the current test."),
    current_test: Optional[str] = typer.Option(
        None,
        help="Name of the running test; defaults to the pytest test in progress.",
    ),
    param: list[str] = typer.Option(
        [],
        "--param",
        "-p",
        help="Scenario parameter key=value pairs substituted into step names.",
    ),
    settings: Optional[Path] = typer.Option(None, help="YAML file overriding report tokens."),
    output_format: Optional[str] = typer.Option(None, help="auto, rich, plain or json."),
    log_level: str = typer.Option("warning", help="Log level for diagnostics on stderr."),
) -> None:
    """Print the Gherkin report of a scenario."""

    fmt = get_output_format(output_format)
    logger = configure_logging(log_level, get_log_format(fmt))
    parameters = _parse_parameters(param)

    try:
        report_settings = load_settings(settings)
        definition = load_definition(scenario)
        metadata = build_metadata(
            definition,
            settings=report_settings,
            current_test=fixed_test_name(current_test) if current_test else pytest_current_test,
            parameters=parameters,
        )
        context = metadata.build_report(kind)
    except (ValueError, FileNotFoundError, ScenarioMetadataError) as exc:
        logger.error("report_failed", scenario=str(scenario), error=str(exc))
        raise typer.BadParameter(str(exc)) from exc

    ConsoleReporter(output_format=fmt).print_report(context)


def run() -> None:
    """Console_scripts hook."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
