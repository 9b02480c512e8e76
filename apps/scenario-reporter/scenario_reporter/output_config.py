"""Console and log output format selection."""

import os
from enum import Enum
from typing import Literal


class OutputFormat(str, Enum):
    """How reports are written to the console."""
    AUTO = "auto"
    RICH = "rich"
    PLAIN = "plain"
    JSON = "json"


LogFormat = Literal["json", "console", "plain"]

ENV_VAR_NAME = "CONSOLE_OUTPUT_FORMAT"


def _parse(value: str | None) -> OutputFormat | None:
    if not value:
        return None
    try:
        return OutputFormat(value.lower())
    except ValueError:
        return None


def get_output_format(cli_override: str | None = None) -> OutputFormat:
    """
    Get the output format with priority: CLI parameter > Environment variable > Default (auto).

    Unknown values are ignored and the next source is consulted.
    """
    return _parse(cli_override) or _parse(os.environ.get(ENV_VAR_NAME)) or OutputFormat.AUTO


def get_log_format(output_format: OutputFormat) -> LogFormat:
    """Map a console output format onto the matching log renderer."""
    if output_format is OutputFormat.JSON:
        return "json"
    if output_format is OutputFormat.PLAIN:
        return "plain"
    return "console"
