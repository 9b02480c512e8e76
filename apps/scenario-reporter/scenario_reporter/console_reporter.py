"""Console reporter with environment detection for scenario reports."""

import json
import os
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text

from .models import ReportingContext
from .output_config import OutputFormat


class ConsoleReporter:
    """
    Writes scenario reports in the format that suits the environment.

    Automatically detects:
    - Interactive terminals (use rich styling)
    - CI/CD environments (use plain text)
    - Pipe/redirect scenarios (use plain text)
    """

    def __init__(self, output_format: OutputFormat = OutputFormat.AUTO, stream: Optional[TextIO] = None):
        self.output_format = output_format
        self.stream = stream
        self._detect_environment()
        self.console = Console(file=stream) if self.use_rich else None

    def _detect_environment(self) -> None:
        """Detect if we should use rich output or plain text."""
        if self.output_format == OutputFormat.RICH:
            self.use_rich = True
        elif self.output_format in (OutputFormat.PLAIN, OutputFormat.JSON):
            self.use_rich = False
        else:  # AUTO
            stream = self.stream or sys.stdout
            is_terminal = stream.isatty()
            is_ci = any([
                'CI' in os.environ,
                'JENKINS_HOME' in os.environ,
                'GITLAB_CI' in os.environ,
                'TRAVIS' in os.environ,
            ])
            self.use_rich = is_terminal and not is_ci

    def print_report(self, report: ReportingContext) -> None:
        """Write a full report to the console."""
        if self.output_format == OutputFormat.JSON:
            self._write(json.dumps(report.as_serializable(), indent=2, ensure_ascii=False))
        elif self.use_rich:
            self._print_rich(report)
        else:
            self._write(report.render())

    def _print_rich(self, report: ReportingContext) -> None:
        styles = ["bold cyan", None, None]
        printed_block = False
        for block, style in zip(report.blocks(), styles):
            if not block:
                continue
            if printed_block:
                self.console.print()
            for line in block:
                self.console.print(self._styled_line(line, style), highlight=False)
            printed_block = True

    @staticmethod
    def _styled_line(line: str, block_style: Optional[str]) -> Text:
        if block_style:
            return Text(line, style=block_style)
        if line.startswith("@"):
            return Text(line, style="yellow")
        if line.startswith("!!!"):
            return Text(line, style="bold red")

        # Bold the leading keyword of scenario and step lines.
        text = Text()
        stripped = line.lstrip()
        indent = line[: len(line) - len(stripped)]
        keyword, _, rest = stripped.partition(" ")
        text.append(indent)
        text.append(keyword, style="bold green")
        if rest:
            text.append(f" {rest}")
        return text

    def _write(self, text: str) -> None:
        print(text, file=self.stream or sys.stdout)
