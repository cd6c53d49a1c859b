"""Render generated feature files and runners."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from .fileio import FileIO
from .gherkin import Background, DataTable, Step
from .model import FeatureRunner, SingleScenario

__all__ = [
    "FEATURE_FILE_EXTENSION",
    "FeatureFileContentRenderer",
    "RunnerFileContentRenderer",
]

FEATURE_FILE_EXTENSION = ".feature"
_INDENT = "  "


def _escape_cell(cell: str) -> str:
    # behave only unescapes "\|" inside table cells.
    return cell.replace("|", "\\|")


def _doc_string_fence(doc_string: str) -> str:
    # A line starting with the fence would end the doc string early.
    lines = [line.strip() for line in doc_string.splitlines()]
    return "'''" if any(line.startswith('"""') for line in lines) else '"""'


def _table_lines(table: DataTable, depth: int) -> list[str]:
    rows = [
        tuple(_escape_cell(cell) for cell in row) for row in [table.headings] + list(table.rows)
    ]
    widths = [
        max(len(row[col]) for row in rows if col < len(row)) for col in range(len(table.headings))
    ]
    return [
        f"{_INDENT * depth}| "
        + " | ".join(cell.ljust(width) for cell, width in zip(row, widths))
        + " |"
        for row in rows
    ]


def _step_lines(steps: Iterable[Step], depth: int) -> list[str]:
    lines: list[str] = []
    for step in steps:
        lines.append(f"{_INDENT * depth}{step.keyword} {step.text}")
        if step.table is not None:
            lines += _table_lines(step.table, depth + 1)
        if step.doc_string is not None:
            fence = _doc_string_fence(step.doc_string)
            lines.append(f"{_INDENT * (depth + 1)}{fence}")
            lines += [
                f"{_INDENT * (depth + 1)}{line}" if line else ""
                for line in step.doc_string.splitlines()
            ]
            lines.append(f"{_INDENT * (depth + 1)}{fence}")
    return lines


def _background_lines(background: Background) -> list[str]:
    header = f"{_INDENT}{background.keyword}:"
    if background.name:
        header += f" {background.name}"
    return [header] + _step_lines(background.steps, 2)


def _scenario_lines(scenario: SingleScenario) -> list[str]:
    lines: list[str] = []
    if scenario.scenario_tags:
        lines.append(_INDENT + " ".join(scenario.scenario_tags))
    lines.append(f"{_INDENT}{scenario.scenario_keyword}: {scenario.scenario_name}".rstrip())
    lines += [f"{_INDENT * 2}{line}" for line in scenario.scenario_description]
    return lines + _step_lines(scenario.steps, 2)


class FeatureFileContentRenderer:
    """Render single scenarios back to Gherkin."""

    def render(self, scenario: SingleScenario) -> str:
        """Render a feature file that holds exactly one scenario."""
        return self.render_feature([scenario])

    def render_feature(self, scenarios: Sequence[SingleScenario]) -> str:
        """
        Render a feature file with all of the given scenarios in order.

        The feature header and background are taken from the first scenario.
        """
        if not scenarios:
            raise ValueError("Cannot render a feature without scenarios.")
        first = scenarios[0]
        lines: list[str] = []
        if first.feature_language and first.feature_language != "en":
            lines.append(f"# language: {first.feature_language}")
        if first.feature_tags:
            lines.append(" ".join(first.feature_tags))
        lines.append(f"{first.feature_keyword}: {first.feature_name}".rstrip())
        lines += [f"{_INDENT}{line}" for line in first.feature_description]
        if first.background is not None:
            lines += [""] + _background_lines(first.background)
        for scenario in scenarios:
            lines += [""] + _scenario_lines(scenario)
        lines += ["", f"# Generated by ly-feature-tools from {first.feature_file_path.as_posix()}"]
        return "\n".join(lines) + "\n"


class RunnerFileContentRenderer:
    """
    Render runners from a template.

    Supported placeholders:

    * ``[PARALLEL:RUNNER]`` the runner name
    * ``[PARALLEL:FEATURE]`` the quoted paths of the generated features, comma-separated
    * ``[PARALLEL:CUSTOM:<key>]`` a custom placeholder value
    """

    runner_placeholder = "[PARALLEL:RUNNER]"
    feature_placeholder = "[PARALLEL:FEATURE]"
    _custom_placeholder = re.compile(r"\[PARALLEL:CUSTOM:([^\]]+)\]")

    def __init__(
        self,
        file_io: FileIO,
        generated_feature_directory: Path,
        custom_placeholders: Mapping[str, str] | None = None,
    ):
        self.file_io = file_io
        self.generated_feature_directory = generated_feature_directory
        self.custom_placeholders = dict(custom_placeholders or {})

    def feature_paths(self, runner: FeatureRunner) -> list[str]:
        return [
            (self.generated_feature_directory / f"{name}{FEATURE_FILE_EXTENSION}").as_posix()
            for name in runner.feature_names
        ]

    def render(self, runner: FeatureRunner) -> str:
        template = self.file_io.read_text(runner.template_path)
        features = ", ".join(f'"{path}"' for path in self.feature_paths(runner))
        content = template.replace(self.runner_placeholder, runner.name)
        content = content.replace(self.feature_placeholder, features)
        return self._custom_placeholder.sub(
            lambda match: self.custom_placeholders.get(match.group(1), match.group(0)), content
        )
