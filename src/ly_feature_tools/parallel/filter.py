from __future__ import annotations

import re
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Mapping

from .exceptions import NoMatchingScenarioError
from .gherkin import DataTable, Feature, GherkinDocument, Scenario, ScenarioOutline, Step
from .model import FilterSpec, SingleScenario

__all__ = ["ScenarioFilter", "substitute"]

_PLACEHOLDER = re.compile(r"<([^<>]+)>")


def substitute(text: str, values: Mapping[str, str]) -> str:
    """Replace every ``<name>`` with its example value. Unknown names are left alone."""
    return _PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), text)


def _substitute_step(step: Step, values: Mapping[str, str]) -> Step:
    table = step.table
    if table is not None:
        table = DataTable(
            headings=tuple(substitute(cell, values) for cell in table.headings),
            rows=tuple(tuple(substitute(cell, values) for cell in row) for row in table.rows),
        )
    return replace(
        step,
        text=substitute(step.text, values),
        doc_string=None if step.doc_string is None else substitute(step.doc_string, values),
        table=table,
    )


class ScenarioFilter:
    """Select the scenarios of a feature and expand scenario outlines."""

    def __init__(self, filter_spec: FilterSpec):
        self.filter_spec = filter_spec

    def filter(self, document: GherkinDocument, source_path: Path) -> list[SingleScenario]:
        """
        Return the matching scenarios of a document in source order.

        Raises NoMatchingScenarioError if line numbers were requested and nothing matched.
        """
        scenarios = list(self._iter_scenarios(document, source_path))
        if self.filter_spec.line_numbers and not scenarios:
            raise NoMatchingScenarioError(source_path, self.filter_spec.line_numbers)
        return scenarios

    def _iter_scenarios(
        self, document: GherkinDocument, source_path: Path
    ) -> Iterator[SingleScenario]:
        feature = document.feature
        if feature is None:
            return
        for child in feature.children:
            if not self.filter_spec.matches_tags(feature.tags + child.tags):
                continue
            if isinstance(child, ScenarioOutline):
                yield from self._expand_outline(feature, child, source_path)
            elif self.filter_spec.matches_line(child.line):
                yield self._single_scenario(feature, child, source_path)

    def _expand_outline(
        self, feature: Feature, outline: ScenarioOutline, source_path: Path
    ) -> Iterator[SingleScenario]:
        # Each example row is addressed by its own line number.
        for index, (examples, row) in enumerate(outline.iter_rows(), start=1):
            if not self.filter_spec.matches_line(row.line):
                continue
            values = examples.values(row)
            yield replace(
                self._single_scenario(feature, outline, source_path),
                scenario_keyword=outline.scenario_keyword,
                scenario_name=substitute(outline.name, values),
                scenario_tags=outline.tags + examples.tags,
                scenario_description=tuple(
                    substitute(line, values) for line in outline.description
                ),
                line=row.line,
                steps=tuple(_substitute_step(step, values) for step in outline.steps),
                example_row=values,
                example_index=index,
            )

    @staticmethod
    def _single_scenario(
        feature: Feature, scenario: Scenario, source_path: Path
    ) -> SingleScenario:
        return SingleScenario(
            feature_file_path=source_path,
            feature_keyword=feature.keyword,
            feature_name=feature.name,
            feature_language=feature.language,
            feature_tags=feature.tags,
            feature_description=feature.description,
            background=feature.background,
            scenario_keyword=scenario.keyword,
            scenario_name=scenario.name,
            scenario_tags=scenario.tags,
            scenario_description=scenario.description,
            line=scenario.line,
            steps=scenario.steps,
        )
