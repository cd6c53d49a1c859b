"""
A plain, immutable Gherkin document tree and the parser that builds it.

``BehaveDocumentParser`` uses behave's Gherkin parser and converts its mutable model into the
frozen dataclasses below. Nothing outside this module touches behave objects.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterator, Mapping, Protocol, Sequence, Union

from behave import i18n, model
from behave.parser import ParserError, parse_feature

from .exceptions import FeatureFileParseError

__all__ = [
    "Background",
    "BehaveDocumentParser",
    "DataTable",
    "DocumentParser",
    "ExampleRow",
    "Examples",
    "Feature",
    "GherkinDocument",
    "Scenario",
    "ScenarioOutline",
    "Step",
]


@dataclass(frozen=True)
class DataTable:
    """A data table attached to a step."""

    headings: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class Step:
    keyword: str
    text: str
    line: int
    doc_string: str | None = None
    table: DataTable | None = None


@dataclass(frozen=True)
class Background:
    keyword: str
    name: str
    line: int
    steps: tuple[Step, ...] = ()


@dataclass(frozen=True)
class Scenario:
    keyword: str
    name: str
    line: int
    tags: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    steps: tuple[Step, ...] = ()


@dataclass(frozen=True)
class ExampleRow:
    line: int
    cells: tuple[str, ...]


@dataclass(frozen=True)
class Examples:
    """One example table of a scenario outline."""

    keyword: str
    name: str
    line: int
    headings: tuple[str, ...]
    rows: tuple[ExampleRow, ...] = ()
    tags: tuple[str, ...] = ()

    def values(self, row: ExampleRow) -> Mapping[str, str]:
        """Map the table headings to the cells of a row."""
        return dict(zip(self.headings, row.cells))


@dataclass(frozen=True)
class ScenarioOutline(Scenario):
    """
    A parametrized scenario.

    ``scenario_keyword`` is the keyword that concrete scenarios built from this outline use, in the
    language of the feature.
    """

    examples: tuple[Examples, ...] = ()
    scenario_keyword: str = "Scenario"

    def iter_rows(self) -> Iterator[tuple[Examples, ExampleRow]]:
        """Yield every example row in table order, then row order."""
        for examples in self.examples:
            for row in examples.rows:
                yield examples, row


ScenarioDefinition = Union[Scenario, ScenarioOutline]


@dataclass(frozen=True)
class Feature:
    keyword: str
    name: str
    line: int
    language: str | None = None
    tags: tuple[str, ...] = ()
    description: tuple[str, ...] = ()
    background: Background | None = None
    children: tuple[ScenarioDefinition, ...] = ()


@dataclass(frozen=True)
class GherkinDocument:
    source_label: str
    feature: Feature | None = None


class DocumentParser(Protocol):
    """Anything that turns Gherkin text into a ``GherkinDocument``."""

    def parse(self, text: str, source_label: str) -> GherkinDocument:
        ...


class BehaveDocumentParser:
    """Parse Gherkin with behave."""

    def parse(self, text: str, source_label: str) -> GherkinDocument:
        """
        Parse a feature file.

        Raises FeatureFileParseError if behave rejects the text.
        """
        try:
            feature = parse_feature(text, filename=source_label)
        except ParserError as e:
            raise FeatureFileParseError(Path(source_label)) from e
        if feature is None:
            return GherkinDocument(source_label=source_label)
        return GherkinDocument(source_label=source_label, feature=_feature(feature))


def _tags(tags: Sequence[model.Tag] | None) -> tuple[str, ...]:
    # behave strips the "@" from tags.
    return tuple(f"@{tag}" for tag in tags or [])


def _step(step: model.Step) -> Step:
    table = None
    if step.table is not None:
        table = DataTable(
            headings=tuple(step.table.headings),
            rows=tuple(tuple(row.cells) for row in step.table.rows),
        )
    return Step(
        keyword=step.keyword.strip(),
        text=step.name,
        line=step.line,
        doc_string=None if step.text is None else str(step.text),
        table=table,
    )


def _examples(examples: model.Examples) -> Examples:
    table = examples.table
    return Examples(
        keyword=(examples.keyword or "Examples").strip(),
        name=examples.name or "",
        line=examples.line,
        headings=tuple(table.headings) if table else (),
        rows=tuple(
            ExampleRow(line=row.line or examples.line, cells=tuple(row.cells))
            for row in (table.rows if table else [])
        ),
        tags=_tags(examples.tags),
    )


def _scenario_keyword(language: str | None) -> str:
    keywords = i18n.languages.get(language or "en", {}).get("scenario") or ["Scenario"]
    return "Scenario" if "Scenario" in keywords else keywords[0]


def _scenario(scenario: model.Scenario, language: str | None) -> ScenarioDefinition:
    kwargs = dict(
        keyword=(scenario.keyword or "Scenario").strip(),
        name=scenario.name or "",
        line=scenario.line,
        tags=_tags(scenario.tags),
        description=tuple(scenario.description or []),
        steps=tuple(_step(step) for step in scenario.steps),
    )
    if isinstance(scenario, model.ScenarioOutline):
        return ScenarioOutline(
            examples=tuple(_examples(examples) for examples in scenario.examples or []),
            scenario_keyword=_scenario_keyword(language),
            **kwargs,
        )
    return Scenario(**kwargs)


def _rule_scenarios(rule: model.Rule, language: str | None) -> Iterator[ScenarioDefinition]:
    # Rule tags and rule background steps become part of every scenario of the rule.
    tags = _tags(rule.tags)
    steps: tuple[Step, ...] = ()
    if rule.background is not None:
        steps = tuple(_step(step) for step in rule.background.steps)
    for scenario in rule.scenarios or []:
        child = _scenario(scenario, language)
        yield replace(child, tags=tags + child.tags, steps=steps + child.steps)


def _children(feature: model.Feature) -> Iterator[ScenarioDefinition]:
    for scenario in feature.scenarios or []:
        yield _scenario(scenario, feature.language)
    # behave before 1.2.7 has no rules.
    for rule in getattr(feature, "rules", None) or []:
        yield from _rule_scenarios(rule, feature.language)


def _feature(feature: model.Feature) -> Feature:
    background = None
    if feature.background is not None:
        background = Background(
            keyword=(feature.background.keyword or "Background").strip(),
            name=feature.background.name or "",
            line=feature.background.line,
            steps=tuple(_step(step) for step in feature.background.steps),
        )
    return Feature(
        keyword=(feature.keyword or "Feature").strip(),
        name=feature.name,
        line=feature.line,
        language=feature.language,
        tags=_tags(feature.tags),
        description=tuple(feature.description or []),
        background=background,
        children=tuple(_children(feature)),
    )
