from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping

from .gherkin import Background, Step

__all__ = ["FeatureRunner", "FilterSpec", "ParallelizationMode", "SingleScenario"]


class ParallelizationMode(str, Enum):
    """How source features are split up."""

    SCENARIOS = "scenarios"
    FEATURES = "features"


def normalize_tag(tag: str) -> str:
    tag = tag.strip()
    return tag if tag.startswith("@") else f"@{tag}"


@dataclass(frozen=True)
class FilterSpec:
    """Which scenarios of a feature are selected."""

    include_tags: frozenset[str] = frozenset()
    exclude_tags: frozenset[str] = frozenset()
    line_numbers: frozenset[int] = frozenset()

    @classmethod
    def create(
        cls,
        include_tags: Iterable[str] = (),
        exclude_tags: Iterable[str] = (),
        line_numbers: Iterable[int] = (),
    ) -> FilterSpec:
        return cls(
            include_tags=frozenset(normalize_tag(tag) for tag in include_tags),
            exclude_tags=frozenset(normalize_tag(tag) for tag in exclude_tags),
            line_numbers=frozenset(line_numbers),
        )

    def matches_tags(self, tags: Iterable[str]) -> bool:
        """Excluded tags always win over included tags."""
        effective = frozenset(tags)
        if self.exclude_tags & effective:
            return False
        return not self.include_tags or bool(self.include_tags & effective)

    def matches_line(self, line: int) -> bool:
        return not self.line_numbers or line in self.line_numbers


@dataclass(frozen=True)
class SingleScenario:
    """
    One concrete scenario together with everything needed to render it on its own.

    Scenarios built from an outline carry the example row they were built from and the 1-based
    index of that row within the outline.
    """

    feature_file_path: Path
    feature_keyword: str
    feature_name: str
    scenario_keyword: str
    scenario_name: str
    line: int
    feature_language: str | None = None
    feature_tags: tuple[str, ...] = ()
    feature_description: tuple[str, ...] = ()
    background: Background | None = None
    scenario_tags: tuple[str, ...] = ()
    scenario_description: tuple[str, ...] = ()
    steps: tuple[Step, ...] = ()
    example_row: Mapping[str, str] | None = field(default=None, hash=False)
    example_index: int | None = None

    @property
    def background_steps(self) -> tuple[Step, ...]:
        return self.background.steps if self.background else ()


@dataclass(frozen=True)
class FeatureRunner:
    """A generated runner and the generated features it runs, in order."""

    template_path: Path
    name: str
    feature_names: tuple[str, ...]

    def __post_init__(self):
        assert self.feature_names, f"runner {self.name} has no features"
