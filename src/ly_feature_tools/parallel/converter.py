"""Convert source features into parallelizable features and runners."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .config import ParallelConfiguration
from .exceptions import DuplicateFeatureNameError
from .fileio import FileIO
from .filter import ScenarioFilter
from .gherkin import BehaveDocumentParser, DocumentParser
from .model import FeatureRunner, ParallelizationMode, SingleScenario
from .render import FEATURE_FILE_EXTENSION, FeatureFileContentRenderer, RunnerFileContentRenderer
from .runners import INTEGRATION_TEST_POSTFIX, RunnerDistributor

logger = logging.getLogger(__name__)

__all__ = ["ConversionResult", "FeatureFileConverter", "feature_file_name"]

TEST_RUNS_COUNTER_FORMAT = "_run{:03d}"
SCENARIO_COUNTER_FORMAT = "_scenario{:03d}"
FEATURE_FORMAT = "_feature"
DEFAULT_RUNNER_EXTENSION = ".py"


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def feature_file_name(path: Path) -> str:
    """The file name without extension, with every non-word character replaced."""
    return re.sub(r"\W", "_", path.stem)


@dataclass(frozen=True)
class ConversionResult:
    """The generated features and runners of one invocation."""

    feature_names: Sequence[str]
    runners: Sequence[FeatureRunner]

    def summary(self) -> str:
        features = len(self.feature_names)
        runners = len(self.runners)
        return (
            f"Created {features} separate {_plural(features, 'feature file', 'feature files')} "
            f"and {runners} {_plural(runners, 'runner', 'runners')}."
        )


class FeatureFileConverter:
    """
    Split source features into generated features and create runners for them.

    A converter holds the per-feature scenario counters and is meant to be used for a single
    invocation. Source files are converted one after the other so generated names are stable.
    """

    def __init__(
        self,
        config: ParallelConfiguration,
        parser: DocumentParser | None = None,
        file_io: FileIO | None = None,
        feature_renderer: FeatureFileContentRenderer | None = None,
        runner_renderer: RunnerFileContentRenderer | None = None,
    ):
        self.config = config
        self.parser = parser or BehaveDocumentParser()
        self.file_io = file_io or FileIO()
        self.feature_renderer = feature_renderer or FeatureFileContentRenderer()
        self.runner_renderer = runner_renderer or RunnerFileContentRenderer(
            self.file_io,
            generated_feature_directory=config.generated_feature_directory,
            custom_placeholders=config.custom_placeholders,
        )
        self.scenario_filter = ScenarioFilter(config.filter_spec)
        self.counters: dict[str, int] = {}
        self.generated_sources: dict[str, Path] = {}

    def generate_parallelizable_features(self, source_paths: Sequence[Path]) -> ConversionResult:
        """Convert all source features, then create the runners for the generated features."""
        feature_names: list[str] = []
        for source_path in source_paths:
            feature_names += self.convert_feature(source_path)
        runners = self.generate_runners(feature_names)
        return ConversionResult(feature_names=feature_names, runners=runners)

    def convert_feature(self, source_path: Path) -> list[str]:
        """
        Convert one source feature and return the names of the generated features.

        Raises MissingFileError, FeatureFileParseError, NoMatchingScenarioError or
        DuplicateFeatureNameError.
        """
        content = self.file_io.read_text(source_path)
        document = self.parser.parse(content, source_path.as_posix())
        scenarios = self.scenario_filter.filter(document, source_path)

        if self.config.parallelization_mode == ParallelizationMode.SCENARIOS:
            generated = self._generate_scenario_features(source_path, scenarios)
        else:
            generated = self._generate_whole_features(source_path, scenarios)

        self._log_conversion(source_path, len(scenarios))
        return generated

    def generate_runners(self, feature_names: Sequence[str]) -> list[FeatureRunner]:
        """Distribute the generated features over runners and write them."""
        template = self.config.source_runner_template_file
        distributor = RunnerDistributor(template)
        runners = distributor.distribute(feature_names, self.config.desired_number_of_runners)
        extension = template.suffix or DEFAULT_RUNNER_EXTENSION
        for runner in runners:
            self.file_io.write_text(
                self.config.generated_runner_directory / f"{runner.name}{extension}",
                self.runner_renderer.render(runner),
            )
        return runners

    def _generate_scenario_features(
        self, source_path: Path, scenarios: Sequence[SingleScenario]
    ) -> list[str]:
        feature_name = feature_file_name(source_path)
        generated: list[str] = []
        for scenario in scenarios:
            counter = self.counters.get(feature_name, 0) + 1
            self.counters[feature_name] = counter
            content = self.feature_renderer.render(scenario)
            for test_run in range(1, self.config.number_of_test_runs + 1):
                name = (
                    feature_name
                    + SCENARIO_COUNTER_FORMAT.format(counter)
                    + TEST_RUNS_COUNTER_FORMAT.format(test_run)
                    + INTEGRATION_TEST_POSTFIX
                )
                self._save_feature(name, content, source_path)
                generated.append(name)
        return generated

    def _generate_whole_features(
        self, source_path: Path, scenarios: Sequence[SingleScenario]
    ) -> list[str]:
        if not scenarios:
            return []
        feature_name = feature_file_name(source_path)
        content = self.feature_renderer.render_feature(scenarios)
        generated: list[str] = []
        for test_run in range(1, self.config.number_of_test_runs + 1):
            name = (
                feature_name
                + FEATURE_FORMAT
                + TEST_RUNS_COUNTER_FORMAT.format(test_run)
                + INTEGRATION_TEST_POSTFIX
            )
            self._save_feature(name, content, source_path)
            generated.append(name)
        return generated

    def _save_feature(self, name: str, content: str, source_path: Path):
        # Generated names must be unique within one invocation.
        if name in self.generated_sources:
            raise DuplicateFeatureNameError(name, self.generated_sources[name], source_path)
        self.generated_sources[name] = source_path
        path = self.config.generated_feature_directory / f"{name}{FEATURE_FILE_EXTENSION}"
        self.file_io.write_text(path, content)

    def _log_conversion(self, source_path: Path, created: int):
        postfix = "."
        if self.config.scenario_line_numbers:
            postfix = f" with line number(s) {list(self.config.scenario_line_numbers)}."
        scenarios = _plural(created, "scenario", "scenarios")
        logger.info("- %3d %s from %s%s", created, scenarios, source_path.as_posix(), postfix)
