#!/usr/bin/env python
"""
Split Gherkin features into parallelizable features and runners.

Every scenario (or every example of a scenario outline) of the source features is written to its
own feature file. The generated features are then distributed over runner files that are
rendered from a template.

Settings are read from the ``[tool.parallel]`` section of pyproject.toml and can be overridden on
the command line.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

import click

from .config import ParallelConfiguration
from .converter import ConversionResult, FeatureFileConverter
from .exceptions import ParallelError, WrongPropertyError
from .fileio import FileIO, find_feature_files
from .model import ParallelizationMode

logger = logging.getLogger(__name__)

__all__ = ["main"]


def _placeholders(values: Sequence[str]) -> dict[str, str]:
    placeholders: dict[str, str] = {}
    for value in values:
        key, sep, replacement = value.partition("=")
        if not sep or not key:
            raise WrongPropertyError("custom_placeholders", value, "expected KEY=VALUE")
        placeholders[key] = replacement
    return placeholders


@click.command()
@click.option(
    "--config",
    "config_file",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Read settings from this file instead of the nearest pyproject.toml",
)
@click.option("--feature-dir", type=click.Path(path_type=Path), help="Generated feature directory")
@click.option("--runner-dir", type=click.Path(path_type=Path), help="Generated runner directory")
@click.option("--runner-template", type=click.Path(path_type=Path), help="Runner template file")
@click.option("--runs", type=int, help="Number of test runs for each generated feature")
@click.option("--include-tag", multiple=True, help="Only generate scenarios with this tag")
@click.option("--exclude-tag", multiple=True, help="Never generate scenarios with this tag")
@click.option("--line", "lines", type=int, multiple=True, help="Only the scenario at this line")
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in ParallelizationMode]),
    help="Split features into single scenarios or keep them whole",
)
@click.option("--runners", type=int, help="Desired number of runners, 0 for one per feature")
@click.option("--placeholder", multiple=True, help="Custom runner placeholder as KEY=VALUE")
@click.option("--verbose", is_flag=True, default=False)
@click.argument("source_features", nargs=-1)
@click.version_option()
def main(
    config_file: Path | None,
    feature_dir: Path | None,
    runner_dir: Path | None,
    runner_template: Path | None,
    runs: int | None,
    include_tag: Sequence[str],
    exclude_tag: Sequence[str],
    lines: Sequence[int],
    mode: str | None,
    runners: int | None,
    placeholder: Sequence[str],
    verbose: bool,
    source_features: Sequence[str],
):
    logging.basicConfig(format="%(message)s")
    logging.getLogger("ly_feature_tools").setLevel(logging.DEBUG if verbose else logging.INFO)

    try:
        config = ParallelConfiguration.get_config(
            config_file,
            source_features=source_features,
            generated_feature_directory=feature_dir,
            generated_runner_directory=runner_dir,
            source_runner_template_file=runner_template,
            number_of_test_runs=runs,
            include_scenario_tags=include_tag,
            exclude_scenario_tags=exclude_tag,
            scenario_line_numbers=lines,
            parallelization_mode=mode,
            desired_number_of_runners=runners,
            custom_placeholders=_placeholders(placeholder),
        )
        result = _generate(config)
    except ParallelError as e:
        click.echo(str(e))
        sys.exit(1)

    click.echo(result.summary())


def _generate(config: ParallelConfiguration) -> ConversionResult:
    config.log_properties()
    file_io = FileIO()
    file_io.prepare_directories(
        config.generated_feature_directory, config.generated_runner_directory
    )
    source_paths = [
        feature_file
        for source in config.source_features
        for feature_file in find_feature_files(source)
    ]
    logger.debug("Converting %d feature files", len(source_paths))
    converter = FeatureFileConverter(config, file_io=file_io)
    return converter.generate_parallelizable_features(source_paths)
