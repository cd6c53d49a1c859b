from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar, Mapping, Sequence

import toml

from .exceptions import MissingFileError, MissingPropertyError, WrongPropertyError
from .model import FilterSpec, ParallelizationMode

logger = logging.getLogger(__name__)

__all__ = ["ParallelConfiguration", "split_line_numbers"]

_FEATURE_WITH_LINES = re.compile(r"^(?P<path>.+\.feature)(?P<lines>(?::\d+)+)$")


def split_line_numbers(source: str) -> tuple[Path, list[int]]:
    """Split ``path/to/file.feature:12:20`` into the path and its line numbers."""
    match = _FEATURE_WITH_LINES.match(source)
    if not match:
        return Path(source), []
    return Path(match["path"]), [int(line) for line in match["lines"].split(":") if line]


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, int)):
        return [value]
    return list(value)


def _tags(value: Any) -> list[str]:
    return [str(tag) for tag in _as_list(value)]


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise WrongPropertyError(name, value, "not an integer") from e


@dataclass
class ParallelConfiguration:
    """Configuration for generating parallel features and runners."""

    source_features: Sequence[Path]
    generated_feature_directory: Path
    generated_runner_directory: Path
    source_runner_template_file: Path
    number_of_test_runs: int = 1
    include_scenario_tags: Sequence[str] = field(default_factory=list)
    exclude_scenario_tags: Sequence[str] = field(default_factory=list)
    scenario_line_numbers: Sequence[int] = field(default_factory=list)
    parallelization_mode: ParallelizationMode = ParallelizationMode.SCENARIOS
    desired_number_of_runners: int = 0
    custom_placeholders: Mapping[str, str] = field(default_factory=dict)
    _config_file: ClassVar[Path] = Path("pyproject.toml")
    _required: ClassVar[Sequence[str]] = (
        "source_features",
        "generated_feature_directory",
        "generated_runner_directory",
        "source_runner_template_file",
    )

    @property
    def filter_spec(self) -> FilterSpec:
        return FilterSpec.create(
            include_tags=self.include_scenario_tags,
            exclude_tags=self.exclude_scenario_tags,
            line_numbers=self.scenario_line_numbers,
        )

    @classmethod
    def get_config(
        cls, config_file: Path | None = None, **overrides: Any
    ) -> ParallelConfiguration:
        """
        Load ``[tool.parallel]`` from pyproject.toml and apply overrides.

        Overrides that are None or empty are ignored.
        """
        if config_file is not None and not config_file.is_file():
            raise MissingFileError(config_file)
        pyproject = config_file or cls.get_configfile()
        settings: dict[str, Any] = {}
        if pyproject is not None:
            logger.debug("Reading configuration from %s", pyproject)
            settings.update(toml.load(pyproject).get("tool", {}).get("parallel", {}))
        settings.update(
            {key: value for key, value in overrides.items() if value not in (None, (), [], {})}
        )
        return cls.from_mapping(settings)

    @classmethod
    def get_configfile(cls) -> Path | None:
        cwd = Path.cwd().absolute()
        for path in [cwd] + list(cwd.parents):
            pyproject = path / cls._config_file
            if pyproject.exists() and pyproject.is_file():
                return pyproject
        return None

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> ParallelConfiguration:
        """Validate raw settings."""
        known = {f.name for f in fields(cls)}
        for key, value in settings.items():
            if key not in known:
                raise WrongPropertyError(key, value, "unknown setting")

        missing = [name for name in cls._required if not settings.get(name)]
        if missing:
            raise MissingPropertyError(missing)

        line_numbers = [
            _as_int("scenario_line_numbers", line)
            for line in _as_list(settings.get("scenario_line_numbers"))
        ]
        source_features: list[Path] = []
        for source in _as_list(settings["source_features"]):
            path, lines = split_line_numbers(str(source))
            source_features.append(path)
            line_numbers += lines
        if line_numbers and (len(source_features) != 1 or source_features[0].suffix != ".feature"):
            raise WrongPropertyError(
                "scenario_line_numbers",
                line_numbers,
                "line numbers can only be used with a single feature file",
            )

        number_of_test_runs = _as_int(
            "number_of_test_runs", settings.get("number_of_test_runs", 1)
        )
        if number_of_test_runs < 1:
            raise WrongPropertyError(
                "number_of_test_runs", number_of_test_runs, "must be at least 1"
            )
        desired_number_of_runners = _as_int(
            "desired_number_of_runners", settings.get("desired_number_of_runners", 0)
        )
        if desired_number_of_runners < 0:
            raise WrongPropertyError(
                "desired_number_of_runners", desired_number_of_runners, "must not be negative"
            )
        mode = settings.get("parallelization_mode", ParallelizationMode.SCENARIOS)
        try:
            parallelization_mode = ParallelizationMode(mode)
        except ValueError as e:
            allowed = ", ".join(m.value for m in ParallelizationMode)
            raise WrongPropertyError(
                "parallelization_mode", mode, f"must be one of {allowed}"
            ) from e

        custom_placeholders = settings.get("custom_placeholders") or {}
        if not isinstance(custom_placeholders, Mapping):
            raise WrongPropertyError(
                "custom_placeholders", custom_placeholders, "must be a table of KEY = VALUE"
            )

        return cls(
            source_features=source_features,
            generated_feature_directory=Path(settings["generated_feature_directory"]),
            generated_runner_directory=Path(settings["generated_runner_directory"]),
            source_runner_template_file=Path(settings["source_runner_template_file"]),
            number_of_test_runs=number_of_test_runs,
            include_scenario_tags=_tags(settings.get("include_scenario_tags")),
            exclude_scenario_tags=_tags(settings.get("exclude_scenario_tags")),
            scenario_line_numbers=sorted(set(line_numbers)),
            parallelization_mode=parallelization_mode,
            desired_number_of_runners=desired_number_of_runners,
            custom_placeholders={
                str(key): str(value) for key, value in custom_placeholders.items()
            },
        )

    def log_properties(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ParallelizationMode):
                value = value.value
            logger.debug("- %s: %s", f.name, value)
