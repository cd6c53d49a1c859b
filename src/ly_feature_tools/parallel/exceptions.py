from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

__all__ = [
    "DuplicateFeatureNameError",
    "FeatureFileParseError",
    "FileCreationError",
    "MissingFileError",
    "MissingPropertyError",
    "NoMatchingScenarioError",
    "ParallelError",
    "WrongPropertyError",
]


class ParallelError(Exception):
    """Base class for errors that abort feature generation."""


class MissingFileError(ParallelError):
    """A file could not be found or read."""

    def __init__(self, path: Path | str | None):
        self.path = Path(path).as_posix() if path else ""
        super().__init__(f'The file "{self.path}" does not exist or cannot be read.')


class FeatureFileParseError(ParallelError):
    """The Gherkin parser rejected a feature file."""

    def __init__(self, path: Path | str):
        self.path = Path(path).as_posix()
        super().__init__(f'Could not parse feature file "{self.path}".')


class NoMatchingScenarioError(ParallelError):
    """Line numbers were requested but they do not address any scenario."""

    def __init__(self, path: Path | str, line_numbers: Sequence[int]):
        self.path = Path(path).as_posix()
        self.line_numbers = sorted(line_numbers)
        super().__init__(
            f'There is no parsable scenario or scenario outline at line {self.line_numbers} '
            f'in "{self.path}".'
        )


class FileCreationError(ParallelError):
    """A generated file or directory could not be written."""

    def __init__(self, path: Path | str):
        self.path = Path(path).as_posix()
        super().__init__(f'The file "{self.path}" could not be created.')


class MissingPropertyError(ParallelError):
    """Mandatory configuration values were not set."""

    def __init__(self, names: Sequence[str]):
        self.names = list(names)
        super().__init__(f"Missing configuration: {', '.join(self.names)}")


class WrongPropertyError(ParallelError):
    """A configuration value is not valid."""

    def __init__(self, name: str, value: Any, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f'Invalid value "{value}" for {name}: {reason}')


class DuplicateFeatureNameError(ParallelError):
    """Two source features would be written to the same generated feature."""

    def __init__(self, name: str, first_path: Path | str, second_path: Path | str):
        self.name = name
        self.first_path = Path(first_path).as_posix()
        self.second_path = Path(second_path).as_posix()
        super().__init__(
            f'The generated feature "{name}" of "{self.second_path}" was already generated '
            f'from "{self.first_path}".'
        )
