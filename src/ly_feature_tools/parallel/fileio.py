from __future__ import annotations

import logging
from pathlib import Path

from .exceptions import FileCreationError, MissingFileError

logger = logging.getLogger(__name__)

__all__ = ["FileIO", "find_feature_files"]


class FileIO:
    """Read and write text files."""

    encoding = "utf8"

    def read_text(self, path: Path | None) -> str:
        if path is None or path == Path():
            raise MissingFileError(path)
        try:
            return path.read_text(encoding=self.encoding)
        except OSError as e:
            raise MissingFileError(path) from e

    def write_text(self, path: Path, content: str):
        logger.debug("Writing %s", path)
        try:
            path.write_text(content, encoding=self.encoding)
        except OSError as e:
            raise FileCreationError(path) from e

    def prepare_directories(self, *directories: Path):
        """Create any missing directories."""
        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileCreationError(directory) from e


def find_feature_files(path: Path) -> list[Path]:
    """Recursively search a directory for feature files."""
    if path.is_dir():
        return sorted(file_ for file_ in path.rglob("*.feature") if file_.is_file())
    if not path.is_file():
        raise MissingFileError(path)
    return [path]
