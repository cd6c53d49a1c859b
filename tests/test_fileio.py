import pytest

from ly_feature_tools.parallel.exceptions import FileCreationError, MissingFileError
from ly_feature_tools.parallel.fileio import FileIO, find_feature_files


def test_read_missing_file(tmp_path):
    with pytest.raises(MissingFileError) as exc_info:
        FileIO().read_text(tmp_path / "missing.feature")
    assert exc_info.value.path.endswith("missing.feature")


def test_read_empty_path():
    with pytest.raises(MissingFileError):
        FileIO().read_text(None)


def test_write_into_missing_directory(tmp_path):
    with pytest.raises(FileCreationError):
        FileIO().write_text(tmp_path / "missing" / "out.feature", "Feature: x\n")


def test_prepare_directories(tmp_path):
    file_io = FileIO()
    features = tmp_path / "generated" / "features"
    runners = tmp_path / "generated" / "runners"
    file_io.prepare_directories(features, runners)
    file_io.prepare_directories(features, runners)
    file_io.write_text(features / "a.feature", "content")
    assert file_io.read_text(features / "a.feature") == "content"
    assert runners.is_dir()


def test_prepare_directories_over_a_file(tmp_path):
    (tmp_path / "taken").write_text("")
    with pytest.raises(FileCreationError):
        FileIO().prepare_directories(tmp_path / "taken")


def test_find_feature_files(tmp_path):
    for rel_path in ["b.feature", "a/z.feature", "a/y.feature", "a/notes.txt"]:
        (tmp_path / rel_path).parent.mkdir(parents=True, exist_ok=True)
        (tmp_path / rel_path).write_text("")
    assert find_feature_files(tmp_path) == [
        tmp_path / "a" / "y.feature",
        tmp_path / "a" / "z.feature",
        tmp_path / "b.feature",
    ]
    assert find_feature_files(tmp_path / "b.feature") == [tmp_path / "b.feature"]
    with pytest.raises(MissingFileError):
        find_feature_files(tmp_path / "missing.feature")
