from pathlib import Path

import pytest

from buildmeta import PathMapper, PathMapperError


def test_noop_mapper_does_not_override() -> None:
    assert PathMapper.noop().new_target_dir() is None
    assert PathMapper.new().new_target_dir() is None


def test_remap_is_resolved(tmp_path: Path) -> None:
    remap = tmp_path / "target"
    remap.mkdir()

    mapper = PathMapper.new(str(tmp_path / "target" / ".." / "target"))

    assert mapper.new_target_dir() == remap.resolve()
    assert mapper.new_target_dir() is not None
    assert mapper.new_target_dir().is_absolute()  # type: ignore[union-attr]


def test_missing_remap_directory_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(PathMapperError) as excinfo:
        PathMapper.new(tmp_path / "missing")

    assert excinfo.value.code == "E_PATH_MAPPING"
    assert excinfo.value.context["target_dir_remap"] == str(tmp_path / "missing")


def test_file_is_not_a_valid_remap(tmp_path: Path) -> None:
    file_path = tmp_path / "target"
    file_path.write_text("", encoding="utf-8")

    with pytest.raises(PathMapperError):
        PathMapper.new(file_path)
