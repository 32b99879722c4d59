from pathlib import Path

import pytest

from projpack.archive.validator import missing_entries, validate_archive
from projpack.errors import ExtractError, InvalidArchive

from project_helper import write_archive

_REQUIRED = {"project.txt": "demo", "materials.cfg": "", "textures.cfg": ""}


def test_accepts_required_entries_with_extras(tmp_path: Path):
    files = dict(_REQUIRED, **{"wood.json": "{}", "unknown.bin": b"\x00"})
    names = validate_archive(write_archive(tmp_path / "ok.zip", files))
    assert set(names) == set(files)


def test_meshes_manifest_is_not_required(tmp_path: Path):
    validate_archive(write_archive(tmp_path / "ok.zip", _REQUIRED))


@pytest.mark.parametrize("missing", sorted(_REQUIRED))
def test_rejects_archive_missing_required_entry(tmp_path: Path, missing: str):
    files = {k: v for k, v in _REQUIRED.items() if k != missing}
    with pytest.raises(InvalidArchive) as ei:
        validate_archive(write_archive(tmp_path / "bad.zip", files))
    assert missing in ei.value.message


def test_names_first_missing_entry():
    assert missing_entries(["textures.cfg"]) == ["project.txt", "materials.cfg"]


def test_match_is_literal_and_case_sensitive(tmp_path: Path):
    files = {"Project.txt": "demo", "materials.cfg": "", "textures.cfg": ""}
    with pytest.raises(InvalidArchive):
        validate_archive(write_archive(tmp_path / "bad.zip", files))
    files = {"sub/project.txt": "demo", "materials.cfg": "", "textures.cfg": ""}
    with pytest.raises(InvalidArchive):
        validate_archive(write_archive(tmp_path / "bad2.zip", files))


def test_unreadable_archive_is_extract_error(tmp_path: Path):
    bad = tmp_path / "bad.zip"
    bad.write_text("nope")
    with pytest.raises(ExtractError):
        validate_archive(bad)
