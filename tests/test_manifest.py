from pathlib import Path

import pytest

from projpack.errors import ManifestFormatError, ManifestMissing
from projpack.manifest import (
    ManifestRow,
    enrich_row,
    export_row,
    max_resource_id,
    parse_manifest,
    parse_manifest_text,
    read_mesh_list,
    write_manifest,
    write_mesh_list,
)


def _rows():
    return [
        ManifestRow(1, 0, 1, 0, "Textures", "Textures"),
        ManifestRow(1, 1, 2, 3, "C:/tex/wood_d.png", "C:/tex/wood_d.png"),
        ManifestRow(1, 1, 7, 3, "stone.png", "stone.png"),
        ManifestRow(1, 1, 4, 2, "Sub", ""),
    ]


def test_write_then_parse_preserves_rows(tmp_path: Path):
    path = write_manifest(tmp_path / "textures.cfg", _rows())
    assert parse_manifest(path) == _rows()


def test_written_lines_are_tab_separated(tmp_path: Path):
    path = write_manifest(tmp_path / "m.cfg", _rows()[:2])
    lines = path.read_text().splitlines()
    assert lines[0] == "1\t0\t1\t0\tTextures\tTextures"
    assert lines[1].count("\t") == 5


def test_write_overwrites_existing_file(tmp_path: Path):
    path = tmp_path / "m.cfg"
    path.write_text("garbage that would not parse\n" * 3)
    write_manifest(path, _rows()[:1])
    assert parse_manifest(path) == _rows()[:1]


def test_parse_tolerates_spaces_and_blank_lines():
    text = "1 0 1 0 Group Group\n\n  2   1  5 3 a-b_(c).png   x/a-b_(c).png  \n"
    rows = parse_manifest_text(text)
    assert len(rows) == 2
    assert rows[1].resource_id == 5
    assert rows[1].resource_name == "a-b_(c).png"
    assert rows[1].fully_qualified_path == "x/a-b_(c).png"


def test_parse_short_row_defaults_text_fields():
    (row,) = parse_manifest_text("3\t3\t9\t3\tonly_name\n")
    assert row.resource_name == "only_name"
    assert row.fully_qualified_path == ""


def test_parse_missing_file_raises(tmp_path: Path):
    with pytest.raises(ManifestMissing):
        parse_manifest(tmp_path / "nope.cfg")


@pytest.mark.parametrize("line", ["1 2 3", "1 x 3 3 a b"])
def test_parse_rejects_malformed_id_fields(line: str):
    with pytest.raises(ManifestFormatError):
        parse_manifest_text(line)


def test_export_row_strips_asset_paths_only():
    group, asset = _rows()[0], _rows()[1]
    assert export_row(group) == group
    stripped = export_row(asset)
    assert stripped.resource_name == "wood_d.png"
    assert stripped.fully_qualified_path == "wood_d.png"
    assert stripped.resource_id == asset.resource_id
    # input untouched
    assert asset.resource_name == "C:/tex/wood_d.png"


def test_export_row_handles_backslash_paths():
    row = ManifestRow(1, 1, 3, 3, "brick", r"D:\mats\brick.json")
    out = export_row(row)
    assert out.resource_name == "brick"
    assert out.fully_qualified_path == "brick.json"


def test_export_row_fills_empty_asset_name_from_path(tmp_path: Path):
    out = export_row(ManifestRow(1, 1, 4, 3, "", "/proj/tex/foo.png"))
    assert out == ManifestRow(1, 1, 4, 3, "foo.png", "foo.png")
    path = write_manifest(tmp_path / "textures.cfg", [out])
    assert parse_manifest(path) == [out]


def test_enrich_row_prefixes_assets_and_skips_groups():
    asset = ManifestRow(1, 1, 2, 3, "brick", "brick.json")
    group = ManifestRow(1, 0, 1, 0, "Walls", "Walls")
    assert enrich_row(asset, "/p/demo/").fully_qualified_path == "/p/demo/brick.json"
    assert enrich_row(group, "/p/demo/") == group


def test_max_resource_id():
    assert max_resource_id(_rows()) == 7
    assert max_resource_id([]) == 0


def test_mesh_list_roundtrip(tmp_path: Path):
    path = write_mesh_list(tmp_path / "meshes.cfg", ["tree.mesh", "rock.mesh"])
    assert path.read_text() == "tree.mesh\nrock.mesh\n"
    assert read_mesh_list(path) == ["tree.mesh", "rock.mesh"]
    with pytest.raises(ManifestMissing):
        read_mesh_list(tmp_path / "missing.cfg")
