"""Resource manifest (``materials.cfg`` / ``textures.cfg`` / ``meshes.cfg``).

A resource manifest is a plain text catalog, one row per line, with six
tab-separated fields and no header::

    topLevelId  parentId  resourceId  resourceType  resourceName  path

Rows whose ``resourceType`` is :data:`ASSET_RESOURCE_TYPE` describe files;
every other row is a structural group and its path is never rewritten.

The meshes manifest is simpler: one mesh base name per line.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, List

from .errors import E_MANIFEST_FORMAT, ManifestFormatError, manifest_missing
from .utils.paths import base_name, join_project_path

__all__ = [
    "ASSET_RESOURCE_TYPE",
    "ManifestRow",
    "parse_manifest",
    "parse_manifest_text",
    "write_manifest",
    "format_row",
    "export_row",
    "enrich_row",
    "max_resource_id",
    "read_mesh_list",
    "write_mesh_list",
]

ASSET_RESOURCE_TYPE = 3
_FIELD_SEPARATOR = "\t"


@dataclass(slots=True)
class ManifestRow:
    top_level_id: int
    parent_id: int
    resource_id: int
    resource_type: int
    resource_name: str = ""
    fully_qualified_path: str = ""

    @property
    def is_asset(self) -> bool:
        return self.resource_type == ASSET_RESOURCE_TYPE


def _parse_line(line: str, lineno: int, source: str) -> ManifestRow:
    fields = line.split()
    if len(fields) < 4:
        raise ManifestFormatError(
            code=E_MANIFEST_FORMAT,
            message=f"{source}:{lineno}: expected at least 4 fields, got {len(fields)}",
            context={"path": source, "line": lineno},
        )
    try:
        ids = [int(f) for f in fields[:4]]
    except ValueError as e:
        raise ManifestFormatError(
            code=E_MANIFEST_FORMAT,
            message=f"{source}:{lineno}: non-numeric id field ({e})",
            context={"path": source, "line": lineno},
        ) from e
    name = fields[4] if len(fields) > 4 else ""
    path = fields[5] if len(fields) > 5 else ""
    return ManifestRow(ids[0], ids[1], ids[2], ids[3], name, path)


def parse_manifest_text(text: str, source: str = "<manifest>") -> List[ManifestRow]:
    rows: List[ManifestRow] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        rows.append(_parse_line(line, lineno, source))
    return rows


def parse_manifest(path: str | Path) -> List[ManifestRow]:
    p = Path(path)
    if not p.is_file():
        raise manifest_missing(p)
    return parse_manifest_text(p.read_text(encoding="utf-8"), str(p))


def format_row(row: ManifestRow) -> str:
    return _FIELD_SEPARATOR.join(
        [
            str(row.top_level_id),
            str(row.parent_id),
            str(row.resource_id),
            str(row.resource_type),
            row.resource_name,
            row.fully_qualified_path,
        ]
    )


def write_manifest(path: str | Path, rows: Iterable[ManifestRow]) -> Path:
    p = Path(path)
    with p.open("w", encoding="utf-8", newline="\n") as f:
        for row in rows:
            f.write(format_row(row) + "\n")
    return p


def export_row(row: ManifestRow) -> ManifestRow:
    """Return the path-free form of ``row`` used inside an archive.

    Asset rows keep only base filenames: the name is reduced to its base
    name and the path column carries the base name of the original path
    (falling back to the name when the row had no path). An empty name is
    taken from the path, since whitespace parsing cannot represent an empty
    name followed by a path.
    """
    if not row.is_asset:
        return replace(row)
    original = row.fully_qualified_path or row.resource_name
    name = base_name(row.resource_name or original)
    return replace(row, resource_name=name, fully_qualified_path=base_name(original))


def enrich_row(row: ManifestRow, project_dir: str) -> ManifestRow:
    if not row.is_asset:
        return replace(row)
    return replace(
        row,
        fully_qualified_path=join_project_path(
            project_dir, row.fully_qualified_path
        ),
    )


def max_resource_id(rows: Iterable[ManifestRow]) -> int:
    return max((r.resource_id for r in rows), default=0)


def read_mesh_list(path: str | Path) -> List[str]:
    p = Path(path)
    if not p.is_file():
        raise manifest_missing(p)
    return [
        line.strip()
        for line in p.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]


def write_mesh_list(path: str | Path, names: Iterable[str]) -> Path:
    p = Path(path)
    with p.open("w", encoding="utf-8", newline="\n") as f:
        for name in names:
            f.write(f"{name}\n")
    return p
