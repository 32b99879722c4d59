"""Shared fixtures-by-function for building small editor projects on disk."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from types import SimpleNamespace

from projpack.plugin import ExportRequest


def make_sources(root: Path) -> SimpleNamespace:
    mats = root / "mats"
    tex = root / "tex"
    thumbs = root / "thumbs"
    for d in (mats, tex, thumbs):
        d.mkdir(parents=True, exist_ok=True)
    wood = mats / "wood.json"
    wood.write_text(
        json.dumps({"pbs": {"wood": {"diffuse": {"texture": "wood_d.png"}}}})
    )
    wood_d = tex / "wood_d.png"
    wood_d.write_bytes(b"\x89PNG wood diffuse")
    (thumbs / "wood.json.png").write_bytes(b"\x89PNG thumb")
    return SimpleNamespace(
        root=root, mats=mats, tex=tex, thumbs=thumbs, wood=wood, wood_d=wood_d
    )


def export_request(src: SimpleNamespace, export_dir: Path, **overrides) -> ExportRequest:
    fields = dict(
        export_dir=export_dir,
        project_name="demo",
        material_files=[str(src.wood)],
        texture_files=[str(src.wood_d)],
        datablock_textures=["wood_d.png"],
        thumbnail_dir=src.thumbs,
    )
    fields.update(overrides)
    return ExportRequest(**fields)


def write_archive(path: Path, files: dict[str, str | bytes]) -> Path:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return path


def project_dir_text(import_root: Path, name: str) -> str:
    return (import_root / name).as_posix() + "/"
