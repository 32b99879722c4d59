"""Project descriptor (``<name>.hlmp``) written after an import."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__all__ = ["DESCRIPTOR_TAG", "DESCRIPTOR_SUFFIX", "ProjectDescriptor"]

DESCRIPTOR_TAG = "hlmsEditor v1.0"
DESCRIPTOR_SUFFIX = ".hlmp"


@dataclass(frozen=True, slots=True)
class ProjectDescriptor:
    project_name: str
    materials_manifest_path: str
    texture_manifest_path: str
    meshes_manifest_path: Optional[str] = None

    def lines(self, tag: str = DESCRIPTOR_TAG) -> list[str]:
        out = [tag, self.materials_manifest_path, self.texture_manifest_path]
        if self.meshes_manifest_path:
            out.append(self.meshes_manifest_path)
        return out

    def write(self, path: str | Path, tag: str = DESCRIPTOR_TAG) -> Path:
        p = Path(path)
        p.write_text("\n".join(self.lines(tag)) + "\n", encoding="utf-8")
        return p

    @classmethod
    def read(cls, path: str | Path) -> "ProjectDescriptor":
        p = Path(path)
        lines = [l for l in p.read_text(encoding="utf-8").splitlines() if l]
        if len(lines) < 3:
            raise ValueError(f"Incomplete project descriptor: {p}")
        return cls(
            project_name=p.stem,
            materials_manifest_path=lines[1],
            texture_manifest_path=lines[2],
            meshes_manifest_path=lines[3] if len(lines) > 3 else None,
        )
