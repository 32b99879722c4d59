"""Structural validation of a project archive.

Only entry names are inspected; content is never extracted. A valid
archive carries the project name file plus the materials and textures
manifests. The meshes manifest is optional.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, List

from ..errors import E_INVALID_ARCHIVE, InvalidArchive
from ..logging import get_logger
from .codec import ArchiveReader

__all__ = ["REQUIRED_ENTRIES", "missing_entries", "validate_archive"]

PROJECT_NAME_FILE = "project.txt"
MATERIALS_MANIFEST = "materials.cfg"
TEXTURES_MANIFEST = "textures.cfg"
MESHES_MANIFEST = "meshes.cfg"

REQUIRED_ENTRIES = (PROJECT_NAME_FILE, MATERIALS_MANIFEST, TEXTURES_MANIFEST)


def missing_entries(names: Iterable[str]) -> List[str]:
    # Literal, case-sensitive comparison: "Project.txt" does not count.
    present = set(names)
    return [req for req in REQUIRED_ENTRIES if req not in present]


def validate_archive(path: str | Path) -> List[str]:
    """Validate ``path`` and return its entry names.

    Raises ``InvalidArchive`` naming the first missing required entry, or
    ``ExtractError`` when the archive cannot be read at all.
    """
    with ArchiveReader(path) as reader:
        names = reader.names()
    missing = missing_entries(names)
    if missing:
        raise InvalidArchive(
            code=E_INVALID_ARCHIVE,
            message=f"File is not a valid project export: missing {missing[0]}",
            context={"archive": str(path), "missing": missing},
        )
    get_logger().debug("Archive %s valid (%d entries)", path, len(names))
    return names
