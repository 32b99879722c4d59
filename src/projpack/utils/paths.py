"""Path utilities (base names, safe resolution)."""

from __future__ import annotations
from pathlib import Path

__all__ = [
    "base_name",
    "strip_leading_separators",
    "safe_file_path",
    "join_project_path",
]

_SEPARATORS = ("/", "\\")


def base_name(path: str) -> str:
    # Host paths mix separators, so split on both regardless of platform.
    return path[max(path.rfind("/"), path.rfind("\\")) + 1 :]


def strip_leading_separators(name: str) -> str:
    return name.lstrip("".join(_SEPARATORS))


def join_project_path(project_dir: str, name: str) -> str:
    """Prefix ``name`` with ``project_dir`` as a plain string concatenation.

    ``project_dir`` always carries its trailing separator so manifest paths
    read ``<dir>/file`` without a second separator being inserted.
    """
    return f"{project_dir}{name}"


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    base_dir = base_dir.resolve()
    resolved = (base_dir / file_path).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    return resolved
