"""High-level API for projpack.

These are the entry points a host (or the CLI) calls: they wire settings,
collaborators and post-operation cleanup around the pipelines.
"""

from __future__ import annotations

from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, List, Optional

from .archive.codec import ArchiveReader
from .archive.validator import validate_archive as _validate_archive
from .config import Settings
from .logging import get_logger
from .materials import MaterialLoader
from .pipeline.exporter import ProjectExporter
from .pipeline.importer import ProjectImporter
from .plugin import ExportRequest, ExportResult, ImportRequest, ImportResult
from .reporting import get_reporter
from .resolver import DirectoryResourceRegistry, ResourceRegistry
from .staging import StagingCleanup

__all__ = [
    "export_project",
    "import_project",
    "validate_archive",
    "inspect_archive",
    "registry_from_settings",
]


def registry_from_settings(settings: Settings) -> Optional[ResourceRegistry]:
    if not settings.resource_locations:
        return None
    return DirectoryResourceRegistry(settings.resource_locations)


def export_project(
    request: ExportRequest,
    *,
    settings: Settings | None = None,
    loader: MaterialLoader | None = None,
    registry: ResourceRegistry | None = None,
    cleanup: bool = True,
) -> ExportResult:
    """Run an export and, unless disabled, remove the staged copies.

    ``registry`` defaults to the search locations configured in
    ``settings``. Cleanup runs only after the archive has been closed.
    """
    settings = settings or Settings()
    if request.thumbnail_dir is None:
        request = replace(request, thumbnail_dir=Path(settings.thumbnail_dir))
    if registry is None:
        registry = registry_from_settings(settings)
    result = ProjectExporter(loader, registry).run(request)
    if cleanup:
        StagingCleanup(settings.cleanup_delay).run(result.staged)
    get_logger().info(result.success_text)
    return result


def import_project(
    request: ImportRequest, *, settings: Settings | None = None
) -> ImportResult:
    settings = settings or Settings()
    result = ProjectImporter(settings).run(request)
    get_logger().info(
        "Imported project %s; open %s",
        result.descriptor.project_name,
        result.descriptor_path,
    )
    return result


def validate_archive(path: str | Path) -> List[str]:
    names = _validate_archive(path)
    get_reporter().status(
        f"Validate summary: archive={Path(path).name} entries={len(names)} valid=yes"
    )
    return names


def inspect_archive(path: str | Path) -> List[dict[str, Any]]:
    with ArchiveReader(path) as reader:
        return [asdict(e) for e in reader.entries()]
