"""Export pipeline: stage project files and pack them into one archive.

Phases, each aborting the export on failure:

1. load every material through the material loader
2. stage textures referenced by datablocks (registry first, then the
   project texture list)
3. stage textures from the texture browser
4. stage material files and their thumbnails
5. write ``project.txt`` and the path-free manifests
6. optionally stage meshes and write ``meshes.cfg``
7. write ``<project>.hlmp.zip`` from the staged files

Staged files are left in place; :class:`~projpack.staging.StagingCleanup`
removes the copies this export wrote once the archive has been released.
Sources that already live in the export directory are archived in place.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional

from ..archive.codec import ArchiveWriter
from ..archive.validator import (
    MATERIALS_MANIFEST,
    MESHES_MANIFEST,
    PROJECT_NAME_FILE,
    TEXTURES_MANIFEST,
)
from ..config import DEFAULT_THUMBNAIL_DIR
from ..errors import E_MATERIAL_LOAD, MaterialLoadError, invalid_reference
from ..logging import get_logger
from ..manifest import (
    ASSET_RESOURCE_TYPE,
    ManifestRow,
    export_row,
    max_resource_id,
    parse_manifest,
    write_manifest,
    write_mesh_list,
)
from ..materials import JsonMaterialLoader, LoadOutcome, MaterialLoader
from ..plugin import ExportRequest, ExportResult
from ..reporting import get_reporter, task
from ..resolver import ResourceRegistry, TextureResolver
from ..staging import StagedFileSet
from ..utils.paths import base_name

__all__ = [
    "ARCHIVE_SUFFIX",
    "ProjectExporter",
    "archive_path_for",
    "export_project",
]

ARCHIVE_SUFFIX = ".hlmp.zip"


def archive_path_for(export_dir: Path, project_name: str) -> Path:
    return Path(export_dir) / f"{project_name}{ARCHIVE_SUFFIX}"


def _copy_file(source: str | Path, destination: Path) -> bool:
    """Copy ``source`` to ``destination``; False when both are the same file."""
    src = Path(source)
    if src.resolve() == destination.resolve():
        return False
    shutil.copyfile(src, destination)
    return True


def _synthetic_material_rows(staged_materials: List[str]) -> List[ManifestRow]:
    return [
        ManifestRow(0, 0, i, ASSET_RESOURCE_TYPE, name, name)
        for i, name in enumerate(staged_materials, start=1)
    ]


class _ExportRun:
    """State for a single export; discarded when the export returns."""

    def __init__(self, request: ExportRequest, resolver: TextureResolver):
        self.request = request
        self.resolver = resolver
        self.export_dir = Path(request.export_dir)
        self.staged = StagedFileSet()
        # Base names of staged textures still waiting for a manifest row.
        self.seen_textures: List[str] = []
        self.staged_materials: List[str] = []
        self.log = get_logger("export")
        generated = (
            PROJECT_NAME_FILE,
            MATERIALS_MANIFEST,
            TEXTURES_MANIFEST,
            MESHES_MANIFEST,
            archive_path_for(self.export_dir, request.project_name).name,
        )
        self.reserved = {StagedFileSet.key(n) for n in generated}

    def destination(self, source: str) -> Path:
        return self.export_dir / base_name(source)

    def is_reserved(self, dest: Path) -> bool:
        return StagedFileSet.key(dest) in self.reserved

    def stage_copy(self, source: str | Path, dest: Path) -> None:
        # A source already in the export directory is archived, not owned.
        self.staged.add(dest, owned=_copy_file(source, dest))

    def stage_texture(self, source: str) -> bool:
        dest = self.destination(source)
        if dest in self.staged:
            self.log.debug("Texture %s already staged", dest.name)
            return False
        if self.is_reserved(dest):
            self.log.warning("Texture %s uses a reserved file name, skipped", source)
            return False
        if not Path(source).is_file():
            self.log.warning("Texture file not found, skipped: %s", source)
            return False
        self.stage_copy(source, dest)
        self.seen_textures.append(dest.name)
        return True

    def stage_generated(self, path: Path) -> Path:
        # Generated names are reserved, so no source file can hold them.
        self.staged.add(path)
        return path


class ProjectExporter:
    def __init__(
        self,
        loader: MaterialLoader | None = None,
        registry: ResourceRegistry | None = None,
    ):
        self.loader = loader or JsonMaterialLoader()
        self.registry = registry

    # Phases -------------------------------------------------------------------
    def _load_materials(self, run: _ExportRun) -> None:
        rep = get_reporter()
        materials = run.request.material_files
        with task("export.load", "Load materials", total=len(materials)) as stats:
            for path in materials:
                if not path:
                    raise invalid_reference(
                        "Trying to process a non-existing material filename"
                    )
                outcome = self.loader.load(path)
                if outcome is LoadOutcome.ERROR:
                    raise MaterialLoadError(
                        code=E_MATERIAL_LOAD,
                        message=f"Error while processing the material {path}",
                        context={"material": path},
                    )
                if outcome is LoadOutcome.ALREADY_PRESENT:
                    run.log.debug("Material already loaded: %s", path)
                rep.advance("export.load", current_item=base_name(path))
            stats["files"] = len(materials)

    def _stage_datablock_textures(self, run: _ExportRun) -> None:
        rep = get_reporter()
        names = run.request.datablock_textures
        skipped = 0
        with task(
            "export.datablock_textures", "Datablock textures", total=len(names)
        ) as stats:
            for name in names:
                source = run.resolver.resolve(name)
                if source is None:
                    run.log.warning("Texture %s not found in any source", name)
                    skipped += 1
                elif not run.stage_texture(source):
                    skipped += 1
                rep.advance("export.datablock_textures", current_item=name)
            stats["files"] = len(names) - skipped
            stats["skipped"] = skipped

    def _stage_browser_textures(self, run: _ExportRun) -> None:
        rep = get_reporter()
        paths = run.request.texture_files
        skipped = 0
        with task(
            "export.browser_textures", "Texture browser", total=len(paths)
        ) as stats:
            for path in paths:
                if not run.stage_texture(path):
                    skipped += 1
                rep.advance("export.browser_textures", current_item=base_name(path))
            stats["files"] = len(paths) - skipped
            stats["skipped"] = skipped

    def _stage_materials(self, run: _ExportRun) -> None:
        rep = get_reporter()
        materials = run.request.material_files
        thumbs = Path(run.request.thumbnail_dir or DEFAULT_THUMBNAIL_DIR)
        with task("export.materials", "Material files", total=len(materials)) as stats:
            for path in materials:
                if not path:
                    raise invalid_reference(
                        "Trying to process a non-existing material filename"
                    )
                if not Path(path).is_file():
                    raise invalid_reference(
                        f"Material file not found: {path}", {"material": path}
                    )
                dest = run.destination(path)
                if dest in run.staged:
                    run.log.warning(
                        "Material %s has a duplicate file name, skipped", path
                    )
                    continue
                if run.is_reserved(dest):
                    run.log.warning(
                        "Material %s uses a reserved file name, skipped", path
                    )
                    continue
                run.stage_copy(path, dest)
                run.staged_materials.append(dest.name)

                thumb_src = thumbs / f"{dest.name}.png"
                thumb_dest = run.export_dir / thumb_src.name
                if not thumb_src.is_file():
                    run.log.debug("No thumbnail for %s", dest.name)
                elif thumb_dest in run.staged:
                    run.log.warning(
                        "Thumbnail %s clashes with a staged file, skipped",
                        thumb_src.name,
                    )
                else:
                    run.stage_copy(thumb_src, thumb_dest)
                rep.advance("export.materials", current_item=dest.name)
            stats["files"] = len(run.staged_materials)

    def _texture_rows(self, run: _ExportRun) -> List[ManifestRow]:
        source_rows: List[ManifestRow] = []
        if run.request.textures_manifest is not None:
            source_rows = parse_manifest(run.request.textures_manifest)
        rows = [export_row(r) for r in source_rows]
        remaining = list(run.seen_textures)
        for row in rows:
            if not row.is_asset:
                continue
            key = row.resource_name.casefold()
            for i, name in enumerate(remaining):
                if name.casefold() == key:
                    del remaining[i]
                    break
        next_id = max_resource_id(rows)
        top = source_rows[-1].top_level_id if source_rows else 0
        for name in remaining:
            next_id += 1
            rows.append(
                ManifestRow(top, top, next_id, ASSET_RESOURCE_TYPE, name, name)
            )
        return rows

    def _write_manifests(self, run: _ExportRun) -> None:
        req = run.request
        with task("export.manifests", "Project manifests") as stats:
            project_file = run.export_dir / PROJECT_NAME_FILE
            project_file.write_text(req.project_name, encoding="utf-8")
            run.stage_generated(project_file)

            if req.materials_manifest is not None:
                material_rows = [
                    export_row(r) for r in parse_manifest(req.materials_manifest)
                ]
            else:
                material_rows = _synthetic_material_rows(run.staged_materials)
            run.stage_generated(
                write_manifest(run.export_dir / MATERIALS_MANIFEST, material_rows)
            )

            texture_rows = self._texture_rows(run)
            run.stage_generated(
                write_manifest(run.export_dir / TEXTURES_MANIFEST, texture_rows)
            )
            stats["rows"] = len(material_rows) + len(texture_rows)

    def _stage_meshes(self, run: _ExportRun) -> None:
        req = run.request
        meshes = [m for m in req.mesh_files if m]
        if not req.include_meshes or not meshes:
            return
        with task("export.meshes", "Meshes", total=len(meshes)) as stats:
            names: List[str] = []
            for path in meshes:
                if not Path(path).is_file():
                    raise invalid_reference(
                        f"Mesh file not found: {path}", {"mesh": path}
                    )
                dest = run.destination(path)
                if dest in run.staged or run.is_reserved(dest):
                    run.log.warning(
                        "Mesh %s clashes with a staged file name, skipped", path
                    )
                else:
                    run.stage_copy(path, dest)
                    names.append(dest.name)
                get_reporter().advance("export.meshes", current_item=dest.name)
            run.stage_generated(
                write_mesh_list(run.export_dir / MESHES_MANIFEST, names)
            )
            stats["files"] = len(names)

    def _write_archive(self, run: _ExportRun) -> Path:
        rep = get_reporter()
        archive = archive_path_for(run.export_dir, run.request.project_name)
        run.log.info("Creating %s", archive)
        with task("export.archive", "Write archive", total=len(run.staged)) as stats:
            total_bytes = 0
            with ArchiveWriter(archive) as writer:
                for path in run.staged:
                    total_bytes += writer.add_file(path)
                    rep.advance("export.archive", current_item=path.name)
            stats["entries"] = len(writer.entries)
            stats["bytes"] = total_bytes
        return archive

    # Entry point ----------------------------------------------------------------
    def run(self, request: ExportRequest) -> ExportResult:
        if not request.project_name:
            raise invalid_reference("No project name given for the export")
        export_dir = Path(request.export_dir)
        export_dir.mkdir(parents=True, exist_ok=True)
        run = _ExportRun(
            request, TextureResolver(self.registry, request.texture_files)
        )
        self._load_materials(run)
        self._stage_datablock_textures(run)
        self._stage_browser_textures(run)
        self._stage_materials(run)
        self._write_manifests(run)
        self._stage_meshes(run)
        archive = self._write_archive(run)
        get_reporter().status(
            "Export summary: "
            + f"archive={archive.name} entries={len(run.staged)} "
            + f"materials={len(run.staged_materials)} "
            + f"textures={len(run.seen_textures)}"
        )
        return ExportResult(
            archive_path=archive,
            staged=run.staged,
            success_text=f"Exported project to {archive}",
        )


def export_project(
    request: ExportRequest,
    loader: Optional[MaterialLoader] = None,
    registry: Optional[ResourceRegistry] = None,
) -> ExportResult:
    return ProjectExporter(loader, registry).run(request)
