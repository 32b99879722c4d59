"""Import pipeline: unpack a project archive into a new project directory.

The archive carries path-free manifests. After extraction every asset row
is re-rooted at the project directory and the manifests are written under
project-specific names next to a ``<project>.hlmp`` descriptor that the
host opens afterwards. Nothing is rolled back on failure; the caller owns a
partially populated project directory.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..archive.codec import ArchiveReader
from ..archive.validator import (
    MATERIALS_MANIFEST,
    MESHES_MANIFEST,
    PROJECT_NAME_FILE,
    TEXTURES_MANIFEST,
    validate_archive,
)
from ..config import DEFAULT_THUMBNAIL_DIR, Settings
from ..descriptor import DESCRIPTOR_SUFFIX, ProjectDescriptor
from ..errors import (
    E_CREATE_MATERIAL_MANIFEST,
    E_CREATE_PROJECT_FILE,
    E_CREATE_TEXTURE_MANIFEST,
    E_NO_FILE_SELECTED,
    CreateMaterialManifestError,
    CreateProjectFileError,
    CreateTextureManifestError,
    ManifestMissing,
    NoFileSelected,
    PortError,
    invalid_reference,
)
from ..logging import get_logger
from ..manifest import (
    ManifestRow,
    enrich_row,
    parse_manifest,
    read_mesh_list,
    write_manifest,
)
from ..plugin import ImportRequest, ImportResult
from ..reporting import get_reporter, task
from ..utils.paths import join_project_path

__all__ = ["ProjectImporter", "archive_base_name", "import_project"]


def archive_base_name(archive_name: str) -> str:
    """Archive file name up to its first dot (``demo.hlmp.zip`` -> ``demo``)."""
    name = Path(archive_name).name
    head = name.split(".", 1)[0]
    return head or Path(name).stem


def _project_dir_text(import_root: Path, base: str) -> str:
    return f"{(Path(import_root) / base).as_posix()}/"


class ProjectImporter:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.log = get_logger("import")

    def _thumbnail_dir(self, request: ImportRequest) -> Path:
        return Path(
            request.thumbnail_dir
            or self.settings.thumbnail_dir
            or DEFAULT_THUMBNAIL_DIR
        )

    # Phases -------------------------------------------------------------------
    def _stage_archive(
        self, request: ImportRequest, project_dir: Path
    ) -> Tuple[Path, bool]:
        """Copy the archive into ``project_dir``.

        Returns the path to extract from and whether a copy was made. An
        archive that already sits in ``project_dir`` is used in place.
        """
        source = Path(request.archive_dir) / request.archive_name
        if not source.is_file():
            raise invalid_reference(
                f"Import file not found: {source}", {"archive": str(source)}
            )
        project_dir.mkdir(parents=True, exist_ok=True)
        staged = project_dir / Path(request.archive_name).name
        if source.resolve() == staged.resolve():
            return staged, False
        shutil.copyfile(source, staged)
        return staged, True

    def _extract(
        self, archive: Path, project_dir: Path, remove_archive: bool = True
    ) -> List[Path]:
        with task("import.extract", "Extract archive") as stats:
            validate_archive(archive)
            with ArchiveReader(archive) as reader:
                written = reader.extract_all(project_dir)
            if remove_archive:
                os.remove(archive)
            stats["files"] = len(written)
        return written

    def _write_descriptor(self, project_text: str) -> ProjectDescriptor:
        project_dir = Path(project_text)
        name_file = project_dir / PROJECT_NAME_FILE
        if not name_file.is_file():
            raise CreateProjectFileError(
                code=E_CREATE_PROJECT_FILE,
                message="Could not create project file: project.txt is missing",
                context={"path": str(name_file)},
            )
        lines = name_file.read_text(encoding="utf-8").splitlines()
        name = lines[0].strip() if lines else ""
        if not name:
            raise CreateProjectFileError(
                code=E_CREATE_PROJECT_FILE,
                message="Could not create project file: project name is empty",
                context={"path": str(name_file)},
            )
        meshes = None
        if (project_dir / MESHES_MANIFEST).is_file():
            meshes = join_project_path(project_text, f"{name}_meshes.cfg")
        descriptor = ProjectDescriptor(
            project_name=name,
            materials_manifest_path=join_project_path(
                project_text, f"{name}_materials.cfg"
            ),
            texture_manifest_path=join_project_path(
                project_text, f"{name}_textures.cfg"
            ),
            meshes_manifest_path=meshes,
        )
        descriptor.write(
            project_dir / f"{name}{DESCRIPTOR_SUFFIX}",
            self.settings.descriptor_tag,
        )
        os.remove(name_file)
        return descriptor

    def _move_thumbnail(self, project_dir: Path, row: ManifestRow, thumbs: Path) -> None:
        source = project_dir / f"{row.resource_name}.png"
        if not source.is_file():
            return
        try:
            thumbs.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, thumbs / source.name)
            os.remove(source)
        except OSError as e:
            self.log.warning("Could not move thumbnail %s: %s", source.name, e)

    def _enrich_manifest(
        self,
        project_text: str,
        source_name: str,
        target: str,
        on_missing: Callable[[str], PortError],
        on_asset: Optional[Callable[[ManifestRow], None]] = None,
    ) -> int:
        source = Path(project_text) / source_name
        try:
            rows = parse_manifest(source)
        except ManifestMissing as e:
            raise on_missing(str(source)) from e
        enriched = []
        for row in rows:
            if on_asset is not None and row.is_asset:
                on_asset(row)
            enriched.append(enrich_row(row, project_text))
        write_manifest(target, enriched)
        os.remove(source)
        return len(enriched)

    def _enrich_meshes(self, project_text: str, target: Optional[str]) -> int:
        source = Path(project_text) / MESHES_MANIFEST
        if target is None or not source.is_file():
            return 0
        try:
            names = read_mesh_list(source)
            Path(target).write_text(
                "".join(f"{join_project_path(project_text, n)}\n" for n in names),
                encoding="utf-8",
            )
            os.remove(source)
        except (OSError, ManifestMissing) as e:
            self.log.warning("Meshes manifest not rewritten: %s", e)
            return 0
        return len(names)

    # Entry point ----------------------------------------------------------------
    def run(self, request: ImportRequest) -> ImportResult:
        if not request.archive_name:
            raise NoFileSelected(
                code=E_NO_FILE_SELECTED, message="No import file selected"
            )
        base = archive_base_name(request.archive_name)
        project_text = _project_dir_text(request.import_root, base)
        project_dir = Path(project_text)
        self.log.info("Importing %s into %s", request.archive_name, project_text)

        archive, copied = self._stage_archive(request, project_dir)
        self._extract(archive, project_dir, remove_archive=copied)

        with task("import.manifests", "Project manifests") as stats:
            descriptor = self._write_descriptor(project_text)
            thumbs = self._thumbnail_dir(request)
            rows = self._enrich_manifest(
                project_text,
                MATERIALS_MANIFEST,
                descriptor.materials_manifest_path,
                lambda path: CreateMaterialManifestError(
                    code=E_CREATE_MATERIAL_MANIFEST,
                    message="Could not create materials file",
                    context={"path": path},
                ),
                lambda row: self._move_thumbnail(project_dir, row, thumbs),
            )
            rows += self._enrich_manifest(
                project_text,
                TEXTURES_MANIFEST,
                descriptor.texture_manifest_path,
                lambda path: CreateTextureManifestError(
                    code=E_CREATE_TEXTURE_MANIFEST,
                    message="Could not create textures file",
                    context={"path": path},
                ),
            )
            meshes = self._enrich_meshes(
                project_text, descriptor.meshes_manifest_path
            )
            stats["rows"] = rows + meshes

        descriptor_path = project_dir / f"{descriptor.project_name}{DESCRIPTOR_SUFFIX}"
        get_reporter().status(
            "Import summary: "
            + f"project={descriptor.project_name} rows={rows} meshes={meshes} "
            + f"descriptor={descriptor_path.name}"
        )
        return ImportResult(
            project_dir=project_dir,
            descriptor=descriptor,
            descriptor_path=descriptor_path,
            resource_location=project_text.rstrip("/"),
        )


def import_project(
    request: ImportRequest, settings: Optional[Settings] = None
) -> ImportResult:
    return ProjectImporter(settings).run(request)
