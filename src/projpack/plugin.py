"""Host editor contract: capability flags, properties, request/result records.

The host drives an import or export by filling a request record, running
the pipeline and acting on the result according to :func:`action_flags`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntFlag
from pathlib import Path
from typing import Dict, List, Optional

from .descriptor import ProjectDescriptor
from .staging import StagedFileSet

__all__ = [
    "PLUGIN_NAME",
    "IMPORT_MENU_TEXT",
    "EXPORT_MENU_TEXT",
    "INCLUDE_MESHES_PROPERTY",
    "ActionFlag",
    "PluginProperty",
    "action_flags",
    "plugin_properties",
    "ExportRequest",
    "ExportResult",
    "ImportRequest",
    "ImportResult",
]

PLUGIN_NAME = "Project import/export"
IMPORT_MENU_TEXT = "Import HLMS Editor project"
EXPORT_MENU_TEXT = "Export current HLMS Editor project"
INCLUDE_MESHES_PROPERTY = "include_meshes"


class ActionFlag(IntFlag):
    PRE_IMPORT_OPEN_FILE_DIALOG = 1 << 0
    PRE_IMPORT_MK_DIR = 1 << 1
    POST_IMPORT_OPEN_PROJECT = 1 << 2
    POST_IMPORT_SAVE_RESOURCE_LOCATIONS = 1 << 3
    PRE_EXPORT_SETTINGS_DIALOG = 1 << 4
    PRE_EXPORT_OPEN_DIR_DIALOG = 1 << 5
    PRE_EXPORT_TEXTURES_USED_BY_DATABLOCK = 1 << 6


def action_flags() -> ActionFlag:
    return (
        ActionFlag.PRE_IMPORT_OPEN_FILE_DIALOG
        | ActionFlag.PRE_IMPORT_MK_DIR
        | ActionFlag.POST_IMPORT_OPEN_PROJECT
        | ActionFlag.POST_IMPORT_SAVE_RESOURCE_LOCATIONS
        | ActionFlag.PRE_EXPORT_SETTINGS_DIALOG
        | ActionFlag.PRE_EXPORT_OPEN_DIR_DIALOG
        | ActionFlag.PRE_EXPORT_TEXTURES_USED_BY_DATABLOCK
    )


@dataclass(frozen=True, slots=True)
class PluginProperty:
    name: str
    label: str
    info: str
    default: bool


def plugin_properties() -> Dict[str, PluginProperty]:
    prop = PluginProperty(
        name=INCLUDE_MESHES_PROPERTY,
        label="Add current mesh file to the project",
        info="If this property is set to 'true' the current mesh is included in the zip.",
        default=False,
    )
    return {prop.name: prop}


@dataclass(slots=True)
class ExportRequest:
    export_dir: Path
    project_name: str
    material_files: List[str] = field(default_factory=list)
    texture_files: List[str] = field(default_factory=list)
    datablock_textures: List[str] = field(default_factory=list)
    mesh_files: List[str] = field(default_factory=list)
    include_meshes: bool = False
    # Editor's current manifests; rows are synthesised when absent
    materials_manifest: Optional[Path] = None
    textures_manifest: Optional[Path] = None
    thumbnail_dir: Optional[Path] = None


@dataclass(slots=True)
class ExportResult:
    archive_path: Path
    staged: StagedFileSet
    success_text: str


@dataclass(slots=True)
class ImportRequest:
    archive_dir: Path
    archive_name: str
    import_root: Path
    thumbnail_dir: Optional[Path] = None


@dataclass(slots=True)
class ImportResult:
    project_dir: Path
    descriptor: ProjectDescriptor
    descriptor_path: Path
    resource_location: str
