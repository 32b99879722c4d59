"""Error definitions for projpack."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_INVALID_REFERENCE = "E_INVALID_REFERENCE"
E_MANIFEST_MISSING = "E_MANIFEST_MISSING"
E_MANIFEST_FORMAT = "E_MANIFEST_FORMAT"
E_INVALID_ARCHIVE = "E_INVALID_ARCHIVE"
E_EXTRACT = "E_EXTRACT"
E_ARCHIVE_WRITE = "E_ARCHIVE_WRITE"
E_ARCHIVE_CLOSE = "E_ARCHIVE_CLOSE"
E_ALLOCATION = "E_ALLOCATION"
E_NO_FILE_SELECTED = "E_NO_FILE_SELECTED"
E_CREATE_PROJECT_FILE = "E_CREATE_PROJECT_FILE"
E_CREATE_MATERIAL_MANIFEST = "E_CREATE_MATERIAL_MANIFEST"
E_CREATE_TEXTURE_MANIFEST = "E_CREATE_TEXTURE_MANIFEST"
E_MATERIAL_LOAD = "E_MATERIAL_LOAD"
E_CONFIG = "E_CONFIG"

# Extraction phases reported in ExtractError.context["phase"]
PHASE_OPEN = "open"
PHASE_GLOBAL_INFO = "global-info"
PHASE_ENTRY_INFO = "entry-info"
PHASE_ENTRY_OPEN = "entry-open"
PHASE_FILE_CREATE = "file-create"
PHASE_READ = "read"
PHASE_WRITE = "write"


@dataclass
class PortError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class InvalidReference(PortError):
    pass


class ManifestMissing(PortError):
    pass


class ManifestFormatError(PortError):
    pass


class InvalidArchive(PortError):
    pass


class ExtractError(PortError):
    @property
    def phase(self) -> str:
        return (self.context or {}).get("phase", "")


class ArchiveWriteError(PortError):
    pass


class ArchiveCloseError(PortError):
    pass


class AllocationError(PortError):
    pass


class NoFileSelected(PortError):
    pass


class CreateProjectFileError(PortError):
    pass


class CreateMaterialManifestError(PortError):
    pass


class CreateTextureManifestError(PortError):
    pass


class MaterialLoadError(PortError):
    pass


class ConfigError(PortError):
    pass


def invalid_reference(
    message: str, context: Optional[Dict[str, Any]] = None
) -> InvalidReference:
    return InvalidReference(
        code=E_INVALID_REFERENCE, message=message, context=context
    )


def manifest_missing(path: Any) -> ManifestMissing:
    return ManifestMissing(
        code=E_MANIFEST_MISSING,
        message=f"Manifest not found: {path}",
        context={"path": str(path)},
    )


def extract_error(
    phase: str, message: str, context: Optional[Dict[str, Any]] = None
) -> ExtractError:
    ctx = {"phase": phase}
    if context:
        ctx.update(context)
    return ExtractError(code=E_EXTRACT, message=message, context=ctx)


__all__ = [
    "PortError",
    "InvalidReference",
    "ManifestMissing",
    "ManifestFormatError",
    "InvalidArchive",
    "ExtractError",
    "ArchiveWriteError",
    "ArchiveCloseError",
    "AllocationError",
    "NoFileSelected",
    "CreateProjectFileError",
    "CreateMaterialManifestError",
    "CreateTextureManifestError",
    "MaterialLoadError",
    "ConfigError",
    "invalid_reference",
    "manifest_missing",
    "extract_error",
    "E_INVALID_REFERENCE",
    "E_MANIFEST_MISSING",
    "E_MANIFEST_FORMAT",
    "E_INVALID_ARCHIVE",
    "E_EXTRACT",
    "E_ARCHIVE_WRITE",
    "E_ARCHIVE_CLOSE",
    "E_ALLOCATION",
    "E_NO_FILE_SELECTED",
    "E_CREATE_PROJECT_FILE",
    "E_CREATE_MATERIAL_MANIFEST",
    "E_CREATE_TEXTURE_MANIFEST",
    "E_MATERIAL_LOAD",
    "E_CONFIG",
    "PHASE_OPEN",
    "PHASE_GLOBAL_INFO",
    "PHASE_ENTRY_INFO",
    "PHASE_ENTRY_OPEN",
    "PHASE_FILE_CREATE",
    "PHASE_READ",
    "PHASE_WRITE",
]
