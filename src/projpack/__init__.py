"""projpack: portable project archives for material/texture/mesh assets."""

from .api import export_project, import_project, inspect_archive, validate_archive
from .errors import PortError
from .plugin import ExportRequest, ExportResult, ImportRequest, ImportResult

__version__ = "0.1.0"

__all__ = [
    "export_project",
    "import_project",
    "inspect_archive",
    "validate_archive",
    "PortError",
    "ExportRequest",
    "ExportResult",
    "ImportRequest",
    "ImportResult",
    "__version__",
]
