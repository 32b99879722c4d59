from .exporter import ARCHIVE_SUFFIX, ProjectExporter, archive_path_for, export_project
from .importer import ProjectImporter, archive_base_name, import_project

__all__ = [
    "ARCHIVE_SUFFIX",
    "ProjectExporter",
    "ProjectImporter",
    "archive_path_for",
    "archive_base_name",
    "export_project",
    "import_project",
]
