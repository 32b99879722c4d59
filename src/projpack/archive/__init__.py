from .codec import (
    ArchiveEntry,
    ArchiveReader,
    ArchiveWriter,
    archive_entry_name,
    is_large_file,
)
from .validator import REQUIRED_ENTRIES, validate_archive, missing_entries

__all__ = [
    "ArchiveEntry",
    "ArchiveReader",
    "ArchiveWriter",
    "archive_entry_name",
    "is_large_file",
    "REQUIRED_ENTRIES",
    "validate_archive",
    "missing_entries",
]
