"""Thin adapter over :mod:`zipfile` for project archives.

Entries are stored under bare filenames with deflate compression. Files
at or above the 32-bit size boundary are written with zip64 extensions,
decided per entry before it is added.
"""

from __future__ import annotations

import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from ..errors import (
    E_ALLOCATION,
    E_ARCHIVE_CLOSE,
    E_ARCHIVE_WRITE,
    PHASE_ENTRY_INFO,
    PHASE_ENTRY_OPEN,
    PHASE_FILE_CREATE,
    PHASE_GLOBAL_INFO,
    PHASE_OPEN,
    PHASE_READ,
    PHASE_WRITE,
    AllocationError,
    ArchiveCloseError,
    ArchiveWriteError,
    extract_error,
)
from ..logging import get_logger
from ..utils.paths import base_name, safe_file_path, strip_leading_separators

__all__ = [
    "ArchiveEntry",
    "ArchiveWriter",
    "ArchiveReader",
    "WRITE_BUFFER_SIZE",
    "READ_SIZE",
    "LARGE_FILE_THRESHOLD",
    "is_large_file",
    "archive_entry_name",
]

WRITE_BUFFER_SIZE = 256 * 1024
READ_SIZE = 32 * 1024
LARGE_FILE_THRESHOLD = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    name: str
    size: int
    compressed_size: int
    crc: int
    is_large: bool


def is_large_file(path: str | Path) -> bool:
    try:
        return Path(path).stat().st_size >= LARGE_FILE_THRESHOLD
    except OSError:
        return False


def archive_entry_name(path: str | Path) -> str:
    """Entry name for a staged file: no leading separators, no directory."""
    return base_name(strip_leading_separators(str(path)))


def _allocate(size: int) -> bytearray:
    try:
        return bytearray(size)
    except MemoryError as e:
        raise AllocationError(
            code=E_ALLOCATION,
            message=f"Could not allocate {size} byte transfer buffer",
        ) from e


def _pump(
    src: BinaryIO,
    dst: BinaryIO,
    buffer: bytearray,
    on_read_error: Callable[[OSError], Exception],
    on_write_error: Callable[[OSError], Exception],
) -> int:
    view = memoryview(buffer)
    total = 0
    while True:
        try:
            n = src.readinto(buffer)
        except (OSError, zipfile.BadZipFile) as e:
            raise on_read_error(e) from e
        if not n:
            return total
        try:
            dst.write(view[:n])
        except OSError as e:
            raise on_write_error(e) from e
        total += n


class ArchiveWriter:
    """Write-side adapter; a fresh archive replaces any existing file."""

    def __init__(self, path: str | Path, buffer_size: int = WRITE_BUFFER_SIZE):
        self.path = Path(path)
        self._buffer = _allocate(buffer_size)
        self.entries: List[str] = []
        try:
            self._zf: Optional[zipfile.ZipFile] = zipfile.ZipFile(
                self.path, "w", compression=zipfile.ZIP_DEFLATED
            )
        except OSError as e:
            raise ArchiveWriteError(
                code=E_ARCHIVE_WRITE,
                message=f"Error opening {self.path}: {e}",
                context={"archive": str(self.path)},
            ) from e

    def __enter__(self) -> "ArchiveWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        elif self._zf is not None:
            # Already failing; release the handle without masking the error.
            zf, self._zf = self._zf, None
            try:
                zf.close()
            except (OSError, ValueError) as close_exc:
                get_logger().debug(
                    "Ignoring close failure of %s: %s", self.path, close_exc
                )

    def _write_error(self, source: Path, message: str) -> ArchiveWriteError:
        return ArchiveWriteError(
            code=E_ARCHIVE_WRITE,
            message=message,
            context={"archive": str(self.path), "file": str(source)},
        )

    def add_file(self, source: str | Path, arcname: str | None = None) -> int:
        if self._zf is None:
            raise self._write_error(Path(source), "Archive already closed")
        src_path = Path(source)
        name = arcname or archive_entry_name(source)
        try:
            info = zipfile.ZipInfo.from_file(src_path, name)
            fin = src_path.open("rb")
        except OSError as e:
            raise self._write_error(src_path, f"Error opening {src_path}: {e}") from e
        info.compress_type = zipfile.ZIP_DEFLATED
        large = is_large_file(src_path)
        with fin:
            try:
                entry = self._zf.open(info, "w", force_zip64=large)
            except (OSError, ValueError, RuntimeError) as e:
                raise self._write_error(
                    src_path, f"Error adding {src_path} to archive: {e}"
                ) from e
            try:
                written = _pump(
                    fin,
                    entry,
                    self._buffer,
                    lambda e: self._write_error(
                        src_path, f"Error reading {src_path}: {e}"
                    ),
                    lambda e: self._write_error(
                        src_path, f"Error writing {src_path} in archive: {e}"
                    ),
                )
            finally:
                try:
                    entry.close()
                except (OSError, RuntimeError) as e:
                    raise self._write_error(
                        src_path, f"Error closing {name} in archive: {e}"
                    ) from e
        self.entries.append(name)
        return written

    def close(self) -> None:
        if self._zf is None:
            return
        zf, self._zf = self._zf, None
        try:
            zf.close()
        except (OSError, ValueError) as e:
            raise ArchiveCloseError(
                code=E_ARCHIVE_CLOSE,
                message=f"Error closing {self.path}: {e}",
                context={"archive": str(self.path)},
            ) from e


class ArchiveReader:
    """Read-side adapter; all failures surface as ``ExtractError``."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        try:
            self._zf = zipfile.ZipFile(self.path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise extract_error(
                PHASE_OPEN,
                f"Error while opening import file: {self.path}",
                {"archive": str(self.path), "reason": str(e)},
            ) from e

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._zf.close()

    def _infos(self) -> List[zipfile.ZipInfo]:
        try:
            return self._zf.infolist()
        except (OSError, zipfile.BadZipFile) as e:
            raise extract_error(
                PHASE_GLOBAL_INFO,
                f"Error while reading import file: {self.path}",
                {"archive": str(self.path), "reason": str(e)},
            ) from e

    def entries(self) -> List[ArchiveEntry]:
        return [
            ArchiveEntry(
                name=i.filename,
                size=i.file_size,
                compressed_size=i.compress_size,
                crc=i.CRC,
                is_large=i.file_size >= LARGE_FILE_THRESHOLD,
            )
            for i in self._infos()
            if not i.is_dir()
        ]

    def names(self) -> List[str]:
        return [e.name for e in self.entries()]

    def extract_all(self, dest_dir: str | Path) -> List[Path]:
        dest = Path(dest_dir)
        buffer = _allocate(READ_SIZE)
        written: List[Path] = []
        for info in self._infos():
            if info.is_dir():
                continue
            try:
                target = safe_file_path(dest, info.filename)
            except ValueError as e:
                raise extract_error(
                    PHASE_ENTRY_INFO,
                    f"Entry escapes the project directory: {info.filename}",
                    {"entry": info.filename},
                ) from e
            try:
                src = self._zf.open(info, "r")
            except (OSError, zipfile.BadZipFile, RuntimeError) as e:
                raise extract_error(
                    PHASE_ENTRY_OPEN,
                    f"Could not open {info.filename} in the import",
                    {"entry": info.filename, "reason": str(e)},
                ) from e
            with src:
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    out = target.open("wb")
                except OSError as e:
                    raise extract_error(
                        PHASE_FILE_CREATE,
                        f"Could not create a destination file: {target}",
                        {"entry": info.filename, "reason": str(e)},
                    ) from e
                with out:
                    _pump(
                        src,
                        out,
                        buffer,
                        lambda e: extract_error(
                            PHASE_READ,
                            f"Error while reading {info.filename}",
                            {"entry": info.filename, "reason": str(e)},
                        ),
                        lambda e: extract_error(
                            PHASE_WRITE,
                            f"Error while writing {target}",
                            {"entry": info.filename, "reason": str(e)},
                        ),
                    )
            written.append(target)
        return written
