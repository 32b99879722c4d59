"""Per-operation staging bookkeeping and deferred cleanup."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Iterator, List, Set

from .logging import get_logger
from .reporting import get_reporter
from .utils.paths import base_name

__all__ = ["StagedFileSet", "StagingCleanup", "DEFAULT_CLEANUP_DELAY"]

DEFAULT_CLEANUP_DELAY = 1.0


class StagedFileSet:
    """Archive inputs gathered in the staging directory, in order.

    Base names are tracked case-insensitively; a name can be staged once.
    Only files the operation wrote itself are owned, and only owned files
    are removed by cleanup. A source that already sits in the staging
    directory is archived in place and never deleted.
    """

    def __init__(self) -> None:
        self._paths: List[Path] = []
        self._keys: Set[str] = set()
        self._owned: Set[str] = set()

    @staticmethod
    def key(path: str | Path) -> str:
        return base_name(str(path)).casefold()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self.key(path) in self._keys

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def add(self, path: str | Path, owned: bool = True) -> bool:
        """Record ``path``; returns False if its base name is already staged."""
        k = self.key(path)
        if k in self._keys:
            return False
        self._keys.add(k)
        if owned:
            self._owned.add(k)
        self._paths.append(Path(path))
        return True

    def is_owned(self, path: str | Path) -> bool:
        return self.key(path) in self._owned

    def owned(self) -> List[Path]:
        return [p for p in self._paths if self.key(p) in self._owned]

    def names(self) -> List[str]:
        return [p.name for p in self._paths]


class StagingCleanup:
    """Deletes staged files once the archive handle has been released.

    Closing an archive does not guarantee the OS has let go of the inputs
    on every platform, so a blocking delay precedes deletion.
    """

    def __init__(self, delay: float = DEFAULT_CLEANUP_DELAY):
        self.delay = max(0.0, delay)

    def run(self, staged: StagedFileSet) -> int:
        if self.delay:
            time.sleep(self.delay)
        logger = get_logger()
        removed = 0
        for path in staged.owned():
            try:
                os.remove(path)
            except OSError as e:
                logger.debug("Could not remove staged file %s: %s", path, e)
                continue
            removed += 1
        get_reporter().status(
            f"Cleanup summary: removed={removed} staged={len(staged)}"
        )
        return removed
