"""Reporter protocol, the process-wide reporter and the ``task`` context.

``Reporter`` owns task bookkeeping; backends only render through the
``task_started`` / ``task_advanced`` / ``task_ended`` hooks. The base class
renders nothing, which makes ``SilentReporter`` a plain subclass.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "STAT_KEYS",
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "SilentReporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
]

# Stats rendered in completion lines, in display order.
STAT_KEYS = ("files", "entries", "rows", "skipped", "bytes")


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def finish(self, status: TaskStatus, stats: Dict[str, Any]) -> None:
        self.status = status
        self.end_time = time.time()
        self.meta.update(stats)

    @property
    def duration(self) -> float:
        return (self.end_time or self.start_time) - self.start_time

    def stats_text(self) -> str:
        stats = [f"{k}={self.meta[k]}" for k in STAT_KEYS if k in self.meta]
        return f" [{' '.join(stats)}]" if stats else ""

    def summary(self, icon: str) -> str:
        counted = f" {self.completed}/{self.total}" if self.total is not None else ""
        return f"{icon} {self.name}{counted} ({self.duration:.2f}s){self.stats_text()}"


_verbosity = 0


def set_verbosity(level: int) -> None:
    global _verbosity
    _verbosity = max(0, level)


def get_verbosity() -> int:
    return _verbosity


class Reporter:
    def __init__(self) -> None:
        self._tasks: Dict[str, TaskRecord] = {}

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        rec = TaskRecord(task_id, name, total, meta=dict(meta))
        self._tasks[task_id] = rec
        self.task_started(rec)

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        self.task_advanced(rec, meta)

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **stats: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.finish(status, stats)
        self.task_ended(rec)

    # Rendering hooks ------------------------------------------------------------
    def task_started(self, rec: TaskRecord) -> None:
        pass

    def task_advanced(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        pass

    def task_ended(self, rec: TaskRecord) -> None:
        pass

    def status(self, message: str, **fields: Any) -> None:
        pass

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        pass

    def section(self, title: str) -> None:
        pass

    def flush(self) -> None:
        pass


class SilentReporter(Reporter):
    """Discards all output (``-r silent``)."""

    def warning(self, message: str, **fields: Any) -> None:
        pass


_active: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _active
    _active = rep


def get_reporter() -> Reporter:
    global _active
    if _active is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _active = PlainReporter(stream=sys.stderr)
    return _active


@contextmanager
def task(
    task_id: str, name: str, total: int | None = None, **meta: Any
) -> Iterator[Dict[str, Any]]:
    """Run a block as a reported task.

    Yields a dict; keys stored into it (see ``STAT_KEYS``) are attached to
    the task's completion record, on failure as well as on success.
    """
    rep = get_reporter()
    rep.start_task(task_id, name, total, **meta)
    stats: Dict[str, Any] = {}
    try:
        yield stats
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED, **stats)
        raise
    rep.end_task(task_id, TaskStatus.SUCCESS, **stats)
