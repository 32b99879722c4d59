from __future__ import annotations

import sys
from typing import Any, Dict

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

_ICONS = {TaskStatus.SUCCESS: "✔", TaskStatus.FAILED: "✖"}


class PlainReporter(Reporter):
    """Line-oriented reporter for logs and non-interactive terminals."""

    def __init__(self, stream=None, use_color: bool | None = None):
        super().__init__()
        self.stream = stream or sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")

    def _tagged(self, color: str, tag: str, message: str) -> None:
        if self.use_color:
            tag = f"\x1b[{color}m{tag}\x1b[0m"
        self._write(f"{tag}: {message}")

    def task_advanced(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        # Per-item lines only at -v
        if get_verbosity() < 1:
            return
        item = meta.get("current_item") or f"item#{rec.completed}"
        total = "?" if rec.total is None else rec.total
        self._write(f"   · {rec.name}: {item} ({rec.completed}/{total})")

    def task_ended(self, rec: TaskRecord) -> None:
        self._write(" " + rec.summary(_ICONS.get(rec.status, "?")))

    def status(self, message: str, **fields: Any) -> None:
        self._tagged("32", "INFO", message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._tagged("36", f"VERB{level}", message)

    def warning(self, message: str, **fields: Any) -> None:
        self._tagged("33", "WARN", message)

    def error(self, message: str, **fields: Any) -> None:
        self._tagged("31", "ERROR", message)

    def section(self, title: str) -> None:
        self._write(f"\n[{title}]")
