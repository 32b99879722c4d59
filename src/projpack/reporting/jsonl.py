from __future__ import annotations

import json
import sys
from typing import Any, Dict

from .base import Reporter, TaskRecord, get_verbosity

# Status messages starting with one of these prefixes also produce a
# structured "summary" event with their key=value tokens.
SUMMARY_PREFIXES: Dict[str, str] = {
    "export summary": "export",
    "import summary": "import",
    "validate summary": "validate",
    "cleanup summary": "cleanup",
}


def _summary_fields(message: str) -> Dict[str, str]:
    _, _, kv_text = message.partition(":")
    pairs = (token.split("=", 1) for token in kv_text.split() if "=" in token)
    return {k: v for k, v in pairs}


class JsonLinesReporter(Reporter):
    """One JSON object per line, for tooling that drives projpack."""

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream or sys.stdout

    def _emit(self, event: str, **payload: Any) -> None:
        payload["event"] = event
        self.stream.write(json.dumps(payload, sort_keys=True, default=str) + "\n")

    def _message(self, level: str, message: str, **fields: Any) -> None:
        self._emit("status", message=message, level=level, **fields)

    def task_started(self, rec: TaskRecord) -> None:
        self._emit(
            "task_start", id=rec.task_id, name=rec.name, total=rec.total, **rec.meta
        )

    def task_advanced(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        self._emit("task_progress", id=rec.task_id, completed=rec.completed, **meta)

    def task_ended(self, rec: TaskRecord) -> None:
        self._emit(
            "task_end",
            id=rec.task_id,
            status=rec.status.name.lower(),
            completed=rec.completed,
            total=rec.total,
            duration_seconds=rec.duration,
            **rec.meta,
        )

    def status(self, message: str, **fields: Any) -> None:
        lower = message.lower()
        for prefix, kind in SUMMARY_PREFIXES.items():
            if lower.startswith(prefix):
                self._emit(
                    "summary",
                    summary_type=kind,
                    level="info",
                    raw=message,
                    **{**_summary_fields(message), **fields},
                )
                break
        self._message("info", message, **fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._message(f"verbose{level}", message, vlevel=level, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._message("warning", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._message("error", message, **fields)

    def section(self, title: str) -> None:
        self._emit("section", title=title)
