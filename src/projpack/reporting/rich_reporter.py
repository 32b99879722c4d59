from __future__ import annotations

import os
from typing import Any, Dict, List

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

TRANSIENT_ENV = "PROJPACK_PROGRESS_TRANSIENT"

_ICONS = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
}


class RichReporter(Reporter):
    """Console reporter with live progress bars for counted tasks.

    With ``PROJPACK_PROGRESS_TRANSIENT=1`` the bars disappear once done and
    the completion lines are printed together when the display stops.
    """

    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console(stderr=True, highlight=False)
        self.transient = os.getenv(TRANSIENT_ENV, "0").lower() in ("1", "true", "yes")
        self.progress: Progress | None = None
        self._bars: Dict[str, TaskID] = {}
        self._pending: List[str] = []

    def _display(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(),
                TextColumn("{task.fields[name]}"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                console=self.console,
                transient=self.transient,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def task_started(self, rec: TaskRecord) -> None:
        # Uncounted tasks only get a completion line.
        if rec.total is not None:
            self._bars[rec.task_id] = self._display().add_task(
                "", total=rec.total, name=rec.name
            )

    def task_advanced(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        bar = self._bars.get(rec.task_id)
        if bar is not None and self.progress is not None:
            self.progress.update(bar, completed=rec.completed)

    def task_ended(self, rec: TaskRecord) -> None:
        bar = self._bars.pop(rec.task_id, None)
        if bar is not None and self.progress is not None:
            self.progress.update(bar, completed=rec.total)
        line = rec.summary(_ICONS.get(rec.status, ""))
        if self.transient and self.progress is not None:
            self._pending.append(line)
        else:
            self.console.print(line)
        if not self._bars:
            self.flush()

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {message}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self.console.print(f"[cyan]VERB{level}[/]: {message}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {message}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress is None:
            return
        try:
            self.progress.stop()
        finally:
            self.progress = None
            if self._pending:
                self.console.print("\n".join(self._pending))
                self._pending.clear()
