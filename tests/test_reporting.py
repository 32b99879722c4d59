from __future__ import annotations

import io
import json

import pytest

from projpack.reporting import (
    JsonLinesReporter,
    PlainReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    task,
)


@pytest.fixture
def restore_reporter():
    previous = get_reporter()
    yield
    set_reporter(previous)


def _events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_summary_event(restore_reporter):
    out = io.StringIO()
    rep = JsonLinesReporter(stream=out)
    rep.status("Export summary: archive=demo.hlmp.zip entries=6 materials=1")
    summary = _events(out)[0]
    assert summary["event"] == "summary"
    assert summary["summary_type"] == "export"
    assert summary["entries"] == "6"
    assert summary["archive"] == "demo.hlmp.zip"


def test_task_stats_attached_on_success(restore_reporter):
    out = io.StringIO()
    set_reporter(JsonLinesReporter(stream=out))
    with task("export.archive", "Write archive", total=2) as stats:
        get_reporter().advance("export.archive", current_item="a.png")
        stats["entries"] = 2
    end = _events(out)[-1]
    assert end["event"] == "task_end"
    assert end["status"] == "success"
    assert end["entries"] == 2
    assert end["completed"] == 1


def test_task_marks_failure_and_reraises(restore_reporter):
    out = io.StringIO()
    set_reporter(JsonLinesReporter(stream=out))
    with pytest.raises(RuntimeError):
        with task("import.extract", "Extract archive") as stats:
            stats["files"] = 1
            raise RuntimeError("boom")
    end = _events(out)[-1]
    assert end["status"] == "failed"
    assert end["files"] == 1


def test_plain_reporter_prints_stats(restore_reporter):
    out = io.StringIO()
    set_reporter(PlainReporter(stream=out, use_color=False))
    with task("export.manifests", "Project manifests") as stats:
        stats["rows"] = 3
        stats["ignored"] = "x"
    line = out.getvalue().strip()
    assert "Project manifests" in line
    assert line.endswith("[rows=3]")


def test_silent_reporter_tracks_tasks_quietly(restore_reporter, capsys):
    set_reporter(SilentReporter())
    with task("import.manifests", "Project manifests", total=1) as stats:
        get_reporter().advance("import.manifests")
        get_reporter().warning("nothing shown")
        stats["rows"] = 4
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""
