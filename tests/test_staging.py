from pathlib import Path

from projpack import staging
from projpack.staging import StagedFileSet, StagingCleanup


def test_staged_set_rejects_case_insensitive_duplicates(tmp_path: Path):
    staged = StagedFileSet()
    assert staged.add(tmp_path / "Wood_D.png")
    assert not staged.add(tmp_path / "WOOD_d.PNG")
    assert not staged.add("/elsewhere/wood_d.png")
    assert staged.add(tmp_path / "stone.png")
    assert staged.names() == ["Wood_D.png", "stone.png"]
    assert "C:\\x\\STONE.PNG" in staged
    assert len(staged) == 2


def test_cleanup_removes_staged_files_and_ignores_missing(tmp_path: Path, monkeypatch):
    delays = []
    monkeypatch.setattr(staging.time, "sleep", delays.append)
    staged = StagedFileSet()
    for name in ("a.png", "b.cfg"):
        p = tmp_path / name
        p.write_text("x")
        staged.add(p)
    staged.add(tmp_path / "never_written.png")
    removed = StagingCleanup(delay=0.25).run(staged)
    assert removed == 2
    assert delays == [0.25]
    assert list(tmp_path.iterdir()) == []


def test_cleanup_without_delay_does_not_sleep(tmp_path: Path, monkeypatch):
    delays = []
    monkeypatch.setattr(staging.time, "sleep", delays.append)
    assert StagingCleanup(delay=0).run(StagedFileSet()) == 0
    assert delays == []


def test_cleanup_skips_files_it_did_not_write(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(staging.time, "sleep", lambda s: None)
    original = tmp_path / "wood_d.png"
    original.write_text("user file")
    copy = tmp_path / "wood.json"
    copy.write_text("copy")
    staged = StagedFileSet()
    staged.add(original, owned=False)
    staged.add(copy)
    assert staged.owned() == [copy]
    assert StagingCleanup(delay=0).run(staged) == 1
    assert original.read_text() == "user file"
    assert not copy.exists()
