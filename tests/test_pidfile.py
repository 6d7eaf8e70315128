from __future__ import annotations

from pathlib import Path

from proctree.pidfile import read_pid_from_file


def test_missing_file_returns_none(tmp_path: Path) -> None:
    assert read_pid_from_file(tmp_path / "nope.pid") is None


def test_reads_first_line_only(tmp_path: Path) -> None:
    p = tmp_path / "task.pid"
    p.write_text("1234\nignored\n", encoding="utf-8")
    assert read_pid_from_file(p) == "1234"
    assert read_pid_from_file(str(p)) == "1234"


def test_single_line_without_newline(tmp_path: Path) -> None:
    p = tmp_path / "task.pid"
    p.write_text("77", encoding="utf-8")
    assert read_pid_from_file(p) == "77"


def test_empty_file_gives_empty_string(tmp_path: Path) -> None:
    p = tmp_path / "task.pid"
    p.touch()
    assert read_pid_from_file(p) == ""


def test_unreadable_path_returns_none(tmp_path: Path) -> None:
    # A directory exists but cannot be read as a file.
    assert read_pid_from_file(tmp_path) is None
