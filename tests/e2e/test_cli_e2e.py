from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: argument handling, exit codes, and the table or JSON
written to stdout.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "diskrank" / "main.py"


def run_cli(args: List[str]) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH. Terminal width and
    color forcing overrides are removed so output matches a piped run.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    for var in ("COLUMNS", "FORCE_COLOR", "TTY_COMPATIBLE"):
        env.pop(var, None)

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=60,
    )


def _table_sizes(stdout: str) -> List[int]:
    """Extract the Size column of every data row."""
    sizes = []
    for line in stdout.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[-1].isdigit():
            sizes.append(int(parts[-1]))
    return sizes


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    /input
      a (10)  b (5)
      /docs  c (8)  d (1)
      /media/raw  e (20)
      f (3)
    """
    root = tmp_path / "input"
    (root / "docs").mkdir(parents=True)
    (root / "media" / "raw").mkdir(parents=True)
    for rel, size in {"a": 10, "b": 5, "docs/c": 8, "docs/d": 1, "media/raw/e": 20, "f": 3}.items():
        (root / rel).write_bytes(b"x" * size)
    return root


def test_cli_top_three(sample_tree: Path) -> None:
    """TC-01: Scenario A through the real entry point."""
    result = run_cli(["-p", str(sample_tree), "-l", "3"])

    assert result.returncode == 0, result.stderr
    assert "Path" in result.stdout and "Size" in result.stdout
    assert _table_sizes(result.stdout) == [20, 10, 8]
    assert str(sample_tree / "media" / "raw" / "e") in result.stdout


def test_cli_default_limit_lists_everything(sample_tree: Path) -> None:
    result = run_cli(["--path", str(sample_tree)])

    assert result.returncode == 0, result.stderr
    assert _table_sizes(result.stdout) == [20, 10, 8, 5, 3, 1]


def test_cli_empty_tree_prints_header_only(tmp_path: Path) -> None:
    root = tmp_path / "empty"
    root.mkdir()

    result = run_cli(["-p", str(root)])

    assert result.returncode == 0, result.stderr
    assert "Path" in result.stdout
    assert _table_sizes(result.stdout) == []


def test_cli_missing_path_flag_is_fatal() -> None:
    result = run_cli([])

    assert result.returncode == 2
    assert "--path" in result.stderr
    assert result.stdout == ""


def test_cli_nonexistent_path_is_fatal(tmp_path: Path) -> None:
    result = run_cli(["-p", str(tmp_path / "nope")])

    assert result.returncode == 2
    assert "does not exist" in result.stderr


def test_cli_rejects_invalid_limit(sample_tree: Path) -> None:
    result = run_cli(["-p", str(sample_tree), "-l", "0"])

    assert result.returncode == 2
    assert "limit" in result.stderr


def test_cli_live_mode_ends_with_final_table(sample_tree: Path) -> None:
    result = run_cli(["-p", str(sample_tree), "-l", "2", "--live", "--interval", "1"])

    assert result.returncode == 0, result.stderr
    sizes = _table_sizes(result.stdout)
    assert len(sizes) >= 2
    assert sizes[-2:] == [20, 10]


def test_cli_json_output(sample_tree: Path) -> None:
    result = run_cli(["-p", str(sample_tree), "-l", "2", "--json"])

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["root"] == os.path.abspath(str(sample_tree))
    assert [f["size"] for f in data["files"]] == [20, 10]
    assert data["errors"] == []
    assert data["summary"]["files_seen"] == 6


def test_cli_human_sizes(tmp_path: Path) -> None:
    root = tmp_path / "h"
    root.mkdir()
    (root / "kb").write_bytes(b"x" * 2048)

    result = run_cli(["-p", str(root), "-H"])

    assert result.returncode == 0, result.stderr
    assert "2.0 KiB" in result.stdout


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root or on this platform",
)
def test_cli_unreadable_subdirectory_is_not_fatal(sample_tree: Path, tmp_path: Path) -> None:
    """TC-02: Scenario D; partial results and exit code 0."""
    locked = sample_tree / "locked"
    locked.mkdir()
    (locked / "secret").write_bytes(b"x" * 999)
    locked.chmod(0)
    report = tmp_path / "errors.txt"
    try:
        result = run_cli(["-p", str(sample_tree), "-l", "3", "--error-log", str(report)])
    finally:
        locked.chmod(0o755)

    assert result.returncode == 0, result.stderr
    assert _table_sizes(result.stdout) == [20, 10, 8]
    assert str(locked) in result.stderr
    assert str(locked) in report.read_text(encoding="utf-8")


def test_cli_help_message() -> None:
    result = run_cli(["--help"])

    assert result.returncode == 0
    assert "usage: diskrank" in result.stdout


def test_cli_piped_output_keeps_long_paths_whole(tmp_path: Path) -> None:
    root = tmp_path / "deep"
    nested = root / ("a" * 50) / ("b" * 50)
    nested.mkdir(parents=True)
    target = nested / ("c" * 40 + ".bin")
    target.write_bytes(b"x" * 77)
    (root / "small").write_bytes(b"x")

    result = run_cli(["-p", str(root)])

    assert result.returncode == 0, result.stderr
    rows = [line for line in result.stdout.splitlines() if str(target) in line]
    assert len(rows) == 1
    assert rows[0].split()[-1] == "77"
    assert _table_sizes(result.stdout) == [77, 1]
