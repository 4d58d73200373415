from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for building directory trees, configs and renderers.
"""

import os
import sys
import threading
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from diskrank.core.rendering.base import SnapshotRenderer  # noqa: E402
from diskrank.domain.config import ScanConfig  # noqa: E402
from diskrank.domain.models import Snapshot  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class RecordingRenderer(SnapshotRenderer):
    """Renderer double that keeps every drawing in order."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Snapshot, bool]] = []
        self._lock = threading.Lock()

    def render(self, snapshot: Snapshot, *, redraw: bool = False) -> None:
        with self._lock:
            self.calls.append((snapshot, redraw))

    @property
    def snapshots(self) -> List[Snapshot]:
        return [s for s, _ in self.calls]


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def recording_renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, int]], Path]:
    """
    Return a factory that materializes {relative_path: size} under tmp_path/root.

    Intermediate directories are created as needed; each file is filled with
    `size` zero bytes.
    """

    def _make(files: Dict[str, int]) -> Path:
        root = tmp_path / "root"
        root.mkdir(exist_ok=True)
        for rel, size in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"\0" * size)
        return root

    return _make


@pytest.fixture
def make_config() -> Callable[..., ScanConfig]:
    """Return a factory for ScanConfig instances with test-friendly defaults."""

    def _make(path: Path, **kwargs) -> ScanConfig:
        params = {"limit": 100, "max_workers": 4, "refresh_interval": 0.005}
        params.update(kwargs)
        return ScanConfig(path=str(path), **params)

    return _make
