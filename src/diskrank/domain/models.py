from __future__ import annotations

"""
Scan Domain Data Models.

Defines the immutable values that flow between pipeline stages (records and
snapshots), the traversal failure descriptor, and the aggregated result
returned to interface layers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

# -----------------------------------------------------------------------------
# STREAM VALUES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileRecord:
    """
    A single (path, size) observation of a regular file.

    Attributes:
        path: Filesystem path as discovered by the walker.
        size: Logical size in bytes (st_size).
    """
    path: str
    size: int


@dataclass(frozen=True)
class Snapshot:
    """
    One ranked top-N result emitted by the aggregator.

    Attributes:
        records: Records sorted by descending size.
        sequence: 1-based emission counter.
        is_final: True only for the snapshot emitted after input closed.
    """
    records: Tuple[FileRecord, ...] = ()
    sequence: int = 0
    is_final: bool = False

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    def sizes(self) -> List[int]:
        return [r.size for r in self.records]


@dataclass(frozen=True)
class TraversalError:
    """
    Describes a directory or entry that could not be listed or stat-ed.

    Attributes:
        path: The path whose processing failed.
        error: Human readable reason.
    """
    path: str
    error: str


# -----------------------------------------------------------------------------
# RUN RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ScanResult:
    """
    Outcome of a complete pipeline execution.

    Attributes:
        ok: True when the pipeline ran to completion.
        root: Root directory that was scanned.
        limit: Number of entries retained (N).
        live: Whether live redraw was active.
        final: The final snapshot.
        errors: Traversal failures reported during the walk.
        files_seen: Number of file records emitted by the walker.
        dirs_seen: Number of directories visited (root included).
        snapshots_emitted: Number of snapshots produced by the aggregator.
        renders: Number of times the presenter drew a table.
        elapsed_seconds: Wall-clock duration of the run.
    """
    ok: bool
    root: str
    limit: int
    live: bool
    final: Snapshot = field(default_factory=Snapshot)
    errors: List[TraversalError] = field(default_factory=list)
    files_seen: int = 0
    dirs_seen: int = 0
    snapshots_emitted: int = 0
    renders: int = 0
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the result into JSON-compatible primitives."""
        return {
            "ok": self.ok,
            "root": self.root,
            "limit": self.limit,
            "files": [{"path": r.path, "size": r.size} for r in self.final],
            "errors": [{"path": e.path, "error": e.error} for e in self.errors],
            "summary": {
                "files_seen": self.files_seen,
                "dirs_seen": self.dirs_seen,
                "snapshots_emitted": self.snapshots_emitted,
                "renders": self.renders,
                "elapsed_seconds": round(self.elapsed_seconds, 3),
            },
        }
