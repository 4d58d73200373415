from __future__ import annotations

"""
Base Definitions for Snapshot Rendering.

Provides the abstract interface the presenter draws through, so the pipeline
stays independent of any particular terminal library.
"""

from abc import ABC, abstractmethod

from diskrank.domain.models import Snapshot

TABLE_HEADERS = ("Path", "Size")


class SnapshotRenderer(ABC):
    """
    Abstract sink for ranked snapshots.
    """

    @abstractmethod
    def render(self, snapshot: Snapshot, *, redraw: bool = False) -> None:
        """
        Draw a snapshot as a two-column (Path, Size) table.

        Args:
            snapshot: The ranking to display.
            redraw: If True, replace the previous drawing instead of appending.
        """
        pass


class NullRenderer(SnapshotRenderer):
    """Discards drawings; used when the result is reported another way (JSON)."""

    def render(self, snapshot: Snapshot, *, redraw: bool = False) -> None:
        return None
