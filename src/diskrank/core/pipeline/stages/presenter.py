from __future__ import annotations

"""
Snapshot Presenter.

Final pipeline stage. Holds only the most recently received Snapshot and
draws it through a SnapshotRenderer.

- Default mode renders once, after the snapshots channel closes.
- Live mode runs a fixed-period schedule independent of how fast snapshots
  arrive. A tick draws the latest snapshot only if a new one arrived since the
  previous drawing; intermediate snapshots between ticks are dropped.

In both modes the snapshot current at channel closure (the aggregator's final
one) is rendered unconditionally before completion is signalled.
"""

import logging
import queue
import threading
import time
from typing import Optional

from diskrank.core.pipeline.channel import ChannelDrained, ChannelReceiver
from diskrank.core.rendering.base import SnapshotRenderer
from diskrank.domain.models import Snapshot

logger = logging.getLogger(__name__)


class Presenter:
    """
    Args:
        snapshots: Receiver end of the snapshots channel.
        renderer: Drawing backend.
        done: Event set once the presenter has finished (or failed).
        live: Enable periodic redraw while the scan runs.
        refresh_interval: Live redraw period in seconds.
    """

    def __init__(
            self,
            snapshots: ChannelReceiver[Snapshot],
            renderer: SnapshotRenderer,
            done: threading.Event,
            *,
            live: bool = False,
            refresh_interval: float = 0.01,
    ):
        self._snapshots = snapshots
        self._renderer = renderer
        self._done = done
        self.live = live
        self.refresh_interval = refresh_interval

        self.current: Optional[Snapshot] = None
        self.last_rendered: Optional[Snapshot] = None
        self.renders = 0

    def run(self) -> None:
        try:
            if self.live:
                self._run_live()
            else:
                self._run_once()
        except BaseException:
            for _ in self._snapshots:
                pass
            raise
        finally:
            self._done.set()

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    def _run_once(self) -> None:
        for snapshot in self._snapshots:
            self.current = snapshot
        self._render(redraw=False)

    def _run_live(self) -> None:
        interval = self.refresh_interval
        next_tick = time.monotonic() + interval
        dirty = False

        while True:
            timeout = max(0.0, next_tick - time.monotonic())
            try:
                self.current = self._snapshots.get(timeout=timeout)
                dirty = True
            except queue.Empty:
                pass
            except ChannelDrained:
                break

            now = time.monotonic()
            if now < next_tick:
                continue

            if dirty:
                self._render(redraw=True)
                dirty = False
            next_tick += interval
            if next_tick <= now:
                # Skip ticks missed while rendering
                next_tick = now + interval

        self._render(redraw=True)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _render(self, *, redraw: bool) -> None:
        snapshot = self.current if self.current is not None else Snapshot(is_final=True)
        if self.current is None:
            logger.warning("Snapshot stream closed without any snapshot; rendering empty table.")
        self._renderer.render(snapshot, redraw=redraw)
        self.last_rendered = snapshot
        self.renders += 1
