from __future__ import annotations

"""
Streaming Top-N Aggregator.

Second pipeline stage. Keeps a working buffer of at most N+1 records; every
time it fills up, the buffer is stable-sorted by descending size, truncated
back to N and published as a Snapshot. Because the retained N are always the
true top-N of everything seen so far, each compaction only has to rank them
against the newest arrivals, which costs one sort per N records.

When the input closes, the (at most N) survivors are sorted and published once
more as the final snapshot, then the snapshots channel is closed.
"""

import logging
from typing import Iterable, List, Tuple

from diskrank.core.pipeline.channel import ChannelReceiver, ChannelSender
from diskrank.domain.models import FileRecord, Snapshot

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PURE SELECTION
# -----------------------------------------------------------------------------

def _rank(buffer: List[FileRecord]) -> None:
    """Sort in place by descending size; equal sizes keep buffer order."""
    buffer.sort(key=lambda r: r.size, reverse=True)


def select_top(records: Iterable[FileRecord], limit: int) -> Tuple[FileRecord, ...]:
    """
    Fold a record stream through the same compaction the stage uses.

    Args:
        records: Records in arrival order.
        limit: Number of entries to retain (N).

    Returns:
        Tuple[FileRecord, ...]: The top-N ranking, largest first.
    """
    buffer: List[FileRecord] = []
    for record in records:
        buffer.append(record)
        if len(buffer) > limit:
            _rank(buffer)
            del buffer[limit:]
    _rank(buffer)
    return tuple(buffer)


# -----------------------------------------------------------------------------
# AGGREGATOR STAGE
# -----------------------------------------------------------------------------

class Aggregator:
    """
    Maintains the running top-N over the records channel.

    Args:
        records: Receiver end of the records channel.
        snapshots: Sender end of the snapshots channel; closed by `run()`.
        limit: Number of entries to retain (N).
    """

    def __init__(
            self,
            records: ChannelReceiver[FileRecord],
            snapshots: ChannelSender[Snapshot],
            limit: int,
    ):
        self._records = records
        self._snapshots = snapshots
        self.limit = limit
        self.snapshots_emitted = 0
        self.records_consumed = 0

    def run(self) -> None:
        buffer: List[FileRecord] = []
        try:
            for record in self._records:
                self.records_consumed += 1
                buffer.append(record)
                if len(buffer) <= self.limit:
                    continue

                _rank(buffer)
                del buffer[self.limit:]
                self._emit(buffer, is_final=False)

            _rank(buffer)
            self._emit(buffer, is_final=True)
            logger.debug(
                f"Aggregation finished: {self.records_consumed} records, "
                f"{self.snapshots_emitted} snapshots"
            )
        except BaseException:
            # Keep the walker from blocking forever on a dead consumer
            for _ in self._records:
                pass
            raise
        finally:
            self._snapshots.close()

    def _emit(self, buffer: List[FileRecord], *, is_final: bool) -> None:
        self.snapshots_emitted += 1
        self._snapshots.put(
            Snapshot(records=tuple(buffer), sequence=self.snapshots_emitted, is_final=is_final)
        )
