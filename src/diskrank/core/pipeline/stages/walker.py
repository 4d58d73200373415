from __future__ import annotations

"""
Concurrent Directory Walker.

First pipeline stage. Lists the root directory, emits one FileRecord per
non-directory entry and fans out one traversal task per subdirectory onto a
bounded thread pool. A shared TaskTracker counts outstanding tasks across the
whole (dynamically growing) task tree; the records channel is closed only once
that count drops to zero.

Failures are branch-local: an OSError while listing a directory or stat-ing
one of its entries stops that directory's task, is reported to the diagnostic
sink, and leaves every other task running. Symbolic links are followed and
cycles are not detected.
"""

import logging
import os
import stat
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional

from diskrank.core.pipeline.channel import ChannelSender
from diskrank.core.services.diagnostics import DiagnosticSink
from diskrank.domain.errors import PipelineInvariantError
from diskrank.domain.models import FileRecord, TraversalError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# TRANSITIVE JOIN
# -----------------------------------------------------------------------------

class TaskTracker:
    """
    Outstanding-task counter for a dynamically spawned task tree.

    A parent registers each child before it finishes itself, so the count can
    only reach zero once the root and all of its descendants have completed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending = 0
        self._idle = threading.Event()
        self._idle.set()

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    def spawn(self) -> None:
        with self._lock:
            self._pending += 1
            self._idle.clear()

    def finish(self) -> None:
        with self._lock:
            if self._pending <= 0:
                raise PipelineInvariantError("task finished more times than spawned")
            self._pending -= 1
            if self._pending == 0:
                self._idle.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until no task is outstanding. Returns False on timeout."""
        return self._idle.wait(timeout)


# -----------------------------------------------------------------------------
# WALKER STAGE
# -----------------------------------------------------------------------------

class Walker:
    """
    Recursively enumerates a directory tree into a records channel.

    Args:
        root: Absolute path of the directory to scan.
        records: Sender end of the records channel; closed by `run()`.
        diagnostics: Sink for branch-local traversal failures.
        max_workers: Upper bound on concurrently running traversal tasks.
    """

    def __init__(
            self,
            root: str,
            records: ChannelSender[FileRecord],
            diagnostics: DiagnosticSink,
            max_workers: int,
    ):
        self.root = root
        self._records = records
        self._diagnostics = diagnostics
        self._max_workers = max_workers
        self._tracker = TaskTracker()

        self._stats_lock = threading.Lock()
        self.files_seen = 0
        self.dirs_seen = 0
        self._failures: List[BaseException] = []

    def run(self) -> None:
        """
        Walk the whole tree, then close the records channel.

        Raises:
            BaseException: The first unexpected (non-OSError) exception raised
                           by a traversal task, after the channel is closed.
        """
        logger.info(f"Starting walk at: {self.root}")
        executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="diskrank-walk",
        )
        try:
            self._spawn(executor, self.root)
            self._tracker.wait()
        finally:
            executor.shutdown(wait=True)
            self._records.close()

        logger.debug(
            f"Walk finished: {self.files_seen} files, {self.dirs_seen} directories, "
            f"{len(self._diagnostics)} errors"
        )
        if self._failures:
            raise self._failures[0]

    # -------------------------------------------------------------------------
    # Task management
    # -------------------------------------------------------------------------

    def _spawn(self, executor: ThreadPoolExecutor, path: str) -> None:
        self._tracker.spawn()
        try:
            future = executor.submit(self._walk_dir, executor, path)
        except BaseException:
            self._tracker.finish()
            raise
        future.add_done_callback(self._on_task_done)

    def _on_task_done(self, future: Future) -> None:
        exc = future.exception()
        if exc is None:
            return
        logger.critical(f"Traversal task crashed: {exc!r}", exc_info=exc)
        with self._stats_lock:
            self._failures.append(exc)

    # -------------------------------------------------------------------------
    # Traversal task
    # -------------------------------------------------------------------------

    def _walk_dir(self, executor: ThreadPoolExecutor, path: str) -> None:
        """Process one directory. Always releases its tracker slot."""
        try:
            logger.debug(f"Processing path {path}")
            with self._stats_lock:
                self.dirs_seen += 1

            try:
                names = sorted(os.listdir(path))
            except OSError as e:
                self._diagnostics.report(TraversalError(path=path, error=str(e)))
                return

            for name in names:
                entry_path = os.path.join(path, name)
                try:
                    st = os.stat(entry_path)
                except OSError as e:
                    # Stop this branch; already spawned children keep going
                    self._diagnostics.report(TraversalError(path=entry_path, error=str(e)))
                    return

                if stat.S_ISDIR(st.st_mode):
                    self._spawn(executor, entry_path)
                    continue

                self._records.put(FileRecord(path=entry_path, size=st.st_size))
                with self._stats_lock:
                    self.files_seen += 1
        finally:
            self._tracker.finish()
