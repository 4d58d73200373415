from __future__ import annotations

"""
Core orchestration pipeline.

This module wires the three scan stages together:
1. Walker -> records channel.
2. Aggregator: records -> snapshots channel.
3. Presenter: snapshots -> renderer, then the completion event.

Each stage runs on its own thread and is the sole owner (and closer) of its
output channel, so shutdown propagates strictly downstream:
walker join -> records closed -> final snapshot -> snapshots closed ->
final render -> completion.
"""

import logging
import threading
import time
from typing import Callable, List, Tuple

from diskrank.core.pipeline.channel import make_channel
from diskrank.core.pipeline.context import PipelineContext
from diskrank.core.pipeline.stages.aggregator import Aggregator
from diskrank.core.pipeline.stages.presenter import Presenter
from diskrank.core.pipeline.stages.walker import Walker
from diskrank.domain.models import ScanResult, Snapshot

logger = logging.getLogger(__name__)


def run_pipeline(context: PipelineContext) -> ScanResult:
    """
    Execute a complete scan and block until the final render is done.

    Args:
        context: Validated configuration, renderer and diagnostic sink.

    Returns:
        ScanResult: Final ranking plus run statistics.

    Raises:
        BaseException: The first exception raised by any stage, re-raised
                       once every stage thread has terminated.
    """
    cfg = context.config
    logger.info(f"Seeking top {cfg.limit} biggest files in path '{cfg.path}'")
    started = time.monotonic()

    records_tx, records_rx = make_channel("records")
    snapshots_tx, snapshots_rx = make_channel("snapshots")
    done = threading.Event()

    walker = Walker(cfg.path, records_tx, context.diagnostics, cfg.max_workers)
    aggregator = Aggregator(records_rx, snapshots_tx, cfg.limit)
    presenter = Presenter(
        snapshots_rx,
        context.renderer,
        done,
        live=cfg.live,
        refresh_interval=cfg.refresh_interval,
    )

    failures: List[Tuple[str, BaseException]] = []
    failures_lock = threading.Lock()
    threads = [
        _start_stage("walker", walker.run, failures, failures_lock),
        _start_stage("aggregator", aggregator.run, failures, failures_lock),
        _start_stage("presenter", presenter.run, failures, failures_lock),
    ]

    done.wait()
    for t in threads:
        t.join()

    if failures:
        stage, exc = failures[0]
        logger.error(f"Pipeline aborted by failure in stage '{stage}'")
        raise exc

    final = presenter.last_rendered or Snapshot(is_final=True)
    elapsed = time.monotonic() - started
    logger.info(
        f"Scan complete in {elapsed:.2f}s: {walker.files_seen} files in "
        f"{walker.dirs_seen} directories, {len(context.diagnostics)} traversal errors"
    )

    return ScanResult(
        ok=True,
        root=cfg.path,
        limit=cfg.limit,
        live=cfg.live,
        final=final,
        errors=context.diagnostics.errors,
        files_seen=walker.files_seen,
        dirs_seen=walker.dirs_seen,
        snapshots_emitted=aggregator.snapshots_emitted,
        renders=presenter.renders,
        elapsed_seconds=elapsed,
    )


def _start_stage(
        name: str,
        target: Callable[[], None],
        failures: List[Tuple[str, BaseException]],
        lock: threading.Lock,
) -> threading.Thread:
    """Run a stage on a daemon thread, recording any exception it raises."""

    def runner() -> None:
        try:
            target()
        except BaseException as e:
            logger.critical(f"Stage '{name}' failed: {e!r}", exc_info=True)
            with lock:
                failures.append((name, e))

    thread = threading.Thread(target=runner, name=f"diskrank-{name}", daemon=True)
    thread.start()
    return thread
