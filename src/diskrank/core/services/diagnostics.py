from __future__ import annotations

"""
Traversal Diagnostics Service.

Collects branch-local traversal failures reported concurrently by walker
threads and optionally persists them to a plain-text report once the run is
over. Failures are reported here instead of being raised across the stage
boundary.
"""

import logging
import os
import threading
from typing import List

from diskrank.domain.models import TraversalError
from diskrank.infra.fs import safe_mkdir

logger = logging.getLogger(__name__)


class DiagnosticSink:
    """Thread-safe collector for TraversalError values."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._errors: List[TraversalError] = []

    def report(self, error: TraversalError) -> None:
        """Log a traversal failure and retain it for the final summary."""
        logger.warning(f"Traversal failed at '{error.path}': {error.error}")
        with self._lock:
            self._errors.append(error)

    @property
    def errors(self) -> List[TraversalError]:
        with self._lock:
            return list(self._errors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)


def write_error_report(error_output_path: str, errors: List[TraversalError]) -> str:
    """
    Persist collected traversal errors to a dedicated report file.

    Args:
        error_output_path: Target filesystem path for the report.
        errors: Failures encountered during the walk.

    Returns:
        str: The path of the written report, or an empty string if nothing
             was written.
    """
    if not error_output_path or not errors:
        return ""

    ok, err = safe_mkdir(os.path.dirname(os.path.abspath(error_output_path)))
    if not ok:
        logger.error(f"Failed to create report directory for '{error_output_path}': {err}")
        return ""

    try:
        with open(error_output_path, "w", encoding="utf-8") as f:
            f.write("TRAVERSAL ERRORS REPORT:\n")
            f.write("=" * 80 + "\n")
            for item in errors:
                f.write(f"PATH: {item.path}\n")
                f.write(f"ERROR: {item.error}\n")
                f.write("-" * 80 + "\n")
    except OSError as e:
        logger.error(f"Failed to persist error report to '{error_output_path}': {e}")
        return ""

    return error_output_path
