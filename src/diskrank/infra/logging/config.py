from __future__ import annotations

"""
Logging Settings.

Run-level settings for the logging subsystem plus the two level helpers the
CLI needs: mapping `-v`/`--debug` to a level name, and turning a level name
into the numeric threshold. Console records always go to stderr so stdout
carries nothing but the ranking.
"""

import logging
from dataclasses import dataclass
from typing import Optional

DEFAULT_LEVEL = "WARNING"

_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_level(level: Optional[str]) -> int:
    """Resolve a level name (case-insensitive, `WARN` accepted); unknown names mean WARNING."""
    name = str(level or "").strip().upper()
    if name == "WARN":
        name = "WARNING"
    if name not in _LEVEL_NAMES:
        return logging.WARNING
    return getattr(logging, name)


def verbosity_level(*, verbose: bool = False, debug: bool = False) -> str:
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return DEFAULT_LEVEL


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        level: Threshold level name, see `parse_level`.
        console: Emit records on stderr.
        log_file: Optional rotating log file, useful with `--debug` on big trees.
        max_bytes: Rotation threshold in bytes.
        backup_count: Rotated files to keep.
    """
    level: str = DEFAULT_LEVEL
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    console_fmt: str = "diskrank: %(levelname)s: %(message)s"
    # Walker records come from pool threads; keep the thread name on disk
    file_fmt: str = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%dT%H:%M:%S"
