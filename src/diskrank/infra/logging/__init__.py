from __future__ import annotations

from .config import LoggingConfig, parse_level, verbosity_level
from .core import (
    configure_logging,
    get_logger,
    shutdown_logging,
)
from .core import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR
from .handlers import _HANDLER_TAG_ATTR

__all__ = [
    "LoggingConfig",
    "configure_logging",
    "get_logger",
    "parse_level",
    "shutdown_logging",
    "verbosity_level",
]
