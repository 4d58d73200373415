from __future__ import annotations

"""
Scan Configuration Domain.

Holds the default runtime configuration and the validator that turns an
untrusted dictionary (CLI overrides merged onto defaults) into an immutable
ScanConfig. Validation failures that make a run impossible raise
ConfigurationError before any pipeline stage is constructed; recoverable
oddities are coerced and reported as warnings.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from diskrank.domain.errors import ConfigurationError
from diskrank.infra.fs import normalize_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEFAULT_LIMIT = 100
DEFAULT_REFRESH_INTERVAL = 0.01  # seconds
DEFAULT_MAX_WORKERS = min(32, (os.cpu_count() or 1) + 4)


@dataclass(frozen=True)
class ScanConfig:
    """
    Validated, immutable run configuration.

    Attributes:
        path: Absolute root directory to scan.
        limit: Number of top entries to retain and report (N).
        live: Enable throttled live redraw while scanning.
        max_workers: Size of the traversal worker pool.
        refresh_interval: Live redraw period in seconds.
        human_readable: Render sizes with binary units instead of raw bytes.
        error_log: Optional path for the traversal error report.
        json_output: Print the final ranking as JSON instead of a table.
    """
    path: str
    limit: int = DEFAULT_LIMIT
    live: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    human_readable: bool = False
    error_log: Optional[str] = None
    json_output: bool = False


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "path": "",
        "limit": DEFAULT_LIMIT,
        "live": False,
        "max_workers": DEFAULT_MAX_WORKERS,
        "refresh_interval": DEFAULT_REFRESH_INTERVAL,
        "human_readable": False,
        "error_log": None,
        "json_output": False,
    }


# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def validate_config(config: Dict[str, Any]) -> Tuple[ScanConfig, List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Missing keys are filled from the defaults. The root path must point to an
    existing directory.

    Args:
        config: Raw configuration data.

    Returns:
        Tuple[ScanConfig, List[str]]: The validated config and any warnings.

    Raises:
        ConfigurationError: If the configuration cannot produce a valid run.
    """
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Invalid config type: expected dict, received {type(config).__name__}."
        )

    warnings: List[str] = []
    merged: Dict[str, Any] = get_default_config()
    merged.update({k: v for k, v in config.items() if v is not None})

    raw_path = merged.get("path")
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise ConfigurationError("argument `--path` to seek biggest files required")

    path = normalize_path(raw_path)
    if not os.path.exists(path):
        raise ConfigurationError(f"Input path does not exist: {path}")
    if not os.path.isdir(path):
        raise ConfigurationError(f"Input path is not a directory: {path}")

    limit = _as_int(merged.get("limit"), "limit")
    if limit < 1:
        raise ConfigurationError(f"Invalid field 'limit': must be >= 1, received {limit}.")

    max_workers = _as_int(merged.get("max_workers"), "max_workers")
    if max_workers < 1:
        raise ConfigurationError(
            f"Invalid field 'max_workers': must be >= 1, received {max_workers}."
        )

    refresh_interval = _as_float(merged.get("refresh_interval"), "refresh_interval")
    if refresh_interval <= 0:
        raise ConfigurationError(
            f"Invalid field 'refresh_interval': must be > 0, received {refresh_interval}."
        )

    live = bool(merged.get("live"))
    json_output = bool(merged.get("json_output"))
    if live and json_output:
        warnings.append("Live redraw is disabled when JSON output is requested.")
        live = False

    error_log = merged.get("error_log")
    if error_log is not None:
        error_log = normalize_path(str(error_log)) or None

    cfg = ScanConfig(
        path=path,
        limit=limit,
        live=live,
        max_workers=max_workers,
        refresh_interval=refresh_interval,
        human_readable=bool(merged.get("human_readable")),
        error_log=error_log,
        json_output=json_output,
    )
    logger.debug(f"Configuration resolved: {cfg}")
    return cfg, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_int(value: Any, field: str) -> int:
    """Coerce integer-like input, rejecting booleans and garbage."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid field '{field}': expected int, received bool.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigurationError(
        f"Invalid field '{field}': expected int, received {type(value).__name__}."
    )


def _as_float(value: Any, field: str) -> float:
    """Coerce numeric input into a float."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid field '{field}': expected number, received bool.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise ConfigurationError(
        f"Invalid field '{field}': expected number, received {type(value).__name__}."
    )
