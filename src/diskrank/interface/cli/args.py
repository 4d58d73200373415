from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed argparse
namespace into configuration overrides understood by the domain validator.
"""

import argparse
from typing import Any, Dict

from diskrank.domain.config import DEFAULT_LIMIT
from diskrank.infra.logging import verbosity_level

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the diskrank CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="diskrank",
        description="Report the biggest files under a directory tree.",
    )

    # --- Scan Target ---
    p.add_argument(
        "-p", "--path",
        dest="path",
        default=None,
        help="Defines the target path to search for files and their disk usage",
    )
    p.add_argument(
        "-l", "--limit",
        dest="limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Defines the limit of top biggest files to print out",
    )

    # --- Output ---
    p.add_argument(
        "--live",
        action="store_true",
        help="Enable live output while the scan is running",
    )
    p.add_argument(
        "--interval",
        dest="interval_ms",
        type=float,
        default=None,
        help="Live redraw period in milliseconds (default: 10)",
    )
    p.add_argument(
        "-H", "--human",
        dest="human_readable",
        action="store_true",
        help="Print sizes in binary units (KiB, MiB, ...) instead of bytes",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the final ranking as JSON instead of a table",
    )

    # --- Runtime ---
    p.add_argument(
        "-w", "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Number of concurrent directory traversal workers",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--error-log",
        dest="error_log",
        default=None,
        help="Write unreadable paths to this report file",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostic logs to a rotating file",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Elevate logging verbosity to INFO.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {
        "path": args.path,
        "limit": args.limit,
        "max_workers": args.max_workers,
        "error_log": args.error_log,
    }

    if args.interval_ms is not None:
        overrides["refresh_interval"] = args.interval_ms / 1000.0
    if args.live:
        overrides["live"] = True
    if args.human_readable:
        overrides["human_readable"] = True
    if args.json_output:
        overrides["json_output"] = True

    return overrides


def resolve_log_level(args: argparse.Namespace) -> str:
    """Map verbosity flags to a logging level name."""
    return verbosity_level(verbose=args.verbose, debug=args.debug)
