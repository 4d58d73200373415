from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of command-line
overrides onto the default configuration, validation, pipeline execution and
result reporting. Configuration problems are fatal and reported before any
pipeline stage starts; unreadable subtrees are only reported and never change
the exit code.
"""

import json
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console

from diskrank.core.pipeline.context import PipelineContext
from diskrank.core.pipeline.engine import run_pipeline
from diskrank.core.rendering.base import NullRenderer, SnapshotRenderer
from diskrank.core.rendering.table import TableRenderer
from diskrank.core.services.diagnostics import write_error_report
from diskrank.domain.config import ScanConfig, get_default_config, validate_config
from diskrank.domain.errors import ConfigurationError
from diskrank.infra.logging import LoggingConfig, configure_logging, get_logger
from diskrank.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase (argparse exits with code 2 on malformed flags)
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    logging_conf = LoggingConfig(
        level=cli_args.resolve_log_level(args),
        console=True,
        log_file=args.log_file,
    )
    configure_logging(logging_conf, force=True)

    # 3. Merge overrides and validate before any stage is built
    raw_conf = _merge_config(get_default_config(), cli_args.args_to_overrides(args))
    try:
        cfg, warnings = validate_config(raw_conf)
    except ConfigurationError as e:
        logger.debug(f"Configuration rejected: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 4. Pipeline execution phase
    context = PipelineContext(config=cfg, renderer=_build_renderer(cfg))
    try:
        result = run_pipeline(context)
    except KeyboardInterrupt:
        print("Scan interrupted by user.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Scan failed: {e}", exc_info=True)
        print(f"ERROR: Scan failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 5. Reporting phase
    if cfg.json_output:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))

    if cfg.error_log:
        written = write_error_report(cfg.error_log, result.errors)
        if written:
            logger.info(f"Traversal error report written to: {written}")

    if result.errors:
        logger.warning(
            f"{len(result.errors)} path(s) could not be read; results cover the readable tree only."
        )

    return EXIT_OK

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys with non-None values are merged.

    Args:
        base: The default configuration dictionary.
        overrides: Values from the command line.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in base:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


def _build_renderer(cfg: ScanConfig) -> SnapshotRenderer:
    if cfg.json_output:
        return NullRenderer()
    return TableRenderer(Console(highlight=False), human_readable=cfg.human_readable)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
