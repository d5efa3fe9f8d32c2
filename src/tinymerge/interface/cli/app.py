from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration layering
(defaults, persisted state, profile, command-line overrides), merge
execution and result rendering.
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from tinymerge.core.pipeline.engine import run_merge
from tinymerge.core.pipeline.stages.validator import validate_config
from tinymerge.domain.config import get_default_config, load_config
from tinymerge.domain.merge_models import MergeResult
from tinymerge.infra.fs import find_missing_files
from tinymerge.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
    shutdown_logging,
)
from tinymerge.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on merge failure, 2 on missing input, 130 on interrupt.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_file = args.log_file
    if log_file == "":
        log_file = get_default_log_path()
    configure_logging(LoggingConfig.from_flags(args.debug, args.quiet, log_file))

    try:
        return _run(args)
    finally:
        shutdown_logging()


def _run(args: argparse.Namespace) -> int:
    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 1. Resolve base configuration (Default vs Persistent state)
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(profile=args.profile, config_path=args.config_path)

    # 2. Merge command-line overrides, then validate
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 3. Pre-flight input verification
    missing = find_missing_files([clean_conf["input_a"], clean_conf["input_b"]])
    if missing:
        for path in missing:
            msg = f"Input path does not exist: {path}"
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    # 4. Merge execution
    try:
        result = run_merge(clean_conf)
    except KeyboardInterrupt:
        logger.warning("Merge interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.critical(f"Unexpected failure during merge: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 5. Output rendering
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge known, non-None override values into the base configuration."""
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: MergeResult) -> None:
    if not result.ok:
        label = f"{result.error_type}: " if result.error_type else ""
        print(f"ERROR: {label}{result.error}", file=sys.stderr)
        return

    summary = result.summary
    if result.dry_run:
        print("DRY RUN: merge succeeded, nothing written.")
    else:
        print(f"Merged mapping written to: {result.output_path}")

    print(f"Namespaces: {', '.join(result.namespaces)}")
    if result.fallback_order:
        print(f"Fallback order: {', '.join(result.fallback_order)}")

    for kind, count in summary.get("entries", {}).items():
        print(f"  - {kind.lower()} entries: {count}")

    orphans = summary.get("orphans_skipped", 0)
    if orphans:
        print(f"  - orphan placeholders skipped: {orphans}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
