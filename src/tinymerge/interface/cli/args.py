from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the merge command and translates the
parsed argparse namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the TinyMerge CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="tinymerge",
        description=(
            "Merge two tiny v1 mapping files into one file carrying the union "
            "of their namespaces."
        ),
    )

    # --- Path Management ---
    p.add_argument("input_a", help="First mapping file; its namespaces come first.")
    p.add_argument("input_b", help="Second mapping file.")
    p.add_argument("output", help="Destination of the merged mapping file.")
    p.add_argument(
        "fallback",
        nargs="*",
        default=[],
        help="Namespaces consulted, in order, to fill names missing in both inputs.",
    )

    # --- Runtime Constraints and Safety ---
    p.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace the output file if it already exists.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and merge both inputs without writing the output.",
    )

    # --- Configuration Sources ---
    p.add_argument(
        "--profile",
        default=None,
        help="Apply a saved profile from the configuration file.",
    )
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Read configuration from this JSON file instead of the user data directory.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--log-file",
        nargs="?",
        const="",
        default=None,
        help="Also write a DEBUG trace to this file (default location if no path given).",
    )
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only report warnings and errors.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the merge result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Flags that were not given are left out so they do not mask persisted
    values; an empty fallback list likewise keeps a profile's order.
    """
    overrides: Dict[str, Any] = {
        "input_a": args.input_a,
        "input_b": args.input_b,
        "output_path": args.output,
    }

    if args.fallback:
        overrides["fallback_order"] = list(args.fallback)
    if args.overwrite:
        overrides["overwrite"] = True
    if args.dry_run:
        overrides["dry_run"] = True

    return overrides
