from __future__ import annotations

"""
Core merge orchestration.

Coordinates one merge run:
1. Validates configuration and input paths.
2. Checks the destination for overwrite conflicts.
3. Parses both inputs completely.
4. Verifies the canonical namespaces agree and computes the merged list.
5. Streams the merged lines into a staged output file.
6. Publishes the output (or discards it on failure / dry run).
"""

import logging
import os
from typing import Any, Dict, List, Optional, TextIO, Tuple

from tinymerge.core.analysis.mapping_parser import read_mapping_file
from tinymerge.core.analysis.mapping_renderer import (
    check_compatible,
    merge_namespaces,
    render_merged_lines,
)
from tinymerge.core.analysis.name_reconciler import NameReconciler
from tinymerge.core.pipeline.components.writer import staged_output, write_lines
from tinymerge.core.pipeline.stages.validator import validate_config
from tinymerge.domain.errors import TinyMergeError
from tinymerge.domain.mapping_models import MappingFile
from tinymerge.domain.merge_models import (
    MergeOptions,
    MergeResult,
    MergeStats,
    create_error_result,
    create_success_result,
)
from tinymerge.infra.fs import find_missing_files

logger = logging.getLogger(__name__)


def merge_mapping_files(
        file_a: MappingFile,
        file_b: MappingFile,
        out: Optional[TextIO],
        options: Optional[MergeOptions] = None,
) -> Tuple[List[str], MergeStats]:
    """
    Merge two parsed mapping files into a text stream.

    Args:
        file_a: First input; its namespaces lead the merged column order.
        file_b: Second input.
        out: Destination stream, or None to merge without writing (validation only).
        options: Fallback order and other run options.

    Returns:
        Tuple[List[str], MergeStats]: Merged namespaces and walk counters.

    Raises:
        TinyMergeError: On any reconciliation failure.
    """
    namespaces = merge_namespaces(file_a, file_b)
    reconciler = NameReconciler(namespaces, options)
    stats = MergeStats()

    lines = render_merged_lines(file_a, file_b, reconciler, stats)
    if out is None:
        for _ in lines:
            pass
    else:
        write_lines(out, lines)

    return namespaces, stats


def run_merge(
        config: Optional[Dict[str, Any]],
        *,
        overwrite: Optional[bool] = None,
        dry_run: Optional[bool] = None,
) -> MergeResult:
    """
    Execute a full merge described by a configuration dictionary.

    Args:
        config: Raw or partial configuration (input_a, input_b, output_path, fallback_order).
        overwrite: Overrides the configured 'overwrite' flag when given.
        dry_run: Overrides the configured 'dry_run' flag when given.

    Returns:
        MergeResult: Status, merged namespaces and statistics.
    """
    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    raw = dict(config or {})
    if overwrite is not None:
        raw["overwrite"] = overwrite
    if dry_run is not None:
        raw["dry_run"] = dry_run

    cfg, warnings = validate_config(raw, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    missing = find_missing_files([cfg["input_a"], cfg["input_b"]])
    if missing:
        msg = f"Input mapping file does not exist: {', '.join(p or '<empty>' for p in missing)}"
        logger.error(msg)
        return create_error_result(FileNotFoundError(msg), cfg)

    output_path = cfg["output_path"]
    if not output_path:
        msg = "No output path configured."
        logger.error(msg)
        return create_error_result(ValueError(msg), cfg)

    # -------------------------------------------------------------------------
    # 2) Overwrite Check
    # -------------------------------------------------------------------------
    if os.path.exists(output_path) and not cfg["overwrite"] and not cfg["dry_run"]:
        msg = f"Output file already exists and overwrite=False: {output_path}"
        logger.warning(msg)
        return create_error_result(FileExistsError(msg), cfg)

    # -------------------------------------------------------------------------
    # 3) Parsing
    # -------------------------------------------------------------------------
    files: List[MappingFile] = []
    for path in (cfg["input_a"], cfg["input_b"]):
        try:
            files.append(read_mapping_file(path))
        except (TinyMergeError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return create_error_result(e, cfg, context=path)
    file_a, file_b = files

    # -------------------------------------------------------------------------
    # 4) Merge & Output
    # -------------------------------------------------------------------------
    namespaces: List[str] = []
    options = MergeOptions.from_fallback(cfg["fallback_order"])
    try:
        check_compatible(file_a, file_b)
        namespaces = merge_namespaces(file_a, file_b)
        _warn_unknown_fallbacks(options, namespaces)

        logger.info("Processing...")
        if cfg["dry_run"]:
            _, stats = merge_mapping_files(file_a, file_b, None, options)
            logger.info("Dry run: merged output discarded.")
        else:
            with staged_output(output_path) as out:
                _, stats = merge_mapping_files(file_a, file_b, out, options)
    except (TinyMergeError, OSError) as e:
        logger.error(f"Merge failed: {e}")
        return create_error_result(e, cfg, namespaces)

    if stats.orphans_skipped:
        logger.warning(f"{stats.orphans_skipped} orphan placeholder(s) skipped.")
    logger.info("Done!")

    return create_success_result(cfg, namespaces, stats)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _warn_unknown_fallbacks(options: MergeOptions, namespaces: List[str]) -> None:
    """Fallback namespaces present in neither input can never supply a name."""
    for ns in options.fallback_order:
        if ns not in namespaces:
            logger.warning(f"Fallback namespace '{ns}' is not declared by either input.")
