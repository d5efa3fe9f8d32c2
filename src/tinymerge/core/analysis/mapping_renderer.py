from __future__ import annotations

"""
Merged Mapping Renderer.

Walks two mapping trees in lock-step and emits the merged file, header
first, then one line per entry in pre-order. Siblings are visited in
lexicographic order of their canonical keys so the output is deterministic
regardless of input order.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from tinymerge.core.analysis.name_reconciler import NameReconciler
from tinymerge.domain.constants import COLUMN_SEPARATOR, FORMAT_VERSION, NESTING_SEPARATOR
from tinymerge.domain.errors import NamespaceMismatchError
from tinymerge.domain.mapping_models import MappingEntry, MappingFile
from tinymerge.domain.merge_models import MergeStats

logger = logging.getLogger(__name__)

_Pending = Tuple[Optional[MappingEntry], Optional[MappingEntry]]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def merge_namespaces(file_a: MappingFile, file_b: MappingFile) -> List[str]:
    """Return A's namespaces followed by B's labels not already present."""
    merged = list(file_a.namespaces)
    for namespace in file_b.namespaces:
        if namespace not in merged:
            merged.append(namespace)
    return merged


def check_compatible(file_a: MappingFile, file_b: MappingFile) -> None:
    """
    Raises:
        NamespaceMismatchError: If the canonical namespaces differ.
    """
    if file_a.canonical_namespace != file_b.canonical_namespace:
        raise NamespaceMismatchError(file_a.canonical_namespace, file_b.canonical_namespace)


def render_header(namespaces: List[str]) -> str:
    return COLUMN_SEPARATOR.join([FORMAT_VERSION, *namespaces])


def render_merged_lines(
        file_a: MappingFile,
        file_b: MappingFile,
        reconciler: NameReconciler,
        stats: Optional[MergeStats] = None,
) -> Iterator[str]:
    """
    Generate the lines of the merged mapping file.

    Uses an explicit stack so that deeply nested classes cannot exhaust
    the interpreter's recursion limit. An outer class that neither input
    defines gets no line, but everything below it is still visited; names
    of its defined descendants are qualified through the fallback order.

    Args:
        file_a: First parsed input.
        file_b: Second parsed input.
        reconciler: Configured with the merged namespaces and fallback order.
        stats: Optional counters updated while walking.

    Yields:
        str: Header line, then one record line per merged entry.

    Raises:
        NamespaceMismatchError: If the inputs' canonical namespaces differ.
        UnresolvedNameError: If a descendant of an orphan cannot be qualified.
        TinyMergeError: Any reconciliation failure of an entry.
    """
    check_compatible(file_a, file_b)
    stats = stats if stats is not None else MergeStats()
    canonical = file_a.canonical_namespace

    yield render_header(reconciler.namespaces)

    stack: List[_Pending] = []
    _push_children(stack, file_a.root, file_b.root, canonical)

    while stack:
        entry_a, entry_b = stack.pop()

        if _is_defined(entry_a) or _is_defined(entry_b):
            yield reconciler.build_line(entry_a, entry_b)
            stats.record((entry_a or entry_b).kind)
        else:
            # Orphan: no line of its own, its descendants are still merged
            stats.orphans_skipped += 1
            logger.warning(f"Skipping orphan placeholder '{_path_of(entry_a, entry_b, canonical)}' "
                           f"(never defined by either input); its children are still merged.")

        _push_children(stack, entry_a, entry_b, canonical)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _push_children(
        stack: List[_Pending],
        parent_a: Optional[MappingEntry],
        parent_b: Optional[MappingEntry],
        canonical: str,
) -> None:
    """Queue the union of both parents' children, reversed so the smallest key pops first."""
    keys = set()
    if parent_a is not None:
        keys.update(parent_a.child_keys(canonical))
    if parent_b is not None:
        keys.update(parent_b.child_keys(canonical))

    for key in sorted(keys, reverse=True):
        stack.append((
            parent_a.get_child(canonical, key) if parent_a is not None else None,
            parent_b.get_child(canonical, key) if parent_b is not None else None,
        ))


def _is_defined(entry: Optional[MappingEntry]) -> bool:
    return entry is not None and entry.defined


def _path_of(
        entry_a: Optional[MappingEntry],
        entry_b: Optional[MappingEntry],
        canonical: str,
) -> str:
    """Canonical '$'-joined path of an entry, for diagnostics."""
    entry = entry_a if entry_a is not None else entry_b
    segments: List[str] = []
    while entry is not None and entry.parent is not None:
        segments.append(entry.names.get(canonical, "?"))
        entry = entry.parent
    return NESTING_SEPARATOR.join(reversed(segments))
