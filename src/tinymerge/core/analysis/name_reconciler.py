from __future__ import annotations

"""
Per-Entry Name Reconciliation.

Given the entries found at the same tree position in both inputs, produces
the merged output line: one value per merged namespace, rebuilt into a fully
qualified '$'-nested name for classes, cross-filled from the other input and
from the fallback namespaces where a value is missing.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from tinymerge.domain.constants import COLUMN_SEPARATOR, NESTING_SEPARATOR
from tinymerge.domain.errors import (
    HeaderMismatchError,
    NameConflictError,
    UnresolvedNameError,
)
from tinymerge.domain.mapping_models import MappingEntry
from tinymerge.domain.merge_models import MergeOptions

logger = logging.getLogger(__name__)


class NameReconciler:
    """
    Reconciles pairs of entries (either side may be absent) into output lines.

    The reconciler is stateless between calls; the namespace list and the
    fallback order are fixed at construction.
    """

    def __init__(self, namespaces: Sequence[str], options: Optional[MergeOptions] = None):
        if not namespaces:
            raise ValueError("At least one namespace is required.")
        self.namespaces: List[str] = list(namespaces)
        self.options = options or MergeOptions()

    @property
    def fallback_order(self) -> Sequence[str]:
        return self.options.fallback_order

    # -------------------------------------------------------------------------
    # NAME RESOLUTION
    # -------------------------------------------------------------------------

    @staticmethod
    def local_name(entry: Optional[MappingEntry], namespace: str) -> Optional[str]:
        if entry is None:
            return None
        return entry.names.get(namespace)

    def qualify(
            self,
            entry: Optional[MappingEntry],
            other: Optional[MappingEntry],
            namespace: str,
            name: Optional[str],
    ) -> Optional[str]:
        """
        Rebuild the fully qualified name of a class, outermost segment first.

        Climbs the ancestor chain of 'entry' and, in lock-step, of 'other'
        (its counterpart in the other input, or 'entry' itself when absent).
        Each ancestor contributes its name in 'namespace', taken from 'entry'
        first, then 'other', then the fallback namespaces in order.
        Non-class entries and missing or blank names are returned unchanged.

        Raises:
            UnresolvedNameError: If an ancestor has no non-blank name at all.
        """
        if entry is None or not name or not entry.is_class:
            return name

        side: Optional[MappingEntry] = entry.parent
        other_side: Optional[MappingEntry] = (other or entry).parent
        qualified = name

        while side is not None and side.is_class:
            segment = self._ancestor_segment(side, other_side, namespace)
            if segment is None:
                raise UnresolvedNameError(namespace, f"outer class of '{qualified}'")
            qualified = f"{segment}{NESTING_SEPARATOR}{qualified}"
            side = side.parent
            other_side = other_side.parent if other_side is not None else None

        return qualified

    def resolve(
            self,
            a: Optional[MappingEntry],
            b: Optional[MappingEntry],
            namespace: str,
    ) -> Optional[str]:
        """
        Resolve one namespace's value from both inputs, without fallback.

        A blank column yields to a non-blank value from the other input and
        is returned as '' only when neither side has anything better.
        None means the namespace is missing on both sides.

        Raises:
            NameConflictError: If both inputs provide different non-blank values.
        """
        candidate_a = self.qualify(a, b, namespace, self.local_name(a, namespace))
        candidate_b = self.qualify(b, a, namespace, self.local_name(b, namespace))

        if candidate_a and candidate_b and candidate_a != candidate_b:
            raise NameConflictError(namespace, candidate_a, candidate_b)
        if candidate_a:
            return candidate_a
        if candidate_b:
            return candidate_b
        return candidate_a if candidate_a is not None else candidate_b

    def resolve_with_fallback(
            self,
            a: Optional[MappingEntry],
            b: Optional[MappingEntry],
            namespace: str,
    ) -> str:
        """
        Resolve a namespace's value, substituting the first fallback namespace that has one.

        Missing and blank values are both filled from the fallback order. A
        blank column with no fallback to fill it is kept blank.

        Raises:
            NameConflictError: If the inputs disagree on any consulted namespace.
            UnresolvedNameError: If the namespace is missing and no fallback resolves.
        """
        value = self.resolve(a, b, namespace)
        if value:
            return value

        for fallback in self.fallback_order:
            filled = self.resolve(a, b, fallback)
            if filled:
                logger.debug(f"Filled '{namespace}' from '{fallback}': {filled}")
                return filled

        if value is not None:
            return value
        raise UnresolvedNameError(namespace, self._describe(a, b))

    # -------------------------------------------------------------------------
    # LINE CONSTRUCTION
    # -------------------------------------------------------------------------

    def header_for(self, a: Optional[MappingEntry], b: Optional[MappingEntry]) -> str:
        """
        Pick the record prefix for a merged entry.

        Prefixes of two defined entries must match exactly. A placeholder
        side carries no record of its own and defers to the defined side.

        Raises:
            HeaderMismatchError: On incompatible kinds or prefixes.
        """
        if a is None and b is None:
            raise ValueError("Cannot build a header without any entry.")
        if a is None:
            return b.raw_prefix
        if b is None:
            return a.raw_prefix

        if a.kind is not b.kind:
            raise HeaderMismatchError(a.raw_prefix, b.raw_prefix)
        if a.defined and b.defined and a.raw_prefix != b.raw_prefix:
            raise HeaderMismatchError(a.raw_prefix, b.raw_prefix)

        if a.defined or not b.defined:
            return a.raw_prefix
        return b.raw_prefix

    def build_line(self, a: Optional[MappingEntry], b: Optional[MappingEntry]) -> str:
        """Assemble 'prefix<TAB>value...' over the merged namespace list."""
        columns = [self.header_for(a, b)]
        columns.extend(self.resolve_with_fallback(a, b, ns) for ns in self.namespaces)
        return COLUMN_SEPARATOR.join(columns)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _ancestor_segment(
            self,
            side: MappingEntry,
            other_side: Optional[MappingEntry],
            namespace: str,
    ) -> Optional[str]:
        for candidate in self._lookup_order(namespace):
            for entry in (side, other_side):
                name = self.local_name(entry, candidate)
                if name:
                    return name
        return None

    def _lookup_order(self, namespace: str) -> Iterable[str]:
        yield namespace
        yield from self.fallback_order

    def _describe(self, a: Optional[MappingEntry], b: Optional[MappingEntry]) -> str:
        entry = a if a is not None else b
        if entry is None:
            return ""
        canonical = self.local_name(a, self.namespaces[0]) or self.local_name(b, self.namespaces[0])
        return f"{entry.kind.value} '{canonical}'"
