from __future__ import annotations

"""
Merge Domain Data Models.

Defines the run options handed to the reconciler, the counters collected
while rendering, and the result object returned to the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tinymerge.domain.mapping_models import EntryKind

# -----------------------------------------------------------------------------
# RUN OPTIONS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MergeOptions:
    """
    Immutable options of one merge.

    Attributes:
        fallback_order: Namespaces consulted, in order, when a name is missing.
    """
    fallback_order: Tuple[str, ...] = ()

    @classmethod
    def from_fallback(cls, values: Optional[Iterable[str]]) -> "MergeOptions":
        """Build options from a raw fallback list, keeping the first occurrence of each label."""
        order: List[str] = []
        for value in values or ():
            if value and value not in order:
                order.append(value)
        return cls(fallback_order=tuple(order))


@dataclass
class MergeStats:
    """Counters filled by the renderer during one walk."""
    entries: Dict[str, int] = field(default_factory=lambda: {
        EntryKind.CLASS.value: 0,
        EntryKind.FIELD.value: 0,
        EntryKind.METHOD.value: 0,
    })
    orphans_skipped: int = 0

    def record(self, kind: EntryKind) -> None:
        self.entries[kind.value] = self.entries.get(kind.value, 0) + 1

    @property
    def total_entries(self) -> int:
        return sum(self.entries.values())

    def as_dict(self) -> Dict[str, Any]:
        return {
            "entries": dict(self.entries),
            "total_entries": self.total_entries,
            "orphans_skipped": self.orphans_skipped,
        }


# -----------------------------------------------------------------------------
# RESULT MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class MergeResult:
    """
    Outcome of a complete merge run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_type: Class name of the failure (e.g. 'NameConflictError').
        input_a: Normalized path of the first input.
        input_b: Normalized path of the second input.
        output_path: Normalized destination path.
        namespaces: Merged namespace list (empty if parsing failed).
        fallback_order: Effective, de-duplicated fallback order.
        dry_run: Whether the output was discarded.
        summary: Execution statistics.
    """
    ok: bool
    error: str

    input_a: str
    input_b: str
    output_path: str

    error_type: str = ""
    namespaces: List[str] = field(default_factory=list)
    fallback_order: List[str] = field(default_factory=list)
    dry_run: bool = False

    summary: Dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: BaseException | str,
        cfg: Dict[str, Any],
        namespaces: Optional[List[str]] = None,
        summary_extra: Optional[Dict[str, Any]] = None,
        context: str = "",
) -> MergeResult:
    """
    Create a failed merge result.

    Args:
        error: The exception (or message) that aborted the run.
        cfg: The validated configuration of the run.
        namespaces: Merged namespaces, if they were computed before the failure.
        summary_extra: Additional metadata for the summary payload.
        context: Prefix for the message, e.g. the input file being parsed.
    """
    error_type = type(error).__name__ if isinstance(error, BaseException) else ""
    message = f"{context}: {error}" if context else str(error)
    return MergeResult(
        ok=False,
        error=message,
        error_type=error_type,
        input_a=cfg.get("input_a", ""),
        input_b=cfg.get("input_b", ""),
        output_path=cfg.get("output_path", ""),
        namespaces=list(namespaces or []),
        fallback_order=list(cfg.get("fallback_order", [])),
        dry_run=bool(cfg.get("dry_run", False)),
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        namespaces: List[str],
        stats: MergeStats,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> MergeResult:
    """Create a successful merge result carrying the renderer's counters."""
    summary = stats.as_dict()
    summary.update(summary_extra or {})
    return MergeResult(
        ok=True,
        error="",
        input_a=cfg.get("input_a", ""),
        input_b=cfg.get("input_b", ""),
        output_path=cfg.get("output_path", ""),
        namespaces=list(namespaces),
        fallback_order=list(cfg.get("fallback_order", [])),
        dry_run=bool(cfg.get("dry_run", False)),
        summary=summary,
    )
