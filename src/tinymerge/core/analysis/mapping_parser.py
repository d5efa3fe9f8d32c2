from __future__ import annotations

"""
Tiny v1 Mapping Parser.

Builds the in-memory MappingFile tree from the line-oriented, tab-separated
tiny format. Outer classes referenced only through a '$' nesting path are
synthesized as placeholders and filled in if their own record shows up later.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from tinymerge.core.pipeline.components.reader import stream_file_content
from tinymerge.domain.constants import (
    CLASS_MARKER,
    COLUMN_SEPARATOR,
    COMMENT_PREFIX,
    FORMAT_VERSION,
    MIN_HEADER_TOKENS,
    NESTING_SEPARATOR,
)
from tinymerge.domain.errors import (
    DuplicateEntryError,
    InvalidHeaderError,
    MalformedRecordError,
)
from tinymerge.domain.mapping_models import EntryKind, MappingEntry, MappingFile

logger = logging.getLogger(__name__)

_BOM = "\ufeff"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def read_mapping_file(file_path: str) -> MappingFile:
    """
    Parse a mapping file from disk.

    Args:
        file_path: Path to a tiny v1 file.

    Returns:
        MappingFile: The parsed tree.

    Raises:
        TinyMergeError: On any grammar or structure violation.
        OSError: If the file cannot be read.
    """
    logger.info(f"Reading {file_path}")
    return parse_mapping_lines(stream_file_content(file_path), source=file_path)


def parse_mapping_text(text: str, source: str = "<memory>") -> MappingFile:
    """Parse mapping content already held in memory."""
    return parse_mapping_lines(text.splitlines(), source=source)


def parse_mapping_lines(lines: Iterable[str], source: str = "<memory>") -> MappingFile:
    """
    Build a MappingFile from an iterable of raw lines.

    Args:
        lines: Header line followed by record lines (terminators optional).
        source: Label used in diagnostics.

    Returns:
        MappingFile: The parsed tree.
    """
    iterator = iter(lines)
    namespaces = _parse_header(next(iterator, None), source)
    root = MappingEntry(EntryKind.ROOT, "")
    counters: Counter = Counter()

    for line_no, raw_line in enumerate(iterator, start=2):
        line = raw_line.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith(COMMENT_PREFIX):
            continue
        kind = _parse_record(root, namespaces, line, line_no, counters)
        counters[kind.value] += 1

    logger.debug(
        f"Parsed {source}: {counters[EntryKind.CLASS.value]} classes, "
        f"{counters[EntryKind.FIELD.value]} fields, "
        f"{counters[EntryKind.METHOD.value]} methods, "
        f"{counters['placeholders']} placeholders created."
    )
    return MappingFile(namespaces=tuple(namespaces), root=root, source=source)


def split_nested(name: str) -> List[str]:
    """
    Split a '$'-nested class name into its segments.

    Trailing empty segments are dropped ('Outer$' yields ['Outer']), but at
    least one segment is always returned.
    """
    segments = name.split(NESTING_SEPARATOR)
    while len(segments) > 1 and not segments[-1]:
        segments.pop()
    return segments


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _parse_header(header_line: Optional[str], source: str) -> List[str]:
    """Validate the 'v1<TAB>ns...' header and return its namespace labels."""
    if header_line is None:
        raise InvalidHeaderError(f"Empty mapping file: {source}", source)

    tokens = [t.strip() for t in header_line.strip().lstrip(_BOM).split(COLUMN_SEPARATOR)]
    if len(tokens) < MIN_HEADER_TOKENS or tokens[0] != FORMAT_VERSION:
        raise InvalidHeaderError(f"Invalid header in {source}: {header_line.strip()!r}", source)

    namespaces = tokens[1:]
    if any(not ns for ns in namespaces):
        raise InvalidHeaderError(f"Empty namespace label in header of {source}", source)
    if len(set(namespaces)) != len(namespaces):
        raise InvalidHeaderError(f"Duplicate namespace label in header of {source}", source)
    return namespaces


def _parse_record(
        root: MappingEntry,
        namespaces: List[str],
        line: str,
        line_no: int,
        counters: Counter,
) -> EntryKind:
    """Insert one record line into the tree and return its kind."""
    tokens = [t.strip() for t in line.split(COLUMN_SEPARATOR)]
    kind = EntryKind.from_marker(tokens[0], line_no)
    count = len(namespaces)
    canonical = namespaces[0]

    # CLASS: marker + names (the first name doubles as the path token)
    # FIELD/METHOD: marker + owner + descriptor + names
    required = 1 + count if kind is EntryKind.CLASS else 3 + count
    if len(tokens) < required:
        raise MalformedRecordError(
            f"{kind.value} record needs {required} columns, found {len(tokens)}", line_no
        )

    prefix = COLUMN_SEPARATOR.join(tokens[:len(tokens) - count])
    names = _collect_names(namespaces, tokens[len(tokens) - count:])
    if not names.get(canonical):
        raise MalformedRecordError(f"Missing '{canonical}' name", line_no)

    path = split_nested(tokens[1])
    outer = path[:-1] if kind is EntryKind.CLASS else path
    parent = _descend(root, canonical, outer, counters)

    if kind is not EntryKind.CLASS:
        parent.add_child(MappingEntry(kind, prefix, names), tokens[2])
        return kind

    if names[canonical] != path[-1]:
        raise MalformedRecordError(
            f"Class path '{tokens[1]}' does not end in '{names[canonical]}'", line_no
        )

    existing = parent.get_child(canonical, path[-1])
    if existing is None:
        parent.add_child(MappingEntry(kind, prefix, names))
        return kind

    if not (existing.is_class and existing.is_placeholder):
        raise DuplicateEntryError(canonical, path[-1])

    # Fill in the placeholder created by an earlier nested record
    existing.raw_prefix = prefix
    existing.names = names
    existing.is_placeholder = False
    parent.add_child(existing)
    return kind


def _collect_names(namespaces: List[str], columns: List[str]) -> Dict[str, str]:
    """Map each namespace to the innermost segment of its column; an empty column stays ''."""
    return {
        namespace: split_nested(column)[-1]
        for namespace, column in zip(namespaces, columns)
    }


def _descend(
        root: MappingEntry,
        canonical: str,
        segments: List[str],
        counters: Counter,
) -> MappingEntry:
    """Walk the outer-class path, creating placeholders for unknown classes."""
    parent = root
    for segment in segments:
        nxt = parent.get_child(canonical, segment)
        if nxt is None:
            nxt = MappingEntry(
                EntryKind.CLASS,
                CLASS_MARKER,
                names={canonical: segment},
                is_placeholder=True,
            )
            parent.add_child(nxt)
            counters["placeholders"] += 1
        parent = nxt
    return parent
