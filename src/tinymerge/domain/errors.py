from __future__ import annotations

"""
Merge Error Taxonomy.

Every failure raised by the parser, the reconciler or the merge engine
derives from TinyMergeError. All of them are fatal for a run; the engine
converts them into failed MergeResult objects.
"""

from typing import Optional


class TinyMergeError(Exception):
    """Base class for all mapping parse and merge failures."""


# -----------------------------------------------------------------------------
# PARSING ERRORS
# -----------------------------------------------------------------------------

class InvalidHeaderError(TinyMergeError):
    """The first line is missing, malformed, or not a 'v1' header."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)


class UnknownEntryKindError(TinyMergeError):
    """A record line starts with a kind marker other than CLASS/FIELD/METHOD."""

    def __init__(self, marker: str, line_no: Optional[int] = None):
        self.marker = marker
        self.line_no = line_no
        where = f" (line {line_no})" if line_no is not None else ""
        super().__init__(f"Unknown entry kind '{marker}'{where}")


class MalformedRecordError(TinyMergeError):
    """A record line has fewer columns than its kind and the header require."""

    def __init__(self, message: str, line_no: Optional[int] = None):
        self.line_no = line_no
        where = f"Line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{message}")


class DuplicateEntryError(TinyMergeError):
    """Two distinct entries claim the same (namespace, name) key under one parent."""

    def __init__(self, namespace: str, name: str):
        self.namespace = namespace
        self.name = name
        super().__init__(f"Duplicate entry: ({namespace}, {name})")


# -----------------------------------------------------------------------------
# MERGE ERRORS
# -----------------------------------------------------------------------------

class HeaderMismatchError(TinyMergeError):
    """Two entries at the same tree position carry different record prefixes."""

    def __init__(self, header_a: str, header_b: str):
        self.header_a = header_a
        self.header_b = header_b
        super().__init__(f"Header mismatch: {header_a!r} vs {header_b!r}")


class NameConflictError(TinyMergeError):
    """Both inputs assert different names for one namespace of one entry."""

    def __init__(self, namespace: str, name_a: str, name_b: str):
        self.namespace = namespace
        self.name_a = name_a
        self.name_b = name_b
        super().__init__(f"Name conflict in '{namespace}': {name_a} vs {name_b}")


class UnresolvedNameError(TinyMergeError):
    """No name could be produced for a namespace, even through the fallback order."""

    def __init__(self, namespace: str, context: str = ""):
        self.namespace = namespace
        detail = f" for {context}" if context else ""
        super().__init__(f"Unresolved name in '{namespace}'{detail}")


class NamespaceMismatchError(TinyMergeError):
    """The two inputs do not share the same canonical (first) namespace."""

    def __init__(self, canonical_a: str, canonical_b: str):
        self.canonical_a = canonical_a
        self.canonical_b = canonical_b
        super().__init__(
            f"Canonical namespace mismatch: '{canonical_a}' vs '{canonical_b}'"
        )
