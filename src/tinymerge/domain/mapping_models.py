from __future__ import annotations

"""
Mapping Tree Data Models.

Provides the node type of a parsed tiny mapping file. Each node holds the
symbol's local name per namespace and indexes its children under every
namespace they are named in, so a child can be looked up by any of its names.
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from tinymerge.domain.constants import CLASS_MARKER, FIELD_MARKER, METHOD_MARKER
from tinymerge.domain.errors import DuplicateEntryError, UnknownEntryKindError

# -----------------------------------------------------------------------------
# ENTRY KINDS
# -----------------------------------------------------------------------------

class EntryKind(enum.Enum):
    """Kind of a tree node. ROOT is synthetic and never appears in a file."""
    ROOT = "ROOT"
    CLASS = CLASS_MARKER
    FIELD = FIELD_MARKER
    METHOD = METHOD_MARKER

    @classmethod
    def from_marker(cls, marker: str, line_no: Optional[int] = None) -> "EntryKind":
        """
        Map a record marker token to its kind.

        Raises:
            UnknownEntryKindError: For anything but CLASS, FIELD or METHOD.
        """
        if marker == cls.ROOT.value:
            raise UnknownEntryKindError(marker, line_no)
        try:
            return cls(marker)
        except ValueError:
            raise UnknownEntryKindError(marker, line_no) from None


# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class MappingEntry:
    """
    One symbol of a mapping file (class, field or method) or the root.

    Attributes:
        kind: Node kind.
        raw_prefix: Marker plus structural tokens of the source line, emitted verbatim.
        names: Namespace label -> local (innermost) name.
        children: Namespace label -> lookup key -> child entry.
        parent: Back-reference to the owning entry, None for the root.
        is_placeholder: True for outer classes only known from a nesting path.
    """
    kind: EntryKind
    raw_prefix: str
    names: Dict[str, str] = field(default_factory=dict)
    children: Dict[str, Dict[str, "MappingEntry"]] = field(default_factory=dict, repr=False)
    parent: Optional["MappingEntry"] = field(default=None, repr=False)
    is_placeholder: bool = False

    @property
    def is_class(self) -> bool:
        return self.kind is EntryKind.CLASS

    @property
    def defined(self) -> bool:
        """True once a record of an input file has provided this entry's data."""
        return not self.is_placeholder and bool(self.names)

    def add_child(self, child: MappingEntry, name_suffix: str = "") -> None:
        """
        Attach a child under every (namespace, name + suffix) key it carries.

        Binding an entry again under a key it already owns is a no-op, which
        is how a filled-in placeholder gets its new names registered. Blank
        names are kept on the entry but never become lookup keys.

        Args:
            child: Entry to attach.
            name_suffix: Disambiguator appended to each name (member descriptors).

        Raises:
            DuplicateEntryError: If a key is already bound to another entry.
        """
        keys: List[Tuple[str, str]] = [
            (namespace, name + name_suffix) for namespace, name in child.names.items() if name
        ]

        # Validate everything first so a failed attach leaves the table untouched
        for namespace, key in keys:
            bound = self.children.get(namespace, {}).get(key)
            if bound is not None and bound is not child:
                raise DuplicateEntryError(namespace, key)

        child.parent = self
        for namespace, key in keys:
            self.children.setdefault(namespace, {})[key] = child

    def get_child(self, namespace: str, key: str) -> Optional[MappingEntry]:
        return self.children.get(namespace, {}).get(key)

    def child_keys(self, namespace: str) -> List[str]:
        """Return every key recorded for this entry's children under a namespace."""
        return list(self.children.get(namespace, {}).keys())


@dataclass(frozen=True)
class MappingFile:
    """
    A fully parsed mapping file.

    Attributes:
        namespaces: Namespace labels in header order; the first is canonical.
        root: Synthetic root entry holding the top-level classes.
        source: Human-readable origin (path) used in log and error messages.
    """
    namespaces: Tuple[str, ...]
    root: MappingEntry
    source: str = "<memory>"

    @property
    def namespace_count(self) -> int:
        return len(self.namespaces)

    @property
    def canonical_namespace(self) -> str:
        return self.namespaces[0]
