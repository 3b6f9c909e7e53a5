"""
Archive entry model.

An entry is one path found under an extracted archive root. Entries are
discovered per comparison run and never persisted.
"""

from dataclasses import dataclass
from enum import Enum


class EntryKind(Enum):
    """Semantic type of an archive entry."""

    METADATA = "metadata"
    DATA_RECORD = "data_record"
    UNRECOGNIZED = "unrecognized"
    DIRECTORY = "directory"

    @property
    def is_comparable(self) -> bool:
        """True for kinds the normalizer knows how to load."""
        return self in (EntryKind.METADATA, EntryKind.DATA_RECORD)


@dataclass(frozen=True)
class Entry:
    """
    One path under an archive root.

    Attributes:
        relative_path: POSIX-style path relative to the archive root
        kind: Classification of the path
    """

    relative_path: str
    kind: EntryKind

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY
