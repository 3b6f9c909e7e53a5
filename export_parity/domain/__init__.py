"""Domain models - canonical values and archive entries."""

from .entry import Entry, EntryKind
from .values import (
    CanonicalValue,
    MapValue,
    ScalarValue,
    SequenceValue,
    SetValue,
    from_json,
)

__all__ = [
    "Entry",
    "EntryKind",
    "CanonicalValue",
    "MapValue",
    "ScalarValue",
    "SequenceValue",
    "SetValue",
    "from_json",
]
