"""
Canonical value model.

Parsed export content is converted into exactly one of four immutable cases
before it is compared:

- MapValue: string keys to values, key order irrelevant
- SequenceValue: ordered items, order significant
- SetValue: unordered items, duplicates collapsed
- ScalarValue: string, number, boolean or null

Every case is hashable so that whole records (maps) can be members of a set.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple, Union

ScalarType = Union[str, int, float, bool, None]


class CanonicalValue:
    """Base class for the canonical value cases."""

    type_name = "value"

    def to_plain(self) -> Any:
        """Convert back into plain JSON-compatible Python data."""
        raise NotImplementedError


@dataclass(frozen=True)
class MapValue(CanonicalValue):
    """
    Mapping from string key to canonical value.

    Entries are kept sorted by key so equality and hashing never depend on
    the order the producer wrote the keys in.
    """

    entries: Tuple[Tuple[str, CanonicalValue], ...] = ()

    type_name = "map"

    def __post_init__(self):
        entries = tuple(sorted(self.entries, key=lambda item: item[0]))
        for index in range(1, len(entries)):
            if entries[index][0] == entries[index - 1][0]:
                raise ValueError(f"Duplicate map key: {entries[index][0]!r}")
        object.__setattr__(self, "entries", entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, CanonicalValue]) -> "MapValue":
        return cls(tuple(mapping.items()))

    def as_dict(self) -> Dict[str, CanonicalValue]:
        return dict(self.entries)

    def keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def get(self, key: str, default: Optional[CanonicalValue] = None) -> Optional[CanonicalValue]:
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        return default

    def without(self, key: str) -> "MapValue":
        """Return a copy with ``key`` removed (no-op if absent)."""
        return MapValue(tuple(item for item in self.entries if item[0] != key))

    def replace(self, key: str, value: CanonicalValue) -> "MapValue":
        """Return a copy with ``key`` bound to ``value``."""
        return MapValue(tuple(item for item in self.entries if item[0] != key) + ((key, value),))

    def __contains__(self, key: object) -> bool:
        return any(entry_key == key for entry_key, _ in self.entries)

    def __getitem__(self, key: str) -> CanonicalValue:
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        raise KeyError(key)

    def __len__(self) -> int:
        return len(self.entries)

    def to_plain(self) -> Dict[str, Any]:
        return {key: value.to_plain() for key, value in self.entries}


@dataclass(frozen=True)
class SequenceValue(CanonicalValue):
    """Ordered list of canonical values; position is significant."""

    items: Tuple[CanonicalValue, ...] = ()

    type_name = "sequence"

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[CanonicalValue]:
        return iter(self.items)

    def __getitem__(self, index: int) -> CanonicalValue:
        return self.items[index]

    def to_plain(self) -> list:
        return [item.to_plain() for item in self.items]


@dataclass(frozen=True)
class SetValue(CanonicalValue):
    """Unordered collection of canonical values; duplicates collapse."""

    items: FrozenSet[CanonicalValue] = frozenset()

    type_name = "set"

    def __post_init__(self):
        object.__setattr__(self, "items", frozenset(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[CanonicalValue]:
        return iter(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items

    def to_plain(self) -> list:
        # Sorted by stable encoding so rendered output is deterministic
        return sorted_plain(self.items)


def _scalar_kind(value: Any) -> str:
    if value is None:
        return "null"
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    raise TypeError(f"Unsupported scalar type: {type(value).__name__}")


@dataclass(frozen=True, eq=False)
class ScalarValue(CanonicalValue):
    """
    String, number, boolean or null.

    Numbers compare numerically (1 == 1.0) but a boolean never equals a
    number, unlike plain Python where True == 1.
    """

    value: ScalarType = None

    type_name = "scalar"

    def __post_init__(self):
        _scalar_kind(self.value)

    @property
    def kind(self) -> str:
        return _scalar_kind(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarValue):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def to_plain(self) -> ScalarType:
        return self.value


def stable_dumps(plain: Any) -> str:
    """Deterministic JSON encoding used for ordering rendered collections."""
    return json.dumps(plain, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)


def sorted_plain(values: Iterable[CanonicalValue]) -> list:
    return sorted((value.to_plain() for value in values), key=stable_dumps)


def from_json(obj: Any) -> CanonicalValue:
    """
    Convert parsed JSON data into canonical form.

    dict -> MapValue, list/tuple -> SequenceValue, scalars -> ScalarValue.
    Lists stay ordered; only the normalizer decides what becomes a set.

    Raises:
        TypeError: for values JSON cannot produce
    """
    if isinstance(obj, CanonicalValue):
        return obj
    if isinstance(obj, dict):
        for key in obj:
            if not isinstance(key, str):
                raise TypeError(f"Map keys must be strings, got {type(key).__name__}")
        return MapValue(tuple((key, from_json(value)) for key, value in obj.items()))
    if isinstance(obj, (list, tuple)):
        return SequenceValue(tuple(from_json(item) for item in obj))
    return ScalarValue(obj)
