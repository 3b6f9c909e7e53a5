"""
Structural diff engine over canonical values.

The comparison is recursive and case-by-case:

- different value cases (map vs sequence, ...) diverge as a literal pair
- maps diverge per key, with one-sided keys compared against ABSENT
- sequences diverge per index, positionally, up to the longer length
- sets diverge as (left-only, right-only) element sets
- scalars diverge as a literal pair

A divergent result never contains an entry for a subtree that compares
equal, so every leaf of the result is an actual point of divergence.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, Tuple, Union

from export_parity.domain.values import (
    CanonicalValue,
    MapValue,
    ScalarValue,
    SequenceValue,
    SetValue,
)


class _Absent:
    """Marker for a map key or sequence slot that exists on one side only."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<absent>"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()

Slot = Union[CanonicalValue, _Absent]


class DiffResult:
    """Base class for diff outcomes."""

    @property
    def is_equal(self) -> bool:
        return False


class Equal(DiffResult):
    """Both operands compare equal."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_equal(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "EQUAL"


EQUAL = Equal()


@dataclass(frozen=True)
class ValueDiff(DiffResult):
    """Literal (left, right) pair: scalar mismatch, shape mismatch or absent slot."""

    left: Slot
    right: Slot


@dataclass(frozen=True)
class MapDiff(DiffResult):
    """Per-key divergences; only diverging keys are present."""

    entries: Dict[str, DiffResult] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceDiff(DiffResult):
    """Per-index divergences; only diverging indices are present."""

    entries: Dict[int, DiffResult] = field(default_factory=dict)
    left_length: int = 0
    right_length: int = 0


@dataclass(frozen=True)
class SetDiff(DiffResult):
    """Elements found on only one side."""

    left_only: FrozenSet[CanonicalValue] = frozenset()
    right_only: FrozenSet[CanonicalValue] = frozenset()


def diff(a: CanonicalValue, b: CanonicalValue) -> DiffResult:
    """
    Compare two canonical values.

    Args:
        a: Left operand
        b: Right operand

    Returns:
        EQUAL, or a divergent DiffResult describing only what differs
    """
    if type(a) is not type(b):
        return ValueDiff(a, b)

    if isinstance(a, MapValue):
        return _diff_maps(a, b)
    if isinstance(a, SequenceValue):
        return _diff_sequences(a, b)
    if isinstance(a, SetValue):
        return _diff_sets(a, b)
    if isinstance(a, ScalarValue):
        return EQUAL if a == b else ValueDiff(a, b)

    raise TypeError(f"Unsupported canonical value: {type(a).__name__}")


def _diff_slots(a: Slot, b: Slot) -> DiffResult:
    if a is ABSENT or b is ABSENT:
        return ValueDiff(a, b)
    return diff(a, b)


def _diff_maps(a: MapValue, b: MapValue) -> DiffResult:
    left = a.as_dict()
    right = b.as_dict()
    entries: Dict[str, DiffResult] = {}

    for key in sorted(set(left) | set(right)):
        result = _diff_slots(left.get(key, ABSENT), right.get(key, ABSENT))
        if not result.is_equal:
            entries[key] = result

    return MapDiff(entries) if entries else EQUAL


def _diff_sequences(a: SequenceValue, b: SequenceValue) -> DiffResult:
    entries: Dict[int, DiffResult] = {}

    for index in range(max(len(a), len(b))):
        left = a[index] if index < len(a) else ABSENT
        right = b[index] if index < len(b) else ABSENT
        result = _diff_slots(left, right)
        if not result.is_equal:
            entries[index] = result

    if not entries:
        return EQUAL
    return SequenceDiff(entries, left_length=len(a), right_length=len(b))


def _diff_sets(a: SetValue, b: SetValue) -> DiffResult:
    left_only = a.items - b.items
    right_only = b.items - a.items
    if not left_only and not right_only:
        return EQUAL
    return SetDiff(frozenset(left_only), frozenset(right_only))


def iter_divergences(result: DiffResult, path: str = "") -> Iterator[Tuple[str, DiffResult]]:
    """
    Walk a diff result and yield (path, leaf) for every point of divergence.

    Leaves are ValueDiff and SetDiff instances. Paths use dotted keys and
    bracketed indices, e.g. ``data.resources`` or ``parameters[2]``.
    """
    if isinstance(result, MapDiff):
        for key, nested in result.entries.items():
            yield from iter_divergences(nested, f"{path}.{key}" if path else key)
    elif isinstance(result, SequenceDiff):
        for index, nested in result.entries.items():
            yield from iter_divergences(nested, f"{path}[{index}]")
    elif not result.is_equal:
        yield path, result
