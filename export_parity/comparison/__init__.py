"""
Export comparison - classify, normalize and diff two export trees.
"""

from .classifier import classify
from .diff_engine import (
    ABSENT,
    EQUAL,
    DiffResult,
    MapDiff,
    SequenceDiff,
    SetDiff,
    ValueDiff,
    diff,
    iter_divergences,
)
from .diff_reporter import DiffReporter, diff_to_plain
from .findings import (
    ComparisonReport,
    DivergentEntryFinding,
    ExtraEntryFinding,
    MissingEntry,
    ParseErrorFinding,
    UnrecognizedEntryFinding,
)
from .normalizer import ExportNormalizer, normalize, normalize_file
from .orchestrator import compare_archives, compare_export_files, discover_entries

__all__ = [
    "classify",
    "ABSENT",
    "EQUAL",
    "DiffResult",
    "MapDiff",
    "SequenceDiff",
    "SetDiff",
    "ValueDiff",
    "diff",
    "iter_divergences",
    "DiffReporter",
    "diff_to_plain",
    "ComparisonReport",
    "DivergentEntryFinding",
    "ExtraEntryFinding",
    "MissingEntry",
    "ParseErrorFinding",
    "UnrecognizedEntryFinding",
    "ExportNormalizer",
    "normalize",
    "normalize_file",
    "compare_archives",
    "compare_export_files",
    "discover_entries",
]
