"""
Comparison findings and the per-run report.

Findings fall into two categories:

- structural: the two archives do not contain the same set of recognized
  entries (missing, extra, unrecognized), pointing at archive-shape regressions
- content: a matched entry differs or cannot be parsed, pointing at data
  regressions
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from export_parity.comparison.diff_engine import DiffResult
from export_parity.domain.entry import EntryKind

STRUCTURAL = "structural"
CONTENT = "content"


@dataclass(frozen=True)
class MissingEntry:
    """Entry present in archive A but not in archive B."""

    relative_path: str
    category: str = field(default=STRUCTURAL, init=False)
    finding_type: str = field(default="missing", init=False)

    def describe(self) -> str:
        return f"Archive B is missing entry '{self.relative_path}'"


@dataclass(frozen=True)
class ExtraEntryFinding:
    """Entry present in archive B that never appeared in archive A."""

    relative_path: str
    category: str = field(default=STRUCTURAL, init=False)
    finding_type: str = field(default="extra", init=False)

    def describe(self) -> str:
        return f"Archive B contains extra entry '{self.relative_path}'"


@dataclass(frozen=True)
class UnrecognizedEntryFinding:
    """Entry matching no classification rule; never silently accepted."""

    relative_path: str
    category: str = field(default=STRUCTURAL, init=False)
    finding_type: str = field(default="unrecognized", init=False)

    def describe(self) -> str:
        return f"Unrecognized file found in archive: '{self.relative_path}'"


@dataclass(frozen=True, eq=False)
class DivergentEntryFinding:
    """Matched, recognized entry whose normalized content differs."""

    relative_path: str
    kind: EntryKind
    diff: DiffResult
    category: str = field(default=CONTENT, init=False)
    finding_type: str = field(default="divergent", init=False)

    def describe(self) -> str:
        return f"Entry '{self.relative_path}' ({self.kind.value}) does not match"


@dataclass(frozen=True)
class ParseErrorFinding:
    """Matched, recognized entry that could not be parsed on one side."""

    relative_path: str
    kind: EntryKind
    side: str
    message: str
    category: str = field(default=CONTENT, init=False)
    finding_type: str = field(default="parse_error", init=False)

    def describe(self) -> str:
        return f"Entry '{self.relative_path}' in archive {self.side} is not valid: {self.message}"


@dataclass
class ComparisonReport:
    """
    Outcome of comparing two extracted archive trees.

    Findings are kept in archive path order. The run passes only when there
    are no findings of any kind.
    """

    root_a: str
    root_b: str
    missing: List[MissingEntry] = field(default_factory=list)
    extra: List[ExtraEntryFinding] = field(default_factory=list)
    unrecognized: List[UnrecognizedEntryFinding] = field(default_factory=list)
    divergent: List[DivergentEntryFinding] = field(default_factory=list)
    parse_errors: List[ParseErrorFinding] = field(default_factory=list)
    entries_compared: int = 0

    @property
    def structural_findings(self) -> List[Any]:
        return [*self.missing, *self.extra, *self.unrecognized]

    @property
    def content_findings(self) -> List[Any]:
        return sorted([*self.divergent, *self.parse_errors], key=lambda f: f.relative_path)

    @property
    def findings(self) -> List[Any]:
        return self.structural_findings + self.content_findings

    @property
    def passed(self) -> bool:
        return not self.findings

    @property
    def verdict(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def statistics(self) -> Dict[str, Any]:
        return {
            "verdict": self.verdict,
            "entries_compared": self.entries_compared,
            "total_findings": len(self.findings),
            "structural_findings": len(self.structural_findings),
            "content_findings": len(self.content_findings),
            "missing": len(self.missing),
            "extra": len(self.extra),
            "unrecognized": len(self.unrecognized),
            "divergent": len(self.divergent),
            "parse_errors": len(self.parse_errors),
        }
