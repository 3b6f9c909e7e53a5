"""
Archive Comparison Orchestrator

Walks two extracted export trees, pairs entries by relative path and runs
classifier -> normalizer -> diff engine on every matched pair. Per-entry
problems are accumulated into one report; only unreadable archive roots abort
the run.
"""

import os
from pathlib import Path
from typing import Dict, Optional, Union

from export_parity.comparison.classifier import classify
from export_parity.comparison.diff_engine import diff
from export_parity.comparison.findings import (
    ComparisonReport,
    DivergentEntryFinding,
    ExtraEntryFinding,
    MissingEntry,
    ParseErrorFinding,
    UnrecognizedEntryFinding,
)
from export_parity.comparison.normalizer import normalize_file
from export_parity.config.settings import Settings
from export_parity.domain.entry import Entry, EntryKind
from export_parity.exceptions import ExtractionError, ParseError
from export_parity.extraction.archive import ArchiveExtractor, is_archive
from export_parity.utils.logger import get_logger, log_operation

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _validate_root(root: PathLike) -> Path:
    path = Path(root)
    if not path.is_dir():
        raise ExtractionError(f"Archive root is not a directory: {root}")
    if not os.access(path, os.R_OK | os.X_OK):
        raise ExtractionError(f"Archive root is not readable: {root}")
    return path


def discover_entries(root: PathLike) -> Dict[str, Entry]:
    """
    Enumerate and classify every path under an archive root.

    Args:
        root: Extracted archive root directory

    Returns:
        Entries keyed by POSIX relative path, in sorted path order

    Raises:
        ExtractionError: If the root or any directory below it cannot be read
    """
    root = _validate_root(root)
    entries: Dict[str, Entry] = {}

    def _on_error(error: OSError) -> None:
        raise ExtractionError(f"Cannot read archive tree {root}: {error}") from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        base = Path(dirpath)
        for name in dirnames:
            relative_path = (base / name).relative_to(root).as_posix()
            entries[relative_path] = Entry(relative_path, EntryKind.DIRECTORY)
        for name in filenames:
            relative_path = (base / name).relative_to(root).as_posix()
            entries[relative_path] = Entry(relative_path, classify(relative_path))

    return dict(sorted(entries.items()))


def _compare_entry(report: ComparisonReport, entry: Entry, root_a: Path, root_b: Path) -> None:
    values = {}
    for side, root in (("A", root_a), ("B", root_b)):
        try:
            values[side] = normalize_file(entry.kind, root / entry.relative_path)
        except ParseError as e:
            logger.warning(
                f"Could not parse '{entry.relative_path}' in archive {side}",
                operation="compare_entry",
                context={"path": entry.relative_path, "side": side},
                error=str(e),
            )
            report.parse_errors.append(
                ParseErrorFinding(entry.relative_path, entry.kind, side, str(e))
            )

    if len(values) < 2:
        return

    result = diff(values["A"], values["B"])
    if not result.is_equal:
        report.divergent.append(DivergentEntryFinding(entry.relative_path, entry.kind, result))


@log_operation("compare_archives", context_keys=("root_a", "root_b"))
def compare_archives(root_a: PathLike, root_b: PathLike) -> ComparisonReport:
    """
    Compare two extracted export trees.

    Args:
        root_a: Root of the reference export
        root_b: Root of the export under test

    Returns:
        ComparisonReport holding every finding

    Raises:
        ExtractionError: If either root is not a readable directory tree
    """
    path_a = _validate_root(root_a)
    path_b = _validate_root(root_b)
    entries_a = discover_entries(path_a)
    entries_b = discover_entries(path_b)

    report = ComparisonReport(root_a=str(path_a), root_b=str(path_b))

    for relative_path, entry in entries_a.items():
        if entry.is_directory:
            continue

        counterpart = entries_b.get(relative_path)
        if counterpart is None or counterpart.is_directory:
            report.missing.append(MissingEntry(relative_path))
            continue

        logger.debug(
            f"Comparing file '{relative_path}'",
            operation="compare_entry",
            context={"path": relative_path, "kind": entry.kind.value},
        )

        if not entry.kind.is_comparable:
            report.unrecognized.append(UnrecognizedEntryFinding(relative_path))
            continue

        report.entries_compared += 1
        _compare_entry(report, entry, path_a, path_b)

    for relative_path, entry in entries_b.items():
        if entry.is_directory:
            continue
        counterpart = entries_a.get(relative_path)
        if counterpart is None or counterpart.is_directory:
            report.extra.append(ExtraEntryFinding(relative_path))

    logger.info(
        f"Export comparison {report.verdict}",
        operation="compare_archives",
        context=report.statistics(),
    )
    return report


def _resolve_tree(path: PathLike, extractor: ArchiveExtractor, label: str) -> Path:
    path = Path(path)
    if path.is_dir():
        return path
    if not is_archive(path):
        raise ExtractionError(f"Not an export archive or directory: {path}")
    return extractor.extract(path, label)


def compare_export_files(
    export_a: PathLike,
    export_b: PathLike,
    settings: Optional[Settings] = None,
) -> ComparisonReport:
    """
    Compare two exports given as archives or already-extracted directories.

    Archives are unpacked into the configured scratch directory, which is
    removed afterwards unless ``settings.keep_scratch`` is set.

    Raises:
        ExtractionError: If an archive cannot be unpacked or a tree is unreadable
    """
    settings = settings or Settings()
    extractor = ArchiveExtractor(settings.scratch_dir)
    try:
        root_a = _resolve_tree(export_a, extractor, "export1")
        root_b = _resolve_tree(export_b, extractor, "export2")
        return compare_archives(root_a=root_a, root_b=root_b)
    finally:
        if extractor.destinations and not settings.keep_scratch:
            extractor.cleanup()
