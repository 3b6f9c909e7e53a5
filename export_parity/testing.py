"""
Assertion helper for round-trip tests.

Backup, export and import acceptance tests call this with the export taken
before and after the round trip.
"""

from pathlib import Path
from typing import Optional, Union

from export_parity.comparison.diff_reporter import DiffReporter
from export_parity.comparison.findings import ComparisonReport
from export_parity.comparison.orchestrator import compare_export_files
from export_parity.config.settings import Settings


def assert_exports_equivalent(
    export_a: Union[str, Path],
    export_b: Union[str, Path],
    settings: Optional[Settings] = None,
) -> ComparisonReport:
    """
    Assert that two exports are semantically equivalent.

    Args:
        export_a: Reference export (archive or extracted directory)
        export_b: Export under test (archive or extracted directory)
        settings: Optional settings (scratch directory, keep_scratch)

    Returns:
        The passing ComparisonReport

    Raises:
        AssertionError: With the rendered text report if any finding exists
        ExtractionError: If either export cannot be read
    """
    report = compare_export_files(export_a, export_b, settings)
    if not report.passed:
        raise AssertionError(
            f"Exports '{export_a}' and '{export_b}' don't match!\n"
            f"{DiffReporter().render_text(report)}"
        )
    return report
