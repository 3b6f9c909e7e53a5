"""Diff Reporter - Render comparison reports as text, JSON and Markdown."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

from export_parity.comparison.diff_engine import (
    ABSENT,
    DiffResult,
    MapDiff,
    SequenceDiff,
    SetDiff,
    ValueDiff,
    iter_divergences,
)
from export_parity.comparison.findings import (
    ComparisonReport,
    DivergentEntryFinding,
    ParseErrorFinding,
)
from export_parity.domain.values import sorted_plain

logger = logging.getLogger(__name__)

REPORT_VERSION = "1.0"
ABSENT_LABEL = "<absent>"


def _slot_to_plain(value: Any) -> Any:
    if value is ABSENT:
        return ABSENT_LABEL
    return value.to_plain()


def diff_to_plain(result: DiffResult) -> Any:
    """
    Convert a diff result into plain JSON-compatible data.

    - ValueDiff -> {"left": ..., "right": ...}
    - MapDiff -> {key: nested}
    - SequenceDiff -> {"[index]": nested}
    - SetDiff -> {"left_only": [...], "right_only": [...]}
    - EQUAL -> None
    """
    if isinstance(result, ValueDiff):
        return {"left": _slot_to_plain(result.left), "right": _slot_to_plain(result.right)}
    if isinstance(result, MapDiff):
        return {key: diff_to_plain(nested) for key, nested in result.entries.items()}
    if isinstance(result, SequenceDiff):
        return {f"[{index}]": diff_to_plain(nested) for index, nested in result.entries.items()}
    if isinstance(result, SetDiff):
        return {
            "left_only": sorted_plain(result.left_only),
            "right_only": sorted_plain(result.right_only),
        }
    return None


def format_diff(result: DiffResult) -> str:
    """
    Pretty-print a diff result as indented JSON.

    Map keys are already sorted by the diff engine and sequence indices are
    in numeric order, so the insertion order of diff_to_plain is kept.
    """
    return json.dumps(diff_to_plain(result), indent=2, ensure_ascii=False)


def finding_to_dict(finding: Any) -> Dict[str, Any]:
    """Serialize any finding for the JSON report."""
    data: Dict[str, Any] = {
        "type": finding.finding_type,
        "category": finding.category,
        "path": finding.relative_path,
        "message": finding.describe(),
    }
    if isinstance(finding, DivergentEntryFinding):
        data["kind"] = finding.kind.value
        data["diff"] = diff_to_plain(finding.diff)
    elif isinstance(finding, ParseErrorFinding):
        data["kind"] = finding.kind.value
        data["side"] = finding.side
        data["error"] = finding.message
    return data


def _leaf_summary(leaf: DiffResult) -> Tuple[str, str]:
    if isinstance(leaf, SetDiff):
        return (
            f"only in A: {json.dumps(sorted_plain(leaf.left_only), ensure_ascii=False)}",
            f"only in B: {json.dumps(sorted_plain(leaf.right_only), ensure_ascii=False)}",
        )
    return (
        f"A: {json.dumps(_slot_to_plain(leaf.left), ensure_ascii=False)}",
        f"B: {json.dumps(_slot_to_plain(leaf.right), ensure_ascii=False)}",
    )


class DiffReporter:
    """
    Render comparison reports.

    Responsibilities:
    - Human-readable text with structural and content findings separated
    - JSON artifacts for CI
    - Markdown summaries per run and across runs
    """

    def __init__(self, output_dir: Path | None = None) -> None:
        self.output_dir = Path(output_dir) if output_dir is not None else Path("comparison-results")

    def render(self, report: ComparisonReport, report_format: str = "text") -> str:
        if report_format == "json":
            return self.generate_json_report(report)
        if report_format == "markdown":
            return self.generate_markdown_summary(report)
        return self.render_text(report)

    def render_text(self, report: ComparisonReport) -> str:
        """
        Render a report for terminals and assertion messages.

        Divergent entries show only the diverging subtrees, never the whole
        documents.
        """
        lines = [
            f"Export comparison: {report.verdict}",
            f"  archive A: {report.root_a}",
            f"  archive B: {report.root_b}",
            f"  entries compared: {report.entries_compared}",
        ]

        structural = report.structural_findings
        lines.append("")
        lines.append(f"Structural findings ({len(structural)}):")
        if not structural:
            lines.append("  none")
        for finding in structural:
            lines.append(f"  {finding.finding_type.upper():<13}{finding.relative_path}")

        content = report.content_findings
        lines.append("")
        lines.append(f"Content findings ({len(content)}):")
        if not content:
            lines.append("  none")
        for finding in content:
            if isinstance(finding, DivergentEntryFinding):
                lines.append(f"  DIVERGENT    {finding.relative_path} ({finding.kind.value})")
                for diff_line in format_diff(finding.diff).splitlines():
                    lines.append(f"    {diff_line}")
            else:
                lines.append(
                    f"  PARSE ERROR  {finding.relative_path} (archive {finding.side}): "
                    f"{finding.message}"
                )

        return "\n".join(lines)

    def generate_json_report(self, report: ComparisonReport) -> str:
        """Generate a JSON report for one comparison run."""
        document = {
            "metadata": {
                "generated_at": datetime.now().isoformat(),
                "version": REPORT_VERSION,
                "root_a": report.root_a,
                "root_b": report.root_b,
            },
            "statistics": report.statistics(),
            "structural_findings": [finding_to_dict(f) for f in report.structural_findings],
            "content_findings": [finding_to_dict(f) for f in report.content_findings],
        }
        return json.dumps(document, indent=2, default=str, ensure_ascii=False)

    def generate_markdown_summary(self, report: ComparisonReport) -> str:
        """Generate a Markdown summary with every divergence listed by path."""
        stats = report.statistics()
        md_lines = [
            "# Export Comparison Report",
            f"**Archive A:** `{report.root_a}`",
            f"**Archive B:** `{report.root_b}`",
            f"**Generated:** {datetime.now().isoformat()}",
            "",
            "## Status",
            f"**Verdict:** {stats['verdict']}",
            f"**Entries Compared:** {stats['entries_compared']}",
            f"**Total Findings:** {stats['total_findings']}",
            f"  - Structural: {stats['structural_findings']}",
            f"  - Content: {stats['content_findings']}",
            "",
        ]

        if report.passed:
            md_lines.extend([
                "## Result",
                "✅ **Exports match**",
            ])
        else:
            md_lines.extend(["## Structural Findings", ""])
            if not report.structural_findings:
                md_lines.append("None.")
            for finding in report.structural_findings:
                md_lines.append(f"- **{finding.finding_type.upper()}** `{finding.relative_path}`")

            md_lines.extend(["", "## Content Findings", ""])
            if not report.content_findings:
                md_lines.append("None.")
            for finding in report.content_findings:
                md_lines.append(f"### {finding.relative_path}")
                md_lines.append("")
                if isinstance(finding, ParseErrorFinding):
                    md_lines.append(f"🚨 Parse error in archive {finding.side}: {finding.message}")
                    md_lines.append("")
                    continue
                for path, leaf in iter_divergences(finding.diff):
                    left, right = _leaf_summary(leaf)
                    md_lines.append(f"- **{path or '(document)'}**")
                    md_lines.append(f"  - {left}")
                    md_lines.append(f"  - {right}")
                md_lines.append("")

        md_lines.extend([
            "",
            "---",
            f"*Export Parity Report v{REPORT_VERSION}*",
        ])

        return "\n".join(md_lines)

    def write_reports(self, report: ComparisonReport, name: str) -> Tuple[Path, Path]:
        """
        Write JSON and Markdown reports to the output directory.

        Returns:
            Tuple of (json_path, markdown_path)
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        safe_name = name.replace("/", "_")
        json_path = self.output_dir / f"{safe_name}.json"
        md_path = self.output_dir / f"{safe_name}.md"

        with json_path.open("w", encoding="utf-8") as f:
            f.write(self.generate_json_report(report))

        with md_path.open("w", encoding="utf-8") as f:
            f.write(self.generate_markdown_summary(report))

        logger.info(f"Wrote comparison reports for {name}")
        logger.info(f"  JSON: {json_path}")
        logger.info(f"  Markdown: {md_path}")

        return json_path, md_path

    def generate_aggregate_summary(self, reports: Dict[str, ComparisonReport]) -> str:
        """
        Generate a Markdown summary across several comparison runs.

        Args:
            reports: Comparison reports keyed by run name
        """
        total = len(reports)
        passed = sum(1 for r in reports.values() if r.passed)
        failed = total - passed
        pass_rate = (passed / total * 100) if total else 0.0

        md_lines = [
            "# Export Comparison - Aggregate Summary",
            f"**Generated:** {datetime.now().isoformat()}",
            "",
            "## Overall Results",
            f"- **Comparisons Run:** {total}",
            f"- **Passed:** {passed} ✅",
            f"- **Failed:** {failed} ❌",
            f"- **Pass Rate:** {pass_rate:.1f}%",
            "",
            "## Detailed Results",
            "",
        ]

        for name in sorted(reports):
            report = reports[name]
            status_emoji = "✅" if report.passed else "❌"
            md_lines.append(
                f"{status_emoji} **{name}** "
                f"(Structural: {len(report.structural_findings)}, "
                f"Content: {len(report.content_findings)})"
            )

        md_lines.extend([
            "",
            "---",
            f"*Export Parity Report v{REPORT_VERSION}*",
        ])

        return "\n".join(md_lines)

    def write_aggregate_summary(self, reports: Dict[str, ComparisonReport]) -> Path:
        """Write the aggregate summary to SUMMARY.md."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        summary_path = self.output_dir / "SUMMARY.md"

        with summary_path.open("w", encoding="utf-8") as f:
            f.write(self.generate_aggregate_summary(reports))

        logger.info(f"Wrote aggregate summary: {summary_path}")
        return summary_path
