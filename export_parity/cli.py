#!/usr/bin/env python3
"""
Command-line entry point for comparing two exports.

Usage:
    export-parity compare EXPORT_A EXPORT_B [--config settings.yaml]
        [--format text|json|markdown] [--output-dir DIR]
        [--scratch-dir DIR] [--keep-scratch] [--log-level LEVEL]

Exit codes:
    0 - exports are equivalent
    1 - findings reported
    2 - configuration or extraction error
"""

import argparse
import sys
from typing import List, Optional

from export_parity.comparison.diff_reporter import DiffReporter
from export_parity.comparison.orchestrator import compare_export_files
from export_parity.config.settings import ConfigurationError, Settings
from export_parity.exceptions import ExtractionError
from export_parity.extraction.archive import archive_stem
from export_parity.utils.logger import configure_logging

EXIT_PASS = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="export-parity",
        description="Verify that two data exports are semantically equivalent",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser("compare", help="Compare two exports")
    compare.add_argument("export_a", help="Reference export (.tar.gz or extracted directory)")
    compare.add_argument("export_b", help="Export under test (.tar.gz or extracted directory)")
    compare.add_argument("--config", help="YAML settings file")
    compare.add_argument("--format", dest="report_format", help="text, json or markdown")
    compare.add_argument("--output-dir", dest="results_dir", help="Write report files here")
    compare.add_argument("--scratch-dir", dest="scratch_dir", help="Where archives are unpacked")
    compare.add_argument(
        "--keep-scratch",
        dest="keep_scratch",
        action="store_true",
        default=None,
        help="Keep unpacked archives after the run",
    )
    compare.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def run_compare(args: argparse.Namespace) -> int:
    overrides = {
        "report_format": args.report_format,
        "results_dir": args.results_dir,
        "scratch_dir": args.scratch_dir,
        "keep_scratch": args.keep_scratch,
        "log_level": args.log_level,
    }
    if args.results_dir:
        overrides["write_reports"] = True

    try:
        settings = Settings.load(config_path=args.config, overrides=overrides)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    configure_logging(settings.log_level)

    try:
        report = compare_export_files(args.export_a, args.export_b, settings)
    except ExtractionError as e:
        print(f"Extraction error: {e}", file=sys.stderr)
        return EXIT_ERROR

    reporter = DiffReporter(output_dir=settings.results_path)
    print(reporter.render(report, settings.report_format))

    if settings.write_reports:
        name = f"{archive_stem(args.export_a)}-vs-{archive_stem(args.export_b)}"
        reporter.write_reports(report, name)

    return EXIT_PASS if report.passed else EXIT_FINDINGS


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "compare":
        return run_compare(args)

    parser.error(f"Unknown command: {args.command}")
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
