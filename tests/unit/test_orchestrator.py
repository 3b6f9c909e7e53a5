"""
Unit tests for the comparison orchestrator (export_parity/comparison/orchestrator.py)

Tests covering:
- Entry discovery and classification
- Missing, extra and unrecognized entries
- Divergent entries and parse errors
- Directories never producing findings
- Fatal errors for unreadable roots
"""

import json
import os
import sys

import pytest

from export_parity.comparison.diff_engine import SetDiff, ValueDiff
from export_parity.comparison.orchestrator import compare_archives, discover_entries
from export_parity.domain.entry import EntryKind
from export_parity.exceptions import ExtractionError

METADATA = "puppetdb-bak/export-metadata.json"
CATALOG_1 = "puppetdb-bak/catalogs/host-1.example.com.json"
CATALOG_2 = "puppetdb-bak/catalogs/host-2.example.com.json"


@pytest.fixture
def identical_trees(export_factory):
    """Two trees with the same content and different metadata timestamps."""
    tree_a = export_factory.build_tree("a", metadata=export_factory.metadata("2026-10-17T09:00:00Z"))
    tree_b = export_factory.build_tree("b", metadata=export_factory.metadata("2026-10-17T09:05:00Z"))
    return tree_a, tree_b


class TestDiscoverEntries:
    """Tests for discover_entries()."""

    def test_classifies_all_paths(self, export_factory):
        root = export_factory.build_tree("a", extra_files={"puppetdb-bak/notes.txt": "hi"})
        entries = discover_entries(root)

        assert entries["puppetdb-bak"].kind is EntryKind.DIRECTORY
        assert entries["puppetdb-bak/catalogs"].kind is EntryKind.DIRECTORY
        assert entries[METADATA].kind is EntryKind.METADATA
        assert entries[CATALOG_1].kind is EntryKind.DATA_RECORD
        assert entries["puppetdb-bak/notes.txt"].kind is EntryKind.UNRECOGNIZED

    def test_sorted_by_path(self, export_factory):
        entries = discover_entries(export_factory.build_tree("a"))
        assert list(entries) == sorted(entries)

    def test_missing_root(self, tmp_path):
        with pytest.raises(ExtractionError, match="not a directory"):
            discover_entries(tmp_path / "nowhere")

    def test_file_as_root(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text("{}")
        with pytest.raises(ExtractionError):
            discover_entries(path)


class TestCompareArchives:
    """Tests for compare_archives()."""

    def test_identical_trees_pass(self, identical_trees):
        report = compare_archives(*identical_trees)

        assert report.passed
        assert report.verdict == "PASS"
        assert report.findings == []
        assert report.entries_compared == 3

    def test_tree_compared_with_itself(self, export_factory):
        root = export_factory.build_tree("a")
        assert compare_archives(root, root).passed

    def test_keyword_arguments(self, identical_trees):
        tree_a, tree_b = identical_trees
        assert compare_archives(root_a=tree_a, root_b=tree_b).passed

    def test_resource_order_does_not_matter(self, export_factory):
        reordered = export_factory.default_catalogs()
        for document in reordered.values():
            document["data"]["resources"].reverse()
            for resource in document["data"]["resources"]:
                resource["tags"].reverse()

        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b", catalogs=reordered)
        assert compare_archives(tree_a, tree_b).passed

    def test_missing_catalog(self, export_factory):
        catalogs = export_factory.default_catalogs()
        del catalogs["host-2.example.com"]

        report = compare_archives(
            export_factory.build_tree("a"), export_factory.build_tree("b", catalogs=catalogs)
        )

        assert not report.passed
        assert [f.relative_path for f in report.missing] == [CATALOG_2]
        assert report.extra == []
        assert report.content_findings == []

    def test_extra_catalog(self, export_factory):
        catalogs = export_factory.default_catalogs()
        catalogs["host-3.example.com"] = export_factory.catalog("host-3.example.com")

        report = compare_archives(
            export_factory.build_tree("a"), export_factory.build_tree("b", catalogs=catalogs)
        )

        assert [f.relative_path for f in report.extra] == [
            "puppetdb-bak/catalogs/host-3.example.com.json"
        ]
        assert report.missing == []

    def test_missing_metadata(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b")
        (tree_b / METADATA).unlink()

        report = compare_archives(tree_a, tree_b)
        assert [f.relative_path for f in report.missing] == [METADATA]

    def test_empty_tree_b_reports_every_file(self, export_factory, tmp_path):
        tree_a = export_factory.build_tree("a")
        tree_b = tmp_path / "empty"
        tree_b.mkdir()

        report = compare_archives(tree_a, tree_b)
        assert [f.relative_path for f in report.missing] == [CATALOG_1, CATALOG_2, METADATA]
        assert report.entries_compared == 0

    def test_directory_only_on_one_side_is_not_a_finding(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b")
        (tree_b / "puppetdb-bak" / "reports").mkdir()

        assert compare_archives(tree_a, tree_b).passed

    def test_file_replaced_by_directory(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b")
        (tree_b / CATALOG_1).unlink()
        (tree_b / CATALOG_1).mkdir()

        report = compare_archives(tree_a, tree_b)
        assert [f.relative_path for f in report.missing] == [CATALOG_1]

    def test_unrecognized_entry(self, export_factory):
        extra = {"puppetdb-bak/catalogs/host-1.example.com.txt": "stray"}
        tree_a = export_factory.build_tree("a", extra_files=extra)
        tree_b = export_factory.build_tree("b", extra_files=extra)

        report = compare_archives(tree_a, tree_b)

        assert not report.passed
        assert [f.relative_path for f in report.unrecognized] == [
            "puppetdb-bak/catalogs/host-1.example.com.txt"
        ]
        assert report.entries_compared == 3

    def test_unrecognized_entry_only_in_b_is_extra(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b", extra_files={"README": "x"})

        report = compare_archives(tree_a, tree_b)
        assert [f.relative_path for f in report.extra] == ["README"]
        assert report.unrecognized == []

    def test_divergent_catalog(self, export_factory):
        catalogs = export_factory.default_catalogs()
        catalogs["host-1.example.com"]["data"]["version"] = "1476999999"

        report = compare_archives(
            export_factory.build_tree("a"), export_factory.build_tree("b", catalogs=catalogs)
        )

        (finding,) = report.divergent
        assert finding.relative_path == CATALOG_1
        assert finding.kind is EntryKind.DATA_RECORD
        assert list(finding.diff.entries) == ["data"]
        assert isinstance(finding.diff.entries["data"].entries["version"], ValueDiff)

    def test_divergent_resource_is_set_difference(self, export_factory):
        catalogs = export_factory.default_catalogs()
        catalogs["host-2.example.com"]["data"]["resources"][2]["parameters"]["content"] = "changed"

        report = compare_archives(
            export_factory.build_tree("a"), export_factory.build_tree("b", catalogs=catalogs)
        )

        (finding,) = report.divergent
        resources = finding.diff.entries["data"].entries["resources"]
        assert isinstance(resources, SetDiff)
        assert len(resources.left_only) == 1
        assert len(resources.right_only) == 1

    def test_divergent_metadata(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree(
            "b", metadata=export_factory.metadata(command_versions={"replace_catalog": 9})
        )

        (finding,) = compare_archives(tree_a, tree_b).divergent
        assert finding.kind is EntryKind.METADATA

    def test_parse_error_is_a_finding(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b")
        (tree_b / CATALOG_1).write_text("{truncated", encoding="utf-8")

        report = compare_archives(tree_a, tree_b)

        (finding,) = report.parse_errors
        assert finding.relative_path == CATALOG_1
        assert finding.side == "B"
        assert report.divergent == []
        assert report.entries_compared == 3

    def test_parse_error_on_both_sides(self, export_factory):
        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b")
        for tree in (tree_a, tree_b):
            (tree / METADATA).write_text(json.dumps([1, 2]), encoding="utf-8")

        report = compare_archives(tree_a, tree_b)
        assert [f.side for f in report.parse_errors] == ["A", "B"]

    def test_every_problem_reported_in_one_run(self, export_factory):
        catalogs = export_factory.default_catalogs()
        catalogs["host-1.example.com"]["data"]["name"] = "renamed"
        del catalogs["host-2.example.com"]

        tree_a = export_factory.build_tree("a")
        tree_b = export_factory.build_tree("b", catalogs=catalogs, extra_files={"stray.json": "{}"})

        report = compare_archives(tree_a, tree_b)
        stats = report.statistics()

        assert stats["missing"] == 1
        assert stats["extra"] == 1
        assert stats["divergent"] == 1
        assert stats["total_findings"] == 3

    def test_missing_root_is_fatal(self, export_factory, tmp_path):
        with pytest.raises(ExtractionError):
            compare_archives(export_factory.build_tree("a"), tmp_path / "missing")

    @pytest.mark.skipif(
        sys.platform == "win32" or os.geteuid() == 0, reason="permission bits not enforced"
    )
    def test_unreadable_root_is_fatal(self, export_factory):
        tree_b = export_factory.build_tree("b")
        tree_b.chmod(0)
        try:
            with pytest.raises(ExtractionError, match="not readable"):
                compare_archives(export_factory.build_tree("a"), tree_b)
        finally:
            tree_b.chmod(0o755)
