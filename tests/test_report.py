"""Tests for report filtering, rendering and the Report Generator."""

from datetime import date, datetime, timezone

import pytest

from devlog.adapters.file_reports import FileReportStore
from devlog.adapters.memory_store import InMemoryStore
from devlog.categories import CategoryRegistry
from devlog.core.errors import NotFoundError, ValidationError
from devlog.core.report import ReportFilter, parse_report, report_filename
from devlog.entries import EntryStore
from devlog.reports import ReportGenerator
from devlog.sprints import SprintManager


@pytest.fixture
def generated_at():
    return datetime(2024, 1, 11, 17, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def seeded(store):
    """Sprint with entries on 01-04 (A), 01-06 (A), 01-06 (B), 01-09 (A)."""
    registry = CategoryRegistry(store)
    cat_a = registry.create_category("Tasks")
    cat_b = registry.create_category("Meeting")
    sprint = SprintManager(store).create_sprint("2024-01-01", name="Launch", duration_days=14)
    entries = EntryStore(store)
    entries.add_entry(sprint.id, "2024-01-04", cat_a.id, "Before range")
    entries.add_entry(sprint.id, "2024-01-06", cat_a.id, "Fix login", "null check")
    entries.add_entry(sprint.id, "2024-01-06", cat_b.id, "Planning")
    entries.add_entry(sprint.id, "2024-01-09", cat_a.id, "Write docs")
    return sprint, cat_a, cat_b


@pytest.fixture
def generator(store, tmp_path):
    return ReportGenerator(store, FileReportStore(tmp_path / "reports"))


class TestReportFilter:
    def test_no_filters(self):
        report_filter = ReportFilter.from_input()
        assert report_filter.categories is None

    def test_explicit_empty_category_set_is_rejected(self):
        with pytest.raises(ValidationError):
            ReportFilter.from_input(categories=[])

    def test_blank_category_ids_count_as_empty(self):
        with pytest.raises(ValidationError):
            ReportFilter.from_input(categories=["  "])

    def test_bad_dates(self):
        with pytest.raises(ValidationError):
            ReportFilter.from_input(from_date="2024-1-5")

    def test_inverted_range(self):
        with pytest.raises(ValidationError):
            ReportFilter.from_input(from_date="2024-01-10", to_date="2024-01-05")

    def test_bare_string_categories_are_rejected(self):
        with pytest.raises(ValidationError):
            ReportFilter.from_input(categories="cat-tasks")

    def test_bounds_are_inclusive(self):
        report_filter = ReportFilter.from_input("2024-01-05", "2024-01-10")
        assert report_filter.from_date == date(2024, 1, 5)
        assert report_filter.to_date == date(2024, 1, 10)


class TestGenerateReport:
    def test_date_and_category_filter(self, generator, seeded, generated_at):
        sprint, cat_a, _ = seeded
        report = generator.generate_report(
            sprint.id, "2024-01-05", "2024-01-10", [cat_a.id], generated_at=generated_at
        )

        assert report.total_items == 2
        assert "Fix login - null check" in report.markdown
        assert "Write docs" in report.markdown
        assert "Before range" not in report.markdown
        assert "Planning" not in report.markdown
        assert "## 2024-01-04" not in report.markdown

    def test_full_markdown(self, generator, seeded, generated_at):
        sprint, _, _ = seeded
        report = generator.generate_report(sprint.id, from_date="2024-01-05", generated_at=generated_at)

        assert report.total_items == 3
        assert report.markdown == (
            "# Sprint Report: sprint-1 - Launch\n"
            "\n"
            "- Sprint Code: `sprint-1`\n"
            "- Sprint Window: 2024-01-01 to 2024-01-14\n"
            "- Exported At: 2024-01-11T17:30:00+00:00\n"
            "- Report From: 2024-01-05\n"
            "- Included Items: 3\n"
            "\n"
            "## 2024-01-09\n"
            "\n"
            "### Tasks\n"
            "1. Write docs\n"
            "\n"
            "## 2024-01-06\n"
            "\n"
            "### Meeting\n"
            "1. Planning\n"
            "\n"
            "### Tasks\n"
            "1. Fix login - null check\n"
        )

    def test_category_names_listed_when_filtered(self, generator, seeded, generated_at):
        sprint, cat_a, cat_b = seeded
        report = generator.generate_report(sprint.id, categories=[cat_b.id, cat_a.id])
        assert "- Categories: Meeting, Tasks\n" in report.markdown
        assert report.total_items == 4

    def test_no_matches(self, generator, seeded):
        sprint, _, _ = seeded
        report = generator.generate_report(sprint.id, from_date="2024-02-01")
        assert report.total_items == 0
        assert "No items found for the selected filters." in report.markdown

    def test_empty_category_selection(self, generator, seeded):
        sprint, _, _ = seeded
        with pytest.raises(ValidationError):
            generator.generate_report(sprint.id, categories=set())

    def test_unknown_sprint(self, generator):
        with pytest.raises(NotFoundError):
            generator.generate_report("missing")

    def test_round_trip_counts_match(self, generator, seeded, store):
        sprint, cat_a, _ = seeded
        EntryStore(store).add_entry(sprint.id, "2024-01-09", cat_a.id, "Multi", "line one\nline two")
        report = generator.generate_report(sprint.id)
        sections = parse_report(report.markdown)

        assert sum(len(s.items) for s in sections) == report.total_items == 5
        assert [(s.date.isoformat(), s.category) for s in sections] == [
            ("2024-01-09", "Tasks"),
            ("2024-01-06", "Meeting"),
            ("2024-01-06", "Tasks"),
            ("2024-01-04", "Tasks"),
        ]
        assert sections[0].items == ["Write docs", "Multi - line one\nline two"]

    @pytest.mark.parametrize("separator", ["\r", "\r\n", "\u2028"])
    def test_round_trip_with_foreign_line_breaks(self, generator, seeded, store, separator):
        sprint, cat_a, _ = seeded
        details = separator.join(["done:", "1. x", "2. y"])
        EntryStore(store).add_entry(sprint.id, "2024-01-09", cat_a.id, "Notes", details)
        report = generator.generate_report(sprint.id)
        sections = parse_report(report.markdown)

        assert sum(len(s.items) for s in sections) == report.total_items == 5
        assert sections[0].items[-1] == "Notes - done:\n1. x\n2. y"

    def test_single_string_category_is_rejected(self, generator, seeded):
        sprint, cat_a, _ = seeded
        with pytest.raises(ValidationError):
            generator.generate_report(sprint.id, categories=cat_a.id)

    def test_parse_empty_report(self, generator, seeded):
        sprint, _, _ = seeded
        report = generator.generate_report(sprint.id, to_date="2024-01-01")
        assert parse_report(report.markdown) == []


class TestExportReport:
    def test_writes_file(self, generator, seeded, tmp_path):
        sprint, _, _ = seeded
        output = generator.export_report(sprint.id)

        assert output.total_items == 4
        assert output.file_path.parent == tmp_path / "reports"
        assert output.file_path.name.startswith("report-launch-")
        assert output.file_path.read_text() == output.markdown

    def test_same_second_exports_do_not_clobber(self, tmp_path):
        sink = FileReportStore(tmp_path)
        first = sink.write("report-x.md", "one")
        second = sink.write("report-x.md", "two")
        assert first != second
        assert first.read_text() == "one"
        assert second.name == "report-x-2.md"

    def test_requires_sink(self, store, seeded):
        sprint, _, _ = seeded
        with pytest.raises(RuntimeError):
            ReportGenerator(store).export_report(sprint.id)

    def test_filename(self, seeded, generated_at):
        sprint, _, _ = seeded
        assert report_filename(sprint, generated_at) == "report-launch-20240111173000.md"
