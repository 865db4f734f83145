"""Report Generator - filtered markdown reports for a sprint."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Collection

from .core.dates import utcnow
from .core.errors import NotFoundError
from .core.report import Report, ReportFilter, filter_entries, render_report, report_filename
from .core.timeline import TimelineDay, build_timeline
from .ports.record_store import RecordStore
from .ports.report_sink import ReportSink

logger = logging.getLogger(__name__)


@dataclass
class ReportOutput:
    """A report after it has been saved."""

    markdown: str
    file_path: Path
    total_items: int


class ReportGenerator:
    """Builds timelines and reports from stored entries."""

    def __init__(self, store: RecordStore, sink: ReportSink | None = None):
        self.store = store
        self.sink = sink

    def _load(self, sprint_id: str):
        sprint = next((s for s in self.store.list_sprints() if s.id == sprint_id), None)
        if sprint is None:
            raise NotFoundError(f"sprint not found: {sprint_id}")
        categories_by_id = {c.id: c for c in self.store.list_categories()}
        return sprint, self.store.list_entries(sprint_id), categories_by_id

    def build_timeline(self, sprint_id: str) -> list[TimelineDay]:
        """Grouped timeline of every entry in a sprint."""
        _, entries, categories_by_id = self._load(sprint_id)
        return build_timeline(entries, categories_by_id)

    def generate_report(
        self,
        sprint_id: str,
        from_date: date | str | None = None,
        to_date: date | str | None = None,
        categories: Collection[str] | None = None,
        generated_at: datetime | None = None,
    ) -> Report:
        """
        Render a report of the sprint's entries that pass the filters.

        `categories=None` includes every category; an empty collection is
        rejected rather than read as "everything".
        """
        report_filter = ReportFilter.from_input(from_date, to_date, categories)
        _, report = self._render(sprint_id, report_filter, generated_at or utcnow())
        return report

    def _render(self, sprint_id: str, report_filter: ReportFilter, generated_at: datetime):
        sprint, entries, categories_by_id = self._load(sprint_id)

        kept = filter_entries(entries, report_filter)
        timeline = build_timeline(kept, categories_by_id)
        markdown = render_report(
            sprint,
            timeline,
            report_filter,
            total_items=len(kept),
            generated_at=generated_at,
            categories_by_id=categories_by_id,
        )
        logger.info(f"Generated report for {sprint.code}: {len(kept)} of {len(entries)} items")
        return sprint, Report(markdown=markdown, total_items=len(kept))

    def export_report(
        self,
        sprint_id: str,
        from_date: date | str | None = None,
        to_date: date | str | None = None,
        categories: Collection[str] | None = None,
    ) -> ReportOutput:
        """Generate a report and hand it to the sink for saving."""
        if self.sink is None:
            raise RuntimeError("No report sink configured")
        report_filter = ReportFilter.from_input(from_date, to_date, categories)
        generated_at = utcnow()
        sprint, report = self._render(sprint_id, report_filter, generated_at)
        path = self.sink.write(report_filename(sprint, generated_at), report.markdown)
        logger.info(f"Saved report to {path}")
        return ReportOutput(markdown=report.markdown, file_path=path, total_items=report.total_items)
