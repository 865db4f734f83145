"""Functional core - pure business logic with no I/O."""

from .errors import DevlogError, ValidationError, NotFoundError, ConflictError
from .categories import Category, slugify
from .sprints import Sprint, resolve_active_sprint, archived_sprints, sprint_label
from .entries import DailyEntry
from .timeline import TimelineDay, TimelineCategory, build_timeline, summarize_by_date, format_day
from .report import Report, ReportFilter, ReportSection, filter_entries, render_report, parse_report

__all__ = [
    # Errors
    "DevlogError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    # Categories
    "Category",
    "slugify",
    # Sprints
    "Sprint",
    "resolve_active_sprint",
    "archived_sprints",
    "sprint_label",
    # Entries
    "DailyEntry",
    # Timeline
    "TimelineDay",
    "TimelineCategory",
    "build_timeline",
    "summarize_by_date",
    "format_day",
    # Report
    "Report",
    "ReportFilter",
    "ReportSection",
    "filter_entries",
    "render_report",
    "parse_report",
]
