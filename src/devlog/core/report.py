"""Pure report filtering, rendering and parsing - no I/O dependencies."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Collection, Iterable, Mapping

from .categories import Category, slugify
from .dates import parse_optional_date
from .entries import DailyEntry
from .errors import ValidationError
from .sprints import Sprint, sprint_label
from .timeline import TimelineDay, category_name

EMPTY_REPORT_TEXT = "No items found for the selected filters."

_ITEM_RE = re.compile(r"^(\d+)\. (.*)$")
_CONTINUATION = "   "


@dataclass
class ReportFilter:
    """
    Date range and category selection for a report.

    `categories=None` means no category filter. An empty set is never stored:
    asking for zero categories is rejected when the filter is built.
    """

    from_date: date | None = None
    to_date: date | None = None
    categories: frozenset[str] | None = None

    @classmethod
    def from_input(
        cls,
        from_date: date | str | None = None,
        to_date: date | str | None = None,
        categories: Collection[str] | None = None,
    ) -> "ReportFilter":
        """Validate raw caller input into a filter."""
        start = parse_optional_date(from_date, "from_date")
        end = parse_optional_date(to_date, "to_date")
        if start and end and start > end:
            raise ValidationError("from_date must not be after to_date")

        selected = None
        if isinstance(categories, str):
            raise ValidationError("categories must be a collection of ids, not a single string")
        if categories is not None:
            selected = frozenset(c.strip() for c in categories if c and c.strip())
            if not selected:
                raise ValidationError(
                    "no categories selected; pass None to include every category"
                )
        return cls(from_date=start, to_date=end, categories=selected)

    def matches(self, entry: DailyEntry) -> bool:
        if self.from_date and entry.date < self.from_date:
            return False
        if self.to_date and entry.date > self.to_date:
            return False
        if self.categories is not None and entry.category_id not in self.categories:
            return False
        return True


@dataclass
class Report:
    """Rendered markdown plus the number of entries that passed the filter."""

    markdown: str
    total_items: int


@dataclass
class ReportSection:
    """One date/category block recovered from a rendered report."""

    date: date
    category: str
    items: list[str] = field(default_factory=list)


def filter_entries(entries: Iterable[DailyEntry], report_filter: ReportFilter) -> list[DailyEntry]:
    """Keep entries inside the date range and category selection (bounds inclusive)."""
    return [e for e in entries if report_filter.matches(e)]


def render_report(
    sprint: Sprint,
    timeline: list[TimelineDay],
    report_filter: ReportFilter,
    total_items: int,
    generated_at: datetime,
    categories_by_id: Mapping[str, Category] | None = None,
) -> str:
    """
    Render a filtered timeline as a markdown document.

    Pure function - no I/O.
    """
    lines = [f"# Sprint Report: {sprint_label(sprint)}", ""]
    lines.append(f"- Sprint Code: `{sprint.code}`")
    lines.append(f"- Sprint Window: {sprint.window()}")
    lines.append(f"- Exported At: {generated_at.isoformat(timespec='seconds')}")
    if report_filter.from_date:
        lines.append(f"- Report From: {report_filter.from_date.isoformat()}")
    if report_filter.to_date:
        lines.append(f"- Report To: {report_filter.to_date.isoformat()}")
    if report_filter.categories is not None:
        names = sorted(category_name(c, categories_by_id or {}) for c in report_filter.categories)
        lines.append(f"- Categories: {', '.join(names)}")
    lines.append(f"- Included Items: {total_items}")
    lines.append("")

    if not timeline:
        lines.append(EMPTY_REPORT_TEXT)
        return "\n".join(lines) + "\n"

    for day in timeline:
        lines.append(f"## {day.date.isoformat()}")
        lines.append("")
        for group in day.categories:
            lines.append(f"### {group.category_name}")
            for number, item in enumerate(group.items, start=1):
                first, *rest = item.splitlines() or [""]
                lines.append(f"{number}. {first}")
                lines.extend(f"{_CONTINUATION}{line}" for line in rest)
            lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def parse_report(markdown: str) -> list[ReportSection]:
    """
    Recover the date/category sections of a rendered report.

    Header bullets and the empty-report notice are ignored.
    """
    sections: list[ReportSection] = []
    current_date: date | None = None
    current: ReportSection | None = None

    for line in markdown.splitlines():
        if line.startswith("### "):
            if current_date is None:
                raise ValueError(f"category heading before any date: {line!r}")
            current = ReportSection(date=current_date, category=line[4:])
            sections.append(current)
        elif line.startswith("## "):
            current_date = date.fromisoformat(line[3:].strip())
            current = None
        elif current is not None:
            match = _ITEM_RE.match(line)
            if match:
                current.items.append(match.group(2))
            elif line.startswith(_CONTINUATION) and current.items:
                current.items[-1] += "\n" + line[len(_CONTINUATION):]
    return sections


def report_filename(sprint: Sprint, generated_at: datetime) -> str:
    return f"report-{slugify(sprint.name)}-{generated_at.strftime('%Y%m%d%H%M%S')}.md"
