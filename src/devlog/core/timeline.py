"""Pure timeline grouping - no I/O dependencies."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping

from .categories import Category
from .entries import DailyEntry


@dataclass
class TimelineCategory:
    """One category's items on a given day."""

    category_id: str
    category_name: str
    items: list[str] = field(default_factory=list)


@dataclass
class TimelineDay:
    """All category groups for a single date."""

    date: date
    categories: list[TimelineCategory] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(len(c.items) for c in self.categories)


def category_name(category_id: str, categories_by_id: Mapping[str, Category]) -> str:
    """Resolved category name, or the raw id if it no longer resolves."""
    category = categories_by_id.get(category_id)
    return category.name if category else category_id


def build_timeline(
    entries: Iterable[DailyEntry],
    categories_by_id: Mapping[str, Category],
) -> list[TimelineDay]:
    """
    Group entries by date, then by category.

    Days are newest first, categories are ordered by name (case-sensitive,
    ties broken by id) and items keep insertion order (created_at, then id).
    The output does not depend on the order of `entries`.

    Pure function - no I/O.
    """
    by_date: dict[date, dict[str, list[DailyEntry]]] = {}
    for entry in entries:
        by_date.setdefault(entry.date, {}).setdefault(entry.category_id, []).append(entry)

    days = []
    for day in sorted(by_date, reverse=True):
        groups = []
        for category_id, items in by_date[day].items():
            ordered = sorted(items, key=lambda e: (e.created_at, e.id))
            groups.append(
                TimelineCategory(
                    category_id=category_id,
                    category_name=category_name(category_id, categories_by_id),
                    items=[e.display() for e in ordered],
                )
            )
        groups.sort(key=lambda g: (g.category_name, g.category_id))
        days.append(TimelineDay(date=day, categories=groups))
    return days


def summarize_by_date(entries: Iterable[DailyEntry]) -> list[tuple[date, int]]:
    """Item count per date, newest first."""
    counts = Counter(e.date for e in entries)
    return sorted(counts.items(), key=lambda pair: pair[0], reverse=True)


def format_day(day: TimelineDay) -> str:
    """
    Plain-text view of a single day, suitable for pasting into a chat.

    Pure function - no I/O.
    """
    lines = [day.date.isoformat(), ""]
    for group in day.categories:
        lines.append(group.category_name)
        lines.extend(f"- {item}" for item in group.items)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
