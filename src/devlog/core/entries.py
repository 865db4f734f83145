"""Pure daily entry domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .errors import ValidationError


@dataclass
class DailyEntry:
    """One logged work item, dated, categorized, belonging to one sprint."""

    id: str
    sprint_id: str
    date: date
    category_id: str
    title: str
    details: str | None
    created_at: datetime

    def display(self) -> str:
        """Title alone, or "title - details" when details are present."""
        if self.details:
            return f"{self.title} - {self.details}"
        return self.title


def new_entry_id() -> str:
    return f"entry-{uuid.uuid4().hex}"


def _normalize_newlines(text: str) -> str:
    return "\n".join(text.splitlines())


def clean_title(title: str | None) -> str:
    cleaned = _normalize_newlines(title or "").strip()
    if not cleaned:
        raise ValidationError("title is required")
    return cleaned


def clean_details(details: str | None) -> str | None:
    """Trimmed details with plain newline breaks, or None when blank."""
    if details is None:
        return None
    cleaned = _normalize_newlines(details).strip()
    return cleaned or None


def next_created_at(now: datetime, existing: list[DailyEntry]) -> datetime:
    """
    Creation timestamp that sorts after every entry in `existing`.

    Entries added within the same clock tick get distinct, increasing
    timestamps, so ordering by created_at matches insertion order.
    """
    latest = max((e.created_at for e in existing), default=None)
    if latest is not None and now <= latest:
        return latest + timedelta(microseconds=1)
    return now


def entries_for_category(entries: list[DailyEntry], category_id: str) -> list[DailyEntry]:
    return [e for e in entries if e.category_id == category_id]
