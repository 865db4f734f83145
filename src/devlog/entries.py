"""Entry Store - daily entries scoped to a sprint."""

import logging
from datetime import date

from .core.dates import parse_date, utcnow
from .core.entries import (
    DailyEntry,
    clean_details,
    clean_title,
    new_entry_id,
    next_created_at,
)
from .core.errors import NotFoundError
from .ports.record_store import RecordStore

logger = logging.getLogger(__name__)


class EntryStore:
    """Appends and lists daily entries."""

    def __init__(self, store: RecordStore):
        self.store = store

    def add_entry(
        self,
        sprint_id: str,
        date: date | str,
        category_id: str,
        title: str,
        details: str | None = None,
    ) -> DailyEntry:
        """Persist one new entry. No other record is touched."""
        cleaned_title = clean_title(title)
        entry_date = parse_date(date, "date")

        with self.store.transaction():
            if not any(s.id == sprint_id for s in self.store.list_sprints()):
                raise NotFoundError(f"sprint not found: {sprint_id}")
            if not any(c.id == category_id for c in self.store.list_categories()):
                raise NotFoundError(f"category not found: {category_id}")

            entry = DailyEntry(
                id=new_entry_id(),
                sprint_id=sprint_id,
                date=entry_date,
                category_id=category_id,
                title=cleaned_title,
                details=clean_details(details),
                created_at=next_created_at(utcnow(), self.store.list_entries(sprint_id)),
            )
            self.store.create_entry(entry)

        logger.info(f"Added entry {entry.id} to {sprint_id} on {entry_date}")
        return entry

    def list_entries_for_sprint(self, sprint_id: str) -> list[DailyEntry]:
        """Entries of one sprint, in storage order."""
        return self.store.list_entries(sprint_id)
