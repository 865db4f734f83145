"""Record storage interface."""

from contextlib import AbstractContextManager
from typing import Protocol

from devlog.core.categories import Category
from devlog.core.entries import DailyEntry
from devlog.core.sprints import Sprint


class RecordStore(Protocol):
    """
    Interface for persisting categories, sprints and daily entries.

    Each record kind has create/list/update/delete. `update_*` and `delete_*`
    return False when the id is unknown. Writes issued inside `transaction()`
    apply together or not at all.
    """

    def transaction(self) -> AbstractContextManager[None]:
        """Group writes; roll all of them back if the block raises."""
        ...

    def close(self) -> None:
        """Release any underlying connection."""
        ...

    # Categories
    def create_category(self, category: Category) -> None: ...

    def list_categories(self) -> list[Category]: ...

    def update_category(self, category: Category) -> bool: ...

    def delete_category(self, category_id: str) -> bool: ...

    # Sprints
    def create_sprint(self, sprint: Sprint) -> None: ...

    def list_sprints(self) -> list[Sprint]: ...

    def update_sprint(self, sprint: Sprint) -> bool: ...

    def delete_sprint(self, sprint_id: str) -> bool: ...

    # Entries
    def create_entry(self, entry: DailyEntry) -> None: ...

    def list_entries(self, sprint_id: str | None = None) -> list[DailyEntry]:
        """All entries, or only those of one sprint. Order is unspecified."""
        ...

    def update_entry(self, entry: DailyEntry) -> bool: ...

    def delete_entry(self, entry_id: str) -> bool: ...

    # Counters
    def read_counter(self, name: str) -> int:
        """Current value of a named counter, 0 if never written."""
        ...

    def write_counter(self, name: str, value: int) -> None: ...
