"""In-memory record store adapter."""

import copy
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator

from devlog.core.categories import Category
from devlog.core.entries import DailyEntry
from devlog.core.sprints import Sprint


class InMemoryStore:
    """
    Dict-backed record store.

    Implements RecordStore protocol. Transactions snapshot every table and
    restore the snapshot if the block raises. Records are copied on the way
    in and out so callers cannot mutate stored state by accident.
    """

    def __init__(self):
        self._categories: dict[str, Category] = {}
        self._sprints: dict[str, Sprint] = {}
        self._entries: dict[str, DailyEntry] = {}
        self._counters: dict[str, int] = {}
        self._depth = 0

    def close(self) -> None:
        pass

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = copy.deepcopy(
            (self._categories, self._sprints, self._entries, self._counters)
        )
        self._depth = 1
        try:
            yield
        except BaseException:
            self._categories, self._sprints, self._entries, self._counters = snapshot
            raise
        finally:
            self._depth = 0

    # Categories
    def create_category(self, category: Category) -> None:
        if category.id in self._categories:
            raise KeyError(f"duplicate category id: {category.id}")
        self._categories[category.id] = replace(category)

    def list_categories(self) -> list[Category]:
        return [replace(c) for c in self._categories.values()]

    def update_category(self, category: Category) -> bool:
        if category.id not in self._categories:
            return False
        self._categories[category.id] = replace(category)
        return True

    def delete_category(self, category_id: str) -> bool:
        return self._categories.pop(category_id, None) is not None

    # Sprints
    def create_sprint(self, sprint: Sprint) -> None:
        if sprint.id in self._sprints:
            raise KeyError(f"duplicate sprint id: {sprint.id}")
        self._sprints[sprint.id] = replace(sprint)

    def list_sprints(self) -> list[Sprint]:
        return [replace(s) for s in self._sprints.values()]

    def update_sprint(self, sprint: Sprint) -> bool:
        if sprint.id not in self._sprints:
            return False
        self._sprints[sprint.id] = replace(sprint)
        return True

    def delete_sprint(self, sprint_id: str) -> bool:
        return self._sprints.pop(sprint_id, None) is not None

    # Entries
    def create_entry(self, entry: DailyEntry) -> None:
        if entry.id in self._entries:
            raise KeyError(f"duplicate entry id: {entry.id}")
        self._entries[entry.id] = replace(entry)

    def list_entries(self, sprint_id: str | None = None) -> list[DailyEntry]:
        return [
            replace(e)
            for e in self._entries.values()
            if sprint_id is None or e.sprint_id == sprint_id
        ]

    def update_entry(self, entry: DailyEntry) -> bool:
        if entry.id not in self._entries:
            return False
        self._entries[entry.id] = replace(entry)
        return True

    def delete_entry(self, entry_id: str) -> bool:
        return self._entries.pop(entry_id, None) is not None

    # Counters
    def read_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def write_counter(self, name: str, value: int) -> None:
        self._counters[name] = value
