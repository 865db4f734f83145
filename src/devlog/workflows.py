"""Shared wiring between the CLI and any other host.

`open_devlog` builds the engine from config: a SQLite store, a report sink
and the four services bound to them.
"""

from dataclasses import dataclass
from datetime import date

from .adapters.file_reports import FileReportStore
from .adapters.sqlite_store import SqliteStore
from .categories import CategoryRegistry
from .config import Config
from .core.errors import NotFoundError, ValidationError
from .core.sprints import Sprint
from .entries import EntryStore
from .ports.record_store import RecordStore
from .ports.report_sink import ReportSink
from .reports import ReportGenerator
from .sprints import SprintManager


@dataclass
class Devlog:
    """The engine's host-facing services over one store."""

    store: RecordStore
    categories: CategoryRegistry
    sprints: SprintManager
    entries: EntryStore
    reports: ReportGenerator

    @classmethod
    def from_store(cls, store: RecordStore, sink: ReportSink | None = None) -> "Devlog":
        return cls(
            store=store,
            categories=CategoryRegistry(store),
            sprints=SprintManager(store),
            entries=EntryStore(store),
            reports=ReportGenerator(store, sink),
        )

    def close(self) -> None:
        self.store.close()

    def resolve_sprint(self, sprint_ref: str | None, today: date | None = None) -> Sprint:
        """
        Find a sprint by id or code ("sprint-3", "3"), or the active one.

        Raises NotFoundError when nothing matches or no sprint exists yet.
        """
        if not sprint_ref:
            active = self.sprints.active_sprint(today)
            if active is None:
                raise NotFoundError("no sprints yet; create one with 'devlog sprint new'")
            return active

        ref = sprint_ref.strip()
        for sprint in self.sprints.list_sprints():
            if sprint.id == ref or sprint.code.lower() == ref.lower():
                return sprint
            if ref.isdigit() and sprint.number == int(ref):
                return sprint
        raise NotFoundError(f"sprint not found: {sprint_ref}")

    def resolve_category(self, category_ref: str | None) -> str:
        """Category id for an id or (case-insensitive) name; first category if omitted."""
        categories = self.categories.list_categories()
        if not categories:
            raise ValidationError("no categories yet; create one with 'devlog category add'")
        if not category_ref:
            return categories[0].id

        ref = category_ref.strip()
        for category in categories:
            if category.id == ref or category.name.casefold() == ref.casefold():
                return category.id
        raise NotFoundError(f"category not found: {category_ref}")


def open_devlog(config: Config) -> Devlog:
    """Open the configured database and seed default categories. Caller closes it."""
    store = SqliteStore(config.db_file)
    devlog = Devlog.from_store(store, FileReportStore(config.reports_path))
    try:
        devlog.categories.ensure_default_categories(config.default_categories)
    except Exception:
        store.close()
        raise
    return devlog
