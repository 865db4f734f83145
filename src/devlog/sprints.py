"""Sprint Manager - sprint lifecycle over a record store."""

import logging
from datetime import date

from .core.dates import parse_date, utcnow
from .core.errors import ConflictError, NotFoundError
from .core.sprints import (
    Sprint,
    archived_sprints,
    clean_sprint_name,
    compute_end_date,
    format_sprint_code,
    new_sprint_id,
    newest_first,
    next_sprint_number,
    resolve_active_sprint,
)
from .ports.record_store import RecordStore

logger = logging.getLogger(__name__)

SPRINT_COUNTER = "sprint_code"


class SprintManager:
    """Allocates sprint codes and guards the active sprint."""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_sprints(self) -> list[Sprint]:
        """All sprints, newest first."""
        return newest_first(self.store.list_sprints())

    def get_sprint(self, sprint_id: str) -> Sprint:
        for sprint in self.store.list_sprints():
            if sprint.id == sprint_id:
                return sprint
        raise NotFoundError(f"sprint not found: {sprint_id}")

    def active_sprint(self, today: date | None = None) -> Sprint | None:
        """Resolve the active sprint from current data; never cached."""
        today = today or date.today()
        return resolve_active_sprint(self.store.list_sprints(), today)

    def archived_sprints(self, today: date | None = None) -> list[Sprint]:
        today = today or date.today()
        return archived_sprints(self.store.list_sprints(), today)

    def create_sprint(
        self,
        start_date: date | str,
        name: str | None = None,
        duration_days: int | None = None,
    ) -> Sprint:
        """
        Create a sprint with the next unused code.

        `duration_days` of 7 or 14 sets an inclusive end date; None leaves
        the sprint open-ended.
        """
        start = parse_date(start_date, "start_date")
        end = compute_end_date(start, duration_days)

        with self.store.transaction():
            issued = self.store.read_counter(SPRINT_COUNTER)
            number = next_sprint_number(self.store.list_sprints(), issued)
            code = format_sprint_code(number)
            sprint = Sprint(
                id=new_sprint_id(),
                code=code,
                name=(name or "").strip() or code,
                start_date=start,
                end_date=end,
                created_at=utcnow(),
            )
            self.store.create_sprint(sprint)
            self.store.write_counter(SPRINT_COUNTER, number)

        logger.info(f"Created {sprint.code} ({sprint.id}) window {sprint.window()}")
        return sprint

    def rename_sprint(self, sprint_id: str, name: str) -> Sprint:
        cleaned = clean_sprint_name(name)
        with self.store.transaction():
            sprint = self.get_sprint(sprint_id)
            sprint.name = cleaned
            self.store.update_sprint(sprint)
        logger.info(f"Renamed {sprint.code} to {cleaned}")
        return sprint

    def delete_sprint(self, sprint_id: str, today: date | None = None) -> None:
        """
        Delete a sprint and its entries.

        The active sprint is resolved at call time and cannot be deleted.
        """
        today = today or date.today()
        with self.store.transaction():
            sprints = self.store.list_sprints()
            if not any(s.id == sprint_id for s in sprints):
                raise NotFoundError(f"sprint not found: {sprint_id}")

            active = resolve_active_sprint(sprints, today)
            if active is not None and active.id == sprint_id:
                logger.warning(f"Refused to delete active sprint {active.code}")
                raise ConflictError(f"cannot delete the active sprint: {active.code}")

            entries = self.store.list_entries(sprint_id)
            for entry in entries:
                self.store.delete_entry(entry.id)
            self.store.delete_sprint(sprint_id)

        logger.info(f"Deleted sprint {sprint_id} and {len(entries)} entries")
