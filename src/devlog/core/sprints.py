"""Pure sprint domain logic - no I/O dependencies."""

import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .errors import ValidationError

SPRINT_CODE_PREFIX = "sprint-"
SPRINT_DURATIONS = (7, 14)

_SPRINT_NUMBER_RE = re.compile(r"^(?:sprint[\s_-]*)?[-_]?\s*(\d+)$")


@dataclass
class Sprint:
    """A named, time-boxed period with an immutable auto-generated code."""

    id: str
    code: str
    name: str
    start_date: date
    end_date: date | None
    created_at: datetime

    @property
    def number(self) -> int | None:
        return sprint_number(self.code)

    def covers(self, day: date) -> bool:
        """Whether `day` falls inside the sprint window (open end = forever)."""
        if self.start_date > day:
            return False
        return self.end_date is None or self.end_date >= day

    def window(self) -> str:
        end = self.end_date.isoformat() if self.end_date else "open"
        return f"{self.start_date.isoformat()} to {end}"


def new_sprint_id() -> str:
    return f"sprint-{uuid.uuid4().hex}"


def sprint_number(raw: str | None) -> int | None:
    """
    Extract the numeric part of a sprint code or a typed sprint reference.

    Accepts "sprint-3", "Sprint 3", "sprint3", "sprint_3" and bare "3".
    """
    if not raw:
        return None
    match = _SPRINT_NUMBER_RE.match(raw.strip().lower())
    if not match:
        return None
    return int(match.group(1))


def format_sprint_code(number: int) -> str:
    return f"{SPRINT_CODE_PREFIX}{number}"


def next_sprint_number(sprints: list[Sprint], issued: int = 0) -> int:
    """
    Next sprint number: one past the highest ever issued.

    `issued` is the persisted high-water mark, so numbers freed by deleting
    the newest sprint are not handed out again.
    """
    highest = issued
    for sprint in sprints:
        number = sprint_number(sprint.code)
        if number is not None and number > highest:
            highest = number
    return highest + 1


def compute_end_date(start_date: date, duration_days: int | None) -> date | None:
    """Inclusive end date for a 7 or 14 day sprint; None means open-ended."""
    if duration_days is None:
        return None
    if duration_days not in SPRINT_DURATIONS:
        allowed = " or ".join(str(d) for d in SPRINT_DURATIONS)
        raise ValidationError(f"duration_days must be {allowed}")
    return start_date + timedelta(days=duration_days - 1)


def clean_sprint_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("sprint name is required")
    return cleaned


def newest_first(sprints: list[Sprint]) -> list[Sprint]:
    """
    Sort by created_at descending.

    Equal timestamps fall back to the sprint number, which is issued in
    creation order.
    """
    return sorted(
        sprints,
        key=lambda s: (s.created_at, s.number or 0, s.id),
        reverse=True,
    )


def resolve_active_sprint(sprints: list[Sprint], today: date) -> Sprint | None:
    """
    Pick the sprint currently in effect.

    Newest sprint whose window covers `today`; otherwise the newest sprint
    overall; None for an empty collection. Pure function of its inputs, so
    it must be re-evaluated on every query rather than stored.
    """
    ordered = newest_first(sprints)
    if not ordered:
        return None
    for sprint in ordered:
        if sprint.covers(today):
            return sprint
    return ordered[0]


def archived_sprints(sprints: list[Sprint], today: date) -> list[Sprint]:
    """All sprints except the active one, newest first."""
    active = resolve_active_sprint(sprints, today)
    return [s for s in newest_first(sprints) if active is None or s.id != active.id]


def sprint_label(sprint: Sprint) -> str:
    """Display label combining code and name without repeating either."""
    name = sprint.name.strip()
    code = sprint.code.strip()
    if not name:
        return code
    if not code or code.lower() == name.lower():
        return name
    return f"{code} - {name}"
