"""Date parsing helpers shared by the core."""

from datetime import date, datetime, timezone

from .errors import ValidationError


def parse_date(value: date | str, field: str = "date") -> date:
    """
    Coerce a YYYY-MM-DD string (or a date) into a date.

    Raises ValidationError for anything that is not a calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    raw = value.strip()
    try:
        parsed = date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{field} must be in YYYY-MM-DD format") from None
    # fromisoformat also accepts YYYYMMDD and week dates on newer Pythons
    if parsed.isoformat() != raw:
        raise ValidationError(f"{field} must be in YYYY-MM-DD format")
    return parsed


def parse_optional_date(value: date | str | None, field: str = "date") -> date | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_date(value, field)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
