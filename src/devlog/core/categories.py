"""Pure category domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass
from datetime import datetime

from .errors import ConflictError, ValidationError


@dataclass
class Category:
    """A user-defined label partitioning daily entries."""

    id: str
    name: str
    created_at: datetime


def slugify(raw: str) -> str:
    """
    Lowercase ASCII slug: alphanumerics kept, whitespace/-/_ collapsed to '-'.

    Returns "value" when nothing survives.
    """
    out = []
    for ch in raw:
        if ch.isascii() and ch.isalnum():
            out.append(ch.lower())
        elif (ch.isspace() or ch in "-_") and (not out or out[-1] != "-"):
            out.append("-")
    slug = "".join(out).strip("-")
    return slug or "value"


def new_category_id(name: str) -> str:
    return f"cat-{slugify(name)}-{uuid.uuid4().hex[:8]}"


def clean_category_name(name: str | None) -> str:
    """Trim a category name, rejecting blanks."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("category name is required")
    return cleaned


def ensure_unique_name(
    name: str,
    categories: list[Category],
    exclude_id: str | None = None,
) -> None:
    """
    Raise ConflictError if another category already uses this name.

    Comparison is case-insensitive. Pure function - no I/O.
    """
    folded = name.casefold()
    for category in categories:
        if category.id == exclude_id:
            continue
        if category.name.casefold() == folded:
            raise ConflictError(f"category name already exists: {category.name}")


def sort_categories(categories: list[Category]) -> list[Category]:
    """Oldest first, then by name."""
    return sorted(categories, key=lambda c: (c.created_at, c.name))
