"""Category Registry - category lifecycle over a record store."""

import logging

from .core.categories import (
    Category,
    clean_category_name,
    ensure_unique_name,
    new_category_id,
    sort_categories,
)
from .core.dates import utcnow
from .core.entries import entries_for_category
from .core.errors import NotFoundError, ValidationError
from .ports.record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ["PR-Reviews", "Meeting", "Tasks"]


class CategoryRegistry:
    """Creates, renames and deletes categories without orphaning entries."""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_categories(self) -> list[Category]:
        """All categories, oldest first."""
        return sort_categories(self.store.list_categories())

    def categories_by_id(self) -> dict[str, Category]:
        return {c.id: c for c in self.store.list_categories()}

    def get_category(self, category_id: str) -> Category:
        category = self.categories_by_id().get(category_id)
        if category is None:
            raise NotFoundError(f"category not found: {category_id}")
        return category

    def create_category(self, name: str) -> Category:
        cleaned = clean_category_name(name)
        with self.store.transaction():
            ensure_unique_name(cleaned, self.store.list_categories())
            category = Category(id=new_category_id(cleaned), name=cleaned, created_at=utcnow())
            self.store.create_category(category)
        logger.info(f"Created category {category.id} ({category.name})")
        return category

    def rename_category(self, category_id: str, name: str) -> Category:
        cleaned = clean_category_name(name)
        with self.store.transaction():
            category = self.get_category(category_id)
            ensure_unique_name(cleaned, self.store.list_categories(), exclude_id=category_id)
            category.name = cleaned
            self.store.update_category(category)
        logger.info(f"Renamed category {category_id} to {cleaned}")
        return category

    def delete_category(self, category_id: str, replacement_category_id: str | None = None) -> None:
        """
        Delete a category, moving its entries to a replacement.

        A replacement is required while other categories exist. Deleting the
        last category deletes every entry that referenced it.
        """
        with self.store.transaction():
            categories = self.categories_by_id()
            if category_id not in categories:
                raise NotFoundError(f"category not found: {category_id}")

            affected = entries_for_category(self.store.list_entries(), category_id)

            if len(categories) == 1:
                for entry in affected:
                    self.store.delete_entry(entry.id)
                self.store.delete_category(category_id)
                logger.info(
                    f"Deleted last category {category_id} and {len(affected)} entries"
                )
                return

            replacement_id = (replacement_category_id or "").strip()
            if not replacement_id:
                logger.warning(f"Refused to delete {category_id}: no replacement given")
                raise ValidationError("a replacement category is required")
            if replacement_id == category_id:
                raise ValidationError("replacement category must be different")
            if replacement_id not in categories:
                raise NotFoundError(f"replacement category not found: {replacement_id}")

            for entry in affected:
                entry.category_id = replacement_id
                self.store.update_entry(entry)
            self.store.delete_category(category_id)

        logger.info(
            f"Deleted category {category_id}; moved {len(affected)} entries to {replacement_id}"
        )

    def ensure_default_categories(self, names: list[str] | None = None) -> list[Category]:
        """Seed the default categories when none exist yet."""
        if self.store.list_categories():
            return []
        created = []
        with self.store.transaction():
            for name in names if names is not None else DEFAULT_CATEGORIES:
                created.append(self.create_category(name))
        return created
