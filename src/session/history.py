"""Bounded, deduplicated history of recently generated recipes.

Entries are most-recent-first. A recipe whose name is already present is not
inserted again, so the first occurrence keeps its position. When the limit is
exceeded the oldest entry is evicted.
"""

from datetime import datetime, timezone
from typing import Iterator, List, Optional, Tuple

from src.models.models import HistoryEntry, Recipe


class RecipeHistory:
    """Most-recent-first list of past recipes, unique by recipe name."""

    def __init__(self, limit: int = 5) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got: {limit}")
        self.limit = limit
        self._entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def contains_name(self, name: str) -> bool:
        return any(entry.recipe.name == name for entry in self._entries)

    def add(self, recipe: Recipe, created_at: datetime) -> bool:
        """Prepend a recipe unless one with the same name exists.

        Name comparison is exact and case-sensitive.

        Returns:
            True if the recipe was inserted, False if it was a duplicate.
        """
        if self.contains_name(recipe.name):
            return False
        self._entries.insert(0, HistoryEntry(recipe=recipe, created_at=created_at))
        del self._entries[self.limit:]
        return True

    def remove(self, index: int) -> HistoryEntry:
        """Remove and return the entry at index; other entries keep their order.

        Raises:
            IndexError: If index is out of range.
        """
        return self._entries.pop(index)


def format_relative_time(created_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Describe how long ago a history entry was created.

    Naive datetimes are treated as UTC.

    >>> format_relative_time(datetime(2024, 1, 1, 12, 0), datetime(2024, 1, 1, 12, 5))
    '5 minutes ago'
    """
    if created_at is None:
        return "recently"

    now = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = max((now - created_at).total_seconds(), 0)
    minutes = round(seconds / 60)

    if seconds < 30:
        return "less than a minute ago"
    if minutes < 2:
        return "1 minute ago"
    if minutes < 45:
        return f"{minutes} minutes ago"
    hours = round(minutes / 60)
    if minutes < 90:
        return "about 1 hour ago"
    if hours < 24:
        return f"about {hours} hours ago"
    days = round(hours / 24)
    if days < 2:
        return "1 day ago"
    return f"{days} days ago"
