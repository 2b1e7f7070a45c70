"""Keyset cursor state."""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict


@dataclass(frozen=True)
class PageCursor:
    """Position of a paginator: bounds of the loaded page plus the latest counts.

    first_id/last_id are both 0 until a page has been loaded.
    """

    first_id: int = 0
    last_id: int = 0
    page_index: int = 0
    total_pages: int = 0
    total_items: int = 0

    @property
    def is_loaded(self) -> bool:
        """True once a page has established cursor bounds."""
        return not (self.page_index == 0 and self.first_id == 0 and self.last_id == 0)

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages - 1

    def with_counts(self, total_items: int, page_size: int) -> "PageCursor":
        """Return a copy carrying a fresh item count and the derived page count."""
        total_pages = math.ceil(total_items / page_size) if total_items > 0 else 0
        return replace(self, total_items=total_items, total_pages=total_pages)

    def with_bounds(self, first_id: int, last_id: int) -> "PageCursor":
        return replace(self, first_id=first_id, last_id=last_id)

    def moved(self, step: int) -> "PageCursor":
        return replace(self, page_index=self.page_index + step)

    def page_info(self, page_size: int) -> Dict[str, Any]:
        """Get comprehensive page information."""
        return {
            "current_page": self.page_index,
            "per_page": page_size,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
            "first_id": self.first_id,
            "last_id": self.last_id,
        }
