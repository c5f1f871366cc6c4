"""In-memory pagination for fully loaded tables."""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence

from config.constants import DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class Page:
    items: List[Any]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def display_total_pages(self) -> int:
        """Page count for "Page x of y"; an empty table still shows one page."""
        return self.total_pages or 1

    @property
    def start(self) -> int:
        """1-based index of the first visible item, 0 when there are none."""
        return (self.page - 1) * self.page_size + 1 if self.total > 0 else 0

    @property
    def end(self) -> int:
        return min(self.page * self.page_size, self.total)

    @property
    def summary(self) -> str:
        return f"Showing {self.start} - {self.end} of {self.total}"

    @property
    def label(self) -> str:
        return f"Page {self.page} of {self.display_total_pages}"

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return math.ceil(count / page_size)


def clamp_page(page: int, count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Keep ``page`` within 1..total_pages (1 for an empty set)."""
    return max(1, min(page, total_pages(count, page_size) or 1))


def paginate(items: Sequence[Any], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    """Slice one page out of ``items``.

    The page number is clamped so a page that shrank after a delete or a
    new search still shows rows.
    """
    page = clamp_page(page, len(items), page_size)
    visible = list(items[(page - 1) * page_size:page * page_size])
    return Page(items=visible, page=page, page_size=page_size, total=len(items))
