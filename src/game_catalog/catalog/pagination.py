"""
Local pagination over the filtered view plus the remote page cursor.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 32


@dataclass
class PaginationState:
    """
    Local page position and remote fetch cursor.

    ``current_page`` is 1-based and indexes the filtered view;
    ``remote_current_page`` is the last listing page fetched.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    current_page: int = 1
    remote_total_pages: int = 1
    remote_current_page: int = 0

    def total_pages(self, item_count: int) -> int:
        """Number of local pages; 0 when there is nothing to show."""
        return math.ceil(item_count / self.page_size)

    def clamp(self, item_count: int) -> int:
        """Pull ``current_page`` back into ``[1, max(1, total_pages)]``."""
        upper = max(1, self.total_pages(item_count))
        self.current_page = min(max(self.current_page, 1), upper)
        return self.current_page

    def can_move(self, direction: int, item_count: int) -> bool:
        target = self.current_page + direction
        return 1 <= target <= self.total_pages(item_count)

    def move(self, direction: int, item_count: int) -> bool:
        """Shift the page by ``direction``; out-of-range moves are ignored."""
        if not self.can_move(direction, item_count):
            return False
        self.current_page += direction
        return True

    def reset(self) -> None:
        self.current_page = 1

    def slice(self, items: Sequence[T]) -> list[T]:
        start = (self.current_page - 1) * self.page_size
        return list(items[start : start + self.page_size])

    @property
    def has_more_remote(self) -> bool:
        return self.remote_current_page < self.remote_total_pages
