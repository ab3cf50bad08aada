"""
Catalog state owned by the engine.
"""

from dataclasses import dataclass, field
from enum import Enum

from game_catalog.catalog.filters import FilterCriteria, FilterOptions
from game_catalog.catalog.pagination import DEFAULT_PAGE_SIZE, PaginationState
from game_catalog.contracts import GameRecord
from game_catalog.fetching import NetworkError


class ViewMode(str, Enum):
    """Which list is on screen."""

    CATALOG = "catalog"
    FAVORITES = "favorites"


@dataclass
class CatalogState:
    """
    Everything the catalog view is derived from.

    ``all_records`` keeps fetch order and may contain the same game more
    than once when overlapping pages are appended; it is only replaced
    wholesale by a fresh (non-append) fetch.
    """

    all_records: list[GameRecord] = field(default_factory=list)
    filtered_records: list[GameRecord] = field(default_factory=list)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    pagination: PaginationState = field(default_factory=PaginationState)
    filter_options: FilterOptions = field(default_factory=FilterOptions)
    view_mode: ViewMode = ViewMode.CATALOG
    error: NetworkError | None = None

    @classmethod
    def create(cls, *, page_size: int = DEFAULT_PAGE_SIZE) -> "CatalogState":
        return cls(pagination=PaginationState(page_size=page_size))

    @property
    def has_fetched(self) -> bool:
        return self.pagination.remote_current_page > 0
