"""
Catalog state engine.

Derives the filtered, sorted, paginated view from fetched records
and keeps favorites and user ratings in step with it.
"""

from game_catalog.catalog.coordinator import PageSource, RemoteFetchCoordinator
from game_catalog.catalog.engine import CatalogEngine, CatalogView, EmptyState
from game_catalog.catalog.filters import (
    ALL,
    FilterCriteria,
    FilterOptions,
    PlatformFamily,
    RatingSort,
    derive,
    fold_platform_family,
    matches_platform_family,
)
from game_catalog.catalog.pagination import PaginationState
from game_catalog.catalog.state import CatalogState, ViewMode

__all__ = [
    "ALL",
    "CatalogEngine",
    "CatalogState",
    "CatalogView",
    "EmptyState",
    "FilterCriteria",
    "FilterOptions",
    "PageSource",
    "PaginationState",
    "PlatformFamily",
    "RatingSort",
    "RemoteFetchCoordinator",
    "ViewMode",
    "derive",
    "fold_platform_family",
    "matches_platform_family",
]
