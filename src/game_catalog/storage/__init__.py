"""
Local persistence for favorites and user ratings.
"""

from game_catalog.storage.favorites import FAVORITES_KEY, FavoritesStore
from game_catalog.storage.kv import JsonFileStore, KeyValueStore, MemoryStore
from game_catalog.storage.ratings import (
    RATINGS_KEY,
    InvalidRatingError,
    RatingsStore,
    validate_rating,
)

__all__ = [
    "FAVORITES_KEY",
    "RATINGS_KEY",
    "FavoritesStore",
    "InvalidRatingError",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "RatingsStore",
    "validate_rating",
]
