"""
Data contracts for the game listing API.

Pydantic models describing the records the client fetches,
stores as favorites, and renders.
"""

from game_catalog.contracts.games import (
    GameId,
    GameRecord,
    ListingPage,
    NamedRef,
    PlatformEntry,
)

__all__ = [
    "GameId",
    "GameRecord",
    "ListingPage",
    "NamedRef",
    "PlatformEntry",
]
