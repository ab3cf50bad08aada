"""
Favorites store.

Keeps full snapshots of favorited games, keyed by game id, and
writes the whole list back after every change.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from game_catalog.contracts import GameId, GameRecord
from game_catalog.logger import get_logger
from game_catalog.storage.kv import KeyValueStore

FAVORITES_KEY = "favorites"


class FavoritesStore:
    """
    User favorites with snapshot semantics.

    A favorite keeps the record exactly as it was when favorited; later
    fetches of the same game do not update it. Order is insertion order.
    """

    def __init__(self, store: KeyValueStore, *, key: str = FAVORITES_KEY) -> None:
        self._store = store
        self._key = key
        self._logger = get_logger(__name__, component="favorites")
        self._favorites: dict[str, GameRecord] = self._load()

    def _load(self) -> dict[str, GameRecord]:
        raw = self._store.get(self._key, [])
        if not isinstance(raw, list):
            self._logger.warning("Ignoring malformed favorites", type=type(raw).__name__)
            return {}

        favorites: dict[str, GameRecord] = {}
        for item in raw:
            try:
                record = GameRecord.model_validate(item)
            except PydanticValidationError as e:
                self._logger.warning("Skipping unreadable favorite", error=str(e))
                continue
            favorites.setdefault(record.key, record)

        self._logger.debug("Loaded favorites", count=len(favorites))
        return favorites

    def _save(self) -> None:
        self._store.set(self._key, self.snapshots())

    def toggle(self, record: GameRecord) -> bool:
        """
        Add or remove a game.

        Returns:
            True if the game is a favorite after the call
        """
        if record.key in self._favorites:
            del self._favorites[record.key]
            added = False
        else:
            self._favorites[record.key] = record
            added = True

        self._save()
        self._logger.info("Toggled favorite", game_id=record.id, favorite=added)
        return added

    def contains(self, game_id: GameId) -> bool:
        return str(game_id) in self._favorites

    def get(self, game_id: GameId) -> GameRecord | None:
        return self._favorites.get(str(game_id))

    def all(self) -> list[GameRecord]:
        return list(self._favorites.values())

    def snapshots(self) -> list[dict[str, Any]]:
        return [record.snapshot() for record in self._favorites.values()]

    def __len__(self) -> int:
        return len(self._favorites)

    def __contains__(self, game_id: object) -> bool:
        return str(game_id) in self._favorites
