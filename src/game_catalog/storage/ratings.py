"""
User ratings store: one 1-5 star rating per game id.
"""

from game_catalog.contracts import GameId
from game_catalog.logger import get_logger
from game_catalog.storage.kv import KeyValueStore

RATINGS_KEY = "userRatings"
MIN_RATING = 1
MAX_RATING = 5


class InvalidRatingError(ValueError):
    """Raised when a rating is not an integer between 1 and 5."""


def validate_rating(value: object) -> int:
    # bool is an int subclass but never a star count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRatingError(f"Rating must be an integer, got {value!r}")
    if not MIN_RATING <= value <= MAX_RATING:
        raise InvalidRatingError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {value}"
        )
    return value


class RatingsStore:
    """Per-game user ratings, persisted on every change."""

    def __init__(self, store: KeyValueStore, *, key: str = RATINGS_KEY) -> None:
        self._store = store
        self._key = key
        self._logger = get_logger(__name__, component="ratings")
        self._ratings: dict[str, int] = self._load()

    def _load(self) -> dict[str, int]:
        raw = self._store.get(self._key, {})
        if not isinstance(raw, dict):
            self._logger.warning("Ignoring malformed ratings", type=type(raw).__name__)
            return {}

        ratings: dict[str, int] = {}
        for game_id, value in raw.items():
            try:
                ratings[str(game_id)] = validate_rating(value)
            except InvalidRatingError:
                self._logger.warning("Skipping invalid stored rating", game_id=game_id, value=value)
        return ratings

    def set(self, game_id: GameId, value: int) -> int:
        """
        Rate a game, replacing any earlier rating.

        Raises:
            InvalidRatingError: If value is not an int in 1-5; nothing is stored
        """
        rating = validate_rating(value)
        self._ratings[str(game_id)] = rating
        self._store.set(self._key, dict(self._ratings))
        self._logger.info("Saved rating", game_id=game_id, rating=rating)
        return rating

    def get(self, game_id: GameId) -> int | None:
        return self._ratings.get(str(game_id))

    def all(self) -> dict[str, int]:
        return dict(self._ratings)

    def __len__(self) -> int:
        return len(self._ratings)
