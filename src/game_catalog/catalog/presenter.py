"""
Stateless projections of records and views for a renderer.

Nothing here touches engine state; callers pass in the favorite and
rating lookups they want reflected.
"""

import re
from dataclasses import dataclass
from datetime import date

from game_catalog.catalog.engine import CatalogView, EmptyState
from game_catalog.contracts import GameId, GameRecord

UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"
CARD_PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x300?text=No+Image"
DETAILS_PLACEHOLDER_IMAGE = "https://via.placeholder.com/800x400?text=No+Image"
NO_DESCRIPTION = "No description available."

_YEAR_PREFIX = re.compile(r"^(\d{4})")


@dataclass(frozen=True)
class GameCard:
    """Summary tile shown in the catalog and favorites grids."""

    game_id: GameId
    title: str
    image_url: str
    main_genre: str
    main_platform: str
    rating_label: str
    release_year: str
    is_favorite: bool

    @property
    def favorite_label(self) -> str:
        return "Remove from favorites" if self.is_favorite else "Add to favorites"


@dataclass(frozen=True)
class GameDetails:
    """Everything the details panel shows for one game."""

    game_id: GameId
    title: str
    image_url: str
    rating_label: str
    release_date: str
    genres: list[str]
    genres_label: str
    platforms_label: str
    developers_label: str
    publishers_label: str
    description: str
    website: str | None
    is_favorite: bool
    user_rating: int | None

    @property
    def favorite_label(self) -> str:
        return "Remove from favorites" if self.is_favorite else "Add to favorites"

    @property
    def user_rating_label(self) -> str:
        if self.user_rating:
            return f"({self.user_rating}/5)"
        return "Click on a star to rate"

    @property
    def stars(self) -> list[bool]:
        """Five flags, filled up to the user's rating."""
        filled = self.user_rating or 0
        return [star <= filled for star in range(1, 6)]


def format_rating(record: GameRecord) -> str:
    """One decimal, or "N/A" when the rating is missing or not a number."""
    if not record.has_rating:
        return NOT_AVAILABLE
    return f"{record.rating:.1f}"


def _parse_release(released: str | None) -> date | None:
    if not released:
        return None
    try:
        return date.fromisoformat(released[:10])
    except ValueError:
        return None


def format_release_year(released: str | None) -> str:
    parsed = _parse_release(released)
    if parsed is not None:
        return str(parsed.year)
    match = _YEAR_PREFIX.match(released or "")
    return match.group(1) if match else NOT_AVAILABLE


def format_release_date(released: str | None) -> str:
    """Day/month/year, e.g. 17/10/2026."""
    parsed = _parse_release(released)
    return parsed.strftime("%d/%m/%Y") if parsed else NOT_AVAILABLE


def _join_or_unknown(names: list[str]) -> str:
    return ", ".join(names) or UNKNOWN


def build_card(record: GameRecord, *, is_favorite: bool = False) -> GameCard:
    return GameCard(
        game_id=record.id,
        title=record.name or UNKNOWN,
        image_url=record.background_image or CARD_PLACEHOLDER_IMAGE,
        main_genre=record.genres[0].name if record.genres and record.genres[0].name else UNKNOWN,
        main_platform=(
            record.platforms[0].name if record.platforms and record.platforms[0].name else UNKNOWN
        ),
        rating_label=format_rating(record),
        release_year=format_release_year(record.released),
        is_favorite=is_favorite,
    )


def build_details(
    record: GameRecord,
    *,
    is_favorite: bool = False,
    user_rating: int | None = None,
) -> GameDetails:
    return GameDetails(
        game_id=record.id,
        title=record.name or UNKNOWN,
        image_url=record.background_image or DETAILS_PLACEHOLDER_IMAGE,
        rating_label=format_rating(record),
        release_date=format_release_date(record.released),
        genres=record.genre_names,
        genres_label=_join_or_unknown(record.genre_names),
        platforms_label=_join_or_unknown(record.platform_names),
        developers_label=_join_or_unknown(record.developer_names),
        publishers_label=_join_or_unknown(record.publisher_names),
        description=record.description or NO_DESCRIPTION,
        website=record.website,
        is_favorite=is_favorite,
        user_rating=user_rating,
    )


def build_cards(view: CatalogView, favorite_ids: set[str]) -> list[GameCard]:
    """Cards for every record on a view, marking favorites by stringified id."""
    return [build_card(r, is_favorite=r.key in favorite_ids) for r in view.records]


def empty_state_message(view: CatalogView) -> list[str]:
    """Lines to show instead of cards; empty when the view has records."""
    if view.empty_state is EmptyState.NO_MATCHES:
        return ["No games found.", "Try modifying your filters or search."]
    if view.empty_state is EmptyState.NO_GAMES:
        return ["No games found."]
    if view.empty_state is EmptyState.NO_FAVORITES:
        return ["You have no favorite games yet."]
    return []


def error_message(view: CatalogView) -> str | None:
    """Load error text; the renderer pairs it with a retry action."""
    if view.error is None:
        return None
    return "Unable to load games. Please try again later."


def rating_confirmation(value: int) -> str:
    return f"Thank you! You rated this game {value}/5 stars."
