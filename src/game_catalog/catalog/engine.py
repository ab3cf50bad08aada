"""
Catalog state engine.

Owns the fetched record set, the active filter criteria, the page
position, and the view mode, and turns them into a render-ready
CatalogView after every operation. The presentation layer only calls
these operations and renders what comes back.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from game_catalog.catalog.coordinator import PageSource, RemoteFetchCoordinator
from game_catalog.catalog.filters import ALL, RatingSort, derive
from game_catalog.catalog.state import CatalogState, ViewMode
from game_catalog.config import CatalogConfig, Settings, get_settings
from game_catalog.contracts import GameId, GameRecord
from game_catalog.fetching import ListingClient, NetworkError
from game_catalog.logger import get_logger
from game_catalog.storage import (
    FavoritesStore,
    JsonFileStore,
    KeyValueStore,
    RatingsStore,
)
from game_catalog.utils import Debouncer


class EmptyState(str, Enum):
    """Why a view has no records."""

    NONE = "none"
    NO_GAMES = "no_games"
    NO_MATCHES = "no_matches"
    NO_FAVORITES = "no_favorites"


@dataclass(frozen=True)
class CatalogView:
    """A page ready to render, with its pagination metadata."""

    mode: ViewMode
    records: list[GameRecord]
    current_page: int
    total_pages: int
    total_count: int
    empty_state: EmptyState = EmptyState.NONE
    loading: bool = False
    error: NetworkError | None = None

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def page_label(self) -> str:
        return f"Page {self.current_page} / {self.total_pages or 1} ({self.total_count} games)"


class CatalogEngine:
    """
    The catalog state engine.

    Example:
        >>> async with CatalogEngine.from_settings() as engine:
        ...     view = await engine.load()
        ...     view = engine.set_genre_filter("RPG")
        ...     view = engine.change_page(1)
    """

    def __init__(
        self,
        coordinator: RemoteFetchCoordinator,
        favorites: FavoritesStore,
        ratings: RatingsStore,
        *,
        config: CatalogConfig | None = None,
        state: CatalogState | None = None,
    ) -> None:
        self._config = config or get_settings().catalog
        self._coordinator = coordinator
        self._favorites = favorites
        self._ratings = ratings
        self.state = state or CatalogState.create(page_size=self._config.page_size)
        self._scroll_in_flight = False
        self._search_debouncer = Debouncer(
            self.search,
            wait_seconds=self._config.search_debounce_seconds,
        )
        self._logger = get_logger(__name__, component="engine")

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        source: PageSource | None = None,
        store: KeyValueStore | None = None,
    ) -> "CatalogEngine":
        """
        Wire an engine from configuration.

        Args:
            settings: Settings to use (defaults to the cached settings)
            source: Page source (defaults to a ListingClient)
            store: Key-value store (defaults to a JsonFileStore in the profile dir)
        """
        settings = settings or get_settings()
        source = source or ListingClient(
            base_url=settings.listing.base_url,
            limit=settings.listing.fetch_limit,
            retry_config=settings.retry,
            timeout=settings.listing.timeout_seconds,
        )
        store = store or JsonFileStore(settings.storage.profile_dir)
        return cls(
            RemoteFetchCoordinator(source),
            FavoritesStore(store),
            RatingsStore(store),
            config=settings.catalog,
        )

    async def aclose(self) -> None:
        """Cancel pending searches and close the page source if it holds a connection."""
        self._search_debouncer.cancel()
        close = getattr(self._coordinator.source, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "CatalogEngine":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return self._coordinator.loading

    async def load(self) -> CatalogView:
        """
        Fresh fetch of the first remote page.

        On failure the previous records stay in place and the error is
        exposed on the view until the next successful load.
        """
        try:
            listing = await self._coordinator.fetch_page(self.state, 1, append=False)
        except NetworkError as e:
            self.state.error = e
            return self.current_view()

        if listing is not None:
            self.state.error = None
            self.state.pagination.reset()
            self._recompute()
        return self.current_view()

    async def retry(self) -> CatalogView:
        """Retry action offered next to a load error."""
        return await self.load()

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    def search(self, term: str) -> CatalogView:
        """Filter by name substring; an empty term shows everything again."""
        return self._apply_criteria(search_term=term)

    def schedule_search(self, term: str) -> None:
        """Debounced search for keystroke input. Must run inside the event loop."""
        self._search_debouncer.call(term)

    @property
    def search_pending(self) -> bool:
        return self._search_debouncer.pending

    def set_genre_filter(self, genre: str) -> CatalogView:
        """
        Raises:
            ValueError: If the genre is neither "all" nor an offered option
        """
        if genre != ALL and genre not in self._config.allowed_genres:
            raise ValueError(f"Unknown genre filter: {genre!r}")
        return self._apply_criteria(genre=genre)

    def set_platform_filter(self, platform: str) -> CatalogView:
        """
        Raises:
            ValueError: If the platform is neither "all" nor an offered family
        """
        if platform != ALL and platform not in self._config.allowed_platforms:
            raise ValueError(f"Unknown platform filter: {platform!r}")
        return self._apply_criteria(platform=platform)

    def set_rating_sort(self, sort: RatingSort | str) -> CatalogView:
        """
        Raises:
            ValueError: If ``sort`` is not a RatingSort value
        """
        return self._apply_criteria(rating_sort=RatingSort(sort))

    def filter_choices(self) -> dict[str, list[str]]:
        """Options the filters offer, "all" first."""
        return {
            "genres": [ALL, *self._config.allowed_genres],
            "platforms": [ALL, *self._config.allowed_platforms],
            "sorts": [s.value for s in RatingSort],
        }

    def _apply_criteria(self, **changes: Any) -> CatalogView:
        self.state.criteria = self.state.criteria.with_changes(**changes)
        self.state.pagination.reset()
        self._recompute()
        self._logger.debug("Criteria changed", **{k: str(v) for k, v in changes.items()})
        return self.current_view()

    def _recompute(self) -> None:
        self.state.filtered_records = derive(self.state.all_records, self.state.criteria)
        self.state.pagination.clamp(len(self.state.filtered_records))

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------

    def change_page(self, direction: int) -> CatalogView:
        """
        Move one page back (-1) or forward (+1).

        Moves past the first or last filtered page are ignored.
        """
        if direction not in (-1, 1):
            raise ValueError(f"Page direction must be -1 or 1, got {direction}")
        self.state.pagination.move(direction, len(self.state.filtered_records))
        return self.current_view()

    def _can_extend_remote(self) -> bool:
        return (
            self.state.has_fetched
            and self.state.pagination.has_more_remote
            and len(self.state.all_records) < self._config.max_accumulated_records
        )

    async def on_scroll_near_end(self) -> CatalogView:
        """
        Infinite scroll step.

        Advances one local page while the filtered view has more pages;
        once it is exhausted, appends the next remote page (bounded by
        the accumulated-record cap) and advances into it. Triggers are
        ignored while a step or a fresh load is running, and outside the
        catalog view.
        """
        if (
            self.state.view_mode is not ViewMode.CATALOG
            or self._coordinator.loading
            or self._scroll_in_flight
        ):
            return self.current_view()

        pagination = self.state.pagination
        if pagination.move(1, len(self.state.filtered_records)):
            return self.current_view()

        if not self._can_extend_remote():
            return self.current_view()

        self._scroll_in_flight = True
        try:
            await self._coordinator.fetch_page(
                self.state,
                pagination.remote_current_page + 1,
                append=True,
            )
        except NetworkError as e:
            self._logger.warning("Could not extend catalog", error=str(e))
        else:
            self._recompute()
            pagination.move(1, len(self.state.filtered_records))
        finally:
            self._scroll_in_flight = False

        return self.current_view()

    # ------------------------------------------------------------------
    # Favorites and ratings
    # ------------------------------------------------------------------

    def toggle_favorite(self, record: GameRecord) -> CatalogView:
        self._favorites.toggle(record)
        return self.current_view()

    def is_favorite(self, game_id: GameId) -> bool:
        return self._favorites.contains(game_id)

    def favorites(self) -> list[GameRecord]:
        return self._favorites.all()

    def set_rating(self, game_id: GameId, value: int) -> CatalogView:
        """
        Raises:
            InvalidRatingError: If value is not an integer from 1 to 5
        """
        self._ratings.set(game_id, value)
        return self.current_view()

    def get_rating(self, game_id: GameId) -> int | None:
        return self._ratings.get(game_id)

    def get_record(self, game_id: GameId) -> GameRecord | None:
        """First fetched record with this id, else the favorite snapshot."""
        key = str(game_id)
        for record in self.state.all_records:
            if record.key == key:
                return record
        return self._favorites.get(game_id)

    # ------------------------------------------------------------------
    # View mode
    # ------------------------------------------------------------------

    def toggle_view_mode(self) -> CatalogView:
        self.state.view_mode = (
            ViewMode.FAVORITES if self.state.view_mode is ViewMode.CATALOG else ViewMode.CATALOG
        )
        self._logger.debug("View mode changed", mode=self.state.view_mode.value)
        return self.current_view()

    def show_catalog(self) -> CatalogView:
        self.state.view_mode = ViewMode.CATALOG
        return self.current_view()

    def current_view(self) -> CatalogView:
        if self.state.view_mode is ViewMode.FAVORITES:
            return self._favorites_view()
        return self._catalog_view()

    def _catalog_view(self) -> CatalogView:
        filtered = self.state.filtered_records
        pagination = self.state.pagination

        if filtered:
            empty_state = EmptyState.NONE
        elif self.state.criteria.is_filtering:
            empty_state = EmptyState.NO_MATCHES
        else:
            empty_state = EmptyState.NO_GAMES

        return CatalogView(
            mode=ViewMode.CATALOG,
            records=pagination.slice(filtered),
            current_page=pagination.current_page,
            total_pages=pagination.total_pages(len(filtered)),
            total_count=len(filtered),
            empty_state=empty_state,
            loading=self._coordinator.loading,
            error=self.state.error,
        )

    def _favorites_view(self) -> CatalogView:
        records = self._favorites.all()
        return CatalogView(
            mode=ViewMode.FAVORITES,
            records=records,
            current_page=1,
            total_pages=1 if records else 0,
            total_count=len(records),
            empty_state=EmptyState.NONE if records else EmptyState.NO_FAVORITES,
            loading=self._coordinator.loading,
            error=self.state.error,
        )
