"""Tests for the catalog state engine."""

import asyncio
from collections.abc import Callable
from itertools import product

import pytest
from conftest import FakePageSource, make_record

from game_catalog.catalog import CatalogEngine, EmptyState, RatingSort, ViewMode
from game_catalog.fetching import NetworkError
from game_catalog.storage import InvalidRatingError, MemoryStore

EngineFactory = Callable[..., CatalogEngine]


def hundred_records() -> list:
    """100 records, the first 12 of them RPGs."""
    return [
        make_record(
            i,
            f"Game {i}",
            genres=["RPG"] if i <= 12 else ["Action"],
            platforms=["PC"] if i % 2 else ["PlayStation 5"],
            rating=(i % 50) / 10,
        )
        for i in range(1, 101)
    ]


class TestLoad:
    """Tests for fresh loads."""

    @pytest.mark.asyncio
    async def test_load_populates_first_page(self, engine_factory: EngineFactory) -> None:
        """Test a load shows the first 32 records."""
        engine = engine_factory(FakePageSource({1: hundred_records()}, total_pages=3))

        view = await engine.load()

        assert view.mode is ViewMode.CATALOG
        assert view.total_count == 100
        assert view.total_pages == 4
        assert view.current_page == 1
        assert [r.id for r in view.records] == list(range(1, 33))
        assert view.page_label == "Page 1 / 4 (100 games)"
        assert engine.state.pagination.remote_total_pages == 3

    @pytest.mark.asyncio
    async def test_failed_load_keeps_records(self, engine_factory: EngineFactory) -> None:
        """Test a failed reload leaves the previous catalog in place."""
        source = FakePageSource({1: hundred_records()}, total_pages=3)
        engine = engine_factory(source)
        await engine.load()

        source.fail = NetworkError("HTTP error: 500", status_code=500)
        view = await engine.load()

        assert view.error is not None
        assert view.total_count == 100
        assert len(engine.state.all_records) == 100
        assert engine.loading is False

    @pytest.mark.asyncio
    async def test_retry_clears_error(self, engine_factory: EngineFactory) -> None:
        """Test retrying after a failure recovers."""
        source = FakePageSource({1: hundred_records()}, fail=NetworkError("offline"))
        engine = engine_factory(source)

        failed = await engine.load()
        assert failed.error is not None
        assert failed.empty_state is EmptyState.NO_GAMES

        source.fail = None
        view = await engine.retry()

        assert view.error is None
        assert view.total_count == 100
        assert source.calls == [1, 1]

    @pytest.mark.asyncio
    async def test_fresh_load_resets_page(self, engine_factory: EngineFactory) -> None:
        """Test a reload returns to page 1."""
        engine = engine_factory(FakePageSource({1: hundred_records()}))
        await engine.load()
        engine.change_page(1)

        view = await engine.load()

        assert view.current_page == 1


class TestFiltersAndPaging:
    """Tests for criteria changes and page moves."""

    @pytest.mark.asyncio
    async def test_rpg_scenario_page_moves_are_noops(self, engine_factory: EngineFactory) -> None:
        """Test 12 RPG matches fit one page, so both directions are ignored."""
        engine = engine_factory(FakePageSource({1: hundred_records()}, total_pages=3))
        await engine.load()

        view = engine.set_genre_filter("RPG")
        assert view.total_count == 12
        assert view.total_pages == 1

        assert engine.change_page(1).current_page == 1
        assert engine.change_page(-1).current_page == 1
        assert [r.id for r in engine.current_view().records] == list(range(1, 13))

    @pytest.mark.asyncio
    async def test_change_page_moves_within_range(self, engine_factory: EngineFactory) -> None:
        """Test paging through the filtered view."""
        engine = engine_factory(FakePageSource({1: hundred_records()}))
        await engine.load()

        view = engine.change_page(1)
        assert view.current_page == 2
        assert view.records[0].id == 33
        assert view.has_previous is True
        assert view.has_next is True

        for _ in range(5):
            view = engine.change_page(1)
        assert view.current_page == 4
        assert len(view.records) == 4
        assert view.has_next is False

    @pytest.mark.asyncio
    async def test_change_page_rejects_big_steps(self, engine_factory: EngineFactory) -> None:
        """Test only single-step moves are accepted."""
        engine = engine_factory(FakePageSource({1: hundred_records()}))
        await engine.load()

        with pytest.raises(ValueError):
            engine.change_page(2)

    @pytest.mark.asyncio
    async def test_criteria_change_resets_page(self, engine_factory: EngineFactory) -> None:
        """Test selecting a filter goes back to page 1."""
        engine = engine_factory(FakePageSource({1: hundred_records()}))
        await engine.load()
        engine.change_page(1)
        engine.change_page(1)

        view = engine.set_platform_filter("PC")

        assert view.current_page == 1
        assert view.total_count == 50

    @pytest.mark.asyncio
    async def test_pagination_invariant_holds(self, engine_factory: EngineFactory) -> None:
        """Test 1 <= page <= max(1, ceil(count/32)) for every criteria combination."""
        engine = engine_factory(FakePageSource({1: hundred_records()}))
        await engine.load()

        genres = ["all", "RPG", "Action", "Simulation"]
        platforms = ["all", "PC", "PlayStation", "Xbox"]
        terms = ["", "game 1", "nothing"]
        for genre, platform, term in product(genres, platforms, terms):
            engine.set_genre_filter(genre)
            engine.set_platform_filter(platform)
            view = engine.search(term)
            for direction in (1, 1, 1, -1, 1, 1, 1, 1):
                view = engine.change_page(direction)
                upper = max(1, -(-view.total_count // 32))
                assert 1 <= view.current_page <= upper

    @pytest.mark.asyncio
    async def test_search_and_clear_without_refetch(self, engine_factory: EngineFactory) -> None:
        """Test 'zeld' finds Zelda and clearing restores everything locally."""
        records = [make_record(1, "The Legend of Zelda"), make_record(2, "Halo")]
        source = FakePageSource({1: records})
        engine = engine_factory(source)
        await engine.load()

        view = engine.search("zeld")
        assert [r.name for r in view.records] == ["The Legend of Zelda"]

        view = engine.search("")
        assert view.total_count == 2
        assert source.calls == [1]

    @pytest.mark.asyncio
    async def test_empty_states(self, engine_factory: EngineFactory) -> None:
        """Test empty views say whether filters are responsible."""
        engine = engine_factory(FakePageSource({1: []}))
        view = await engine.load()
        assert view.empty_state is EmptyState.NO_GAMES

        view = engine.search("anything")
        assert view.empty_state is EmptyState.NO_MATCHES
        assert view.current_page == 1
        assert view.total_pages == 0

    @pytest.mark.asyncio
    async def test_rating_sort(self, engine_factory: EngineFactory) -> None:
        """Test rating sort accepts enum members and raw values."""
        records = [make_record(1, rating=2.0), make_record(2, rating=4.0), make_record(3)]
        engine = engine_factory(FakePageSource({1: records}))
        await engine.load()

        assert [r.id for r in engine.set_rating_sort("desc").records] == [2, 1, 3]
        assert [r.id for r in engine.set_rating_sort(RatingSort.ASCENDING).records] == [3, 1, 2]
        assert [r.id for r in engine.set_rating_sort("none").records] == [1, 2, 3]

    def test_unknown_filter_values_rejected(self, engine_factory: EngineFactory) -> None:
        """Test values outside the offered options raise."""
        engine = engine_factory(FakePageSource())

        with pytest.raises(ValueError):
            engine.set_genre_filter("Puzzle")
        with pytest.raises(ValueError):
            engine.set_platform_filter("Dreamcast")
        with pytest.raises(ValueError):
            engine.set_rating_sort("sideways")

    def test_filter_choices(self, engine_factory: EngineFactory) -> None:
        """Test the offered options list 'all' first."""
        choices = engine_factory(FakePageSource()).filter_choices()

        assert choices["genres"] == ["all", "Action", "RPG", "Adventure", "Simulation"]
        assert choices["platforms"] == ["all", "PC", "PlayStation", "Xbox", "Switch"]


class TestInfiniteScroll:
    """Tests for on_scroll_near_end()."""

    @staticmethod
    def paged_source(**kwargs: object) -> FakePageSource:
        pages = {
            p: [make_record(p * 1000 + i, f"Game {p}-{i}") for i in range(100)]
            for p in (1, 2, 3)
        }
        return FakePageSource(pages, total_pages=3, **kwargs)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_local_pages_first_then_remote(self, engine_factory: EngineFactory) -> None:
        """Test local pages are used up before the next remote page is appended."""
        source = self.paged_source()
        engine = engine_factory(source)
        await engine.load()

        for expected in (2, 3, 4):
            assert (await engine.on_scroll_near_end()).current_page == expected
        assert source.calls == [1]

        view = await engine.on_scroll_near_end()

        assert source.calls == [1, 2]
        assert len(engine.state.all_records) == 200
        assert engine.state.pagination.remote_current_page == 2
        assert view.current_page == 5
        assert view.total_pages == 7

    @pytest.mark.asyncio
    async def test_stops_at_record_cap(self, engine_factory: EngineFactory) -> None:
        """Test no remote page is fetched once the cap is reached."""
        source = self.paged_source()
        engine = engine_factory(source, max_accumulated_records=150)
        await engine.load()

        for _ in range(20):
            await engine.on_scroll_near_end()

        assert source.calls == [1, 2]
        assert len(engine.state.all_records) == 200

    @pytest.mark.asyncio
    async def test_stops_when_remote_exhausted(self, engine_factory: EngineFactory) -> None:
        """Test scrolling ends after the last remote page."""
        source = self.paged_source()
        engine = engine_factory(source)
        await engine.load()

        for _ in range(40):
            await engine.on_scroll_near_end()

        assert source.calls == [1, 2, 3]
        assert engine.current_view().current_page == engine.current_view().total_pages

    @pytest.mark.asyncio
    async def test_concurrent_triggers_ignored(self, engine_factory: EngineFactory) -> None:
        """Test a second trigger during an append does nothing."""
        source = self.paged_source()
        engine = engine_factory(source, page_size=100)
        await engine.load()

        source.gate = asyncio.Event()
        first = asyncio.create_task(engine.on_scroll_near_end())
        await asyncio.sleep(0)

        await engine.on_scroll_near_end()
        assert source.calls == [1, 2]

        source.gate.set()
        view = await first

        assert view.current_page == 2
        assert source.calls == [1, 2]

    @pytest.mark.asyncio
    async def test_append_failure_keeps_state(self, engine_factory: EngineFactory) -> None:
        """Test a failed append changes nothing and allows another try."""
        source = self.paged_source()
        engine = engine_factory(source, page_size=100)
        await engine.load()

        source.fail = NetworkError("offline")
        view = await engine.on_scroll_near_end()

        assert view.current_page == 1
        assert len(engine.state.all_records) == 100
        assert view.error is None

        source.fail = None
        assert (await engine.on_scroll_near_end()).current_page == 2

    @pytest.mark.asyncio
    async def test_ignored_in_favorites_view(self, engine_factory: EngineFactory) -> None:
        """Test scrolling the favorites view never fetches."""
        source = self.paged_source()
        engine = engine_factory(source, page_size=100)
        await engine.load()
        engine.toggle_view_mode()

        await engine.on_scroll_near_end()

        assert source.calls == [1]

    @pytest.mark.asyncio
    async def test_ignored_before_first_load(self, engine_factory: EngineFactory) -> None:
        """Test no append happens before anything was fetched."""
        source = self.paged_source()
        engine = engine_factory(source)

        await engine.on_scroll_near_end()

        assert source.calls == []


class TestFavoritesAndRatings:
    """Tests for favorites, ratings and view mode."""

    @pytest.mark.asyncio
    async def test_toggle_view_mode(self, engine_factory: EngineFactory) -> None:
        """Test favorites view lists every favorite unfiltered and unpaginated."""
        records = [make_record(i, genres=["Action"]) for i in range(1, 41)]
        engine = engine_factory(FakePageSource({1: records}))
        await engine.load()
        for record in records:
            engine.toggle_favorite(record)
        engine.set_genre_filter("RPG")

        view = engine.toggle_view_mode()

        assert view.mode is ViewMode.FAVORITES
        assert view.total_count == 40
        assert len(view.records) == 40

        view = engine.toggle_view_mode()
        assert view.mode is ViewMode.CATALOG
        assert view.empty_state is EmptyState.NO_MATCHES

    def test_empty_favorites_view(self, engine_factory: EngineFactory) -> None:
        """Test the favorites empty state."""
        view = engine_factory(FakePageSource()).toggle_view_mode()
        assert view.empty_state is EmptyState.NO_FAVORITES
        assert view.total_pages == 0

    def test_show_catalog_from_favorites(self, engine_factory: EngineFactory) -> None:
        """Test returning to the catalog from any mode."""
        engine = engine_factory(FakePageSource())
        engine.toggle_view_mode()
        assert engine.show_catalog().mode is ViewMode.CATALOG
        assert engine.show_catalog().mode is ViewMode.CATALOG

    def test_toggle_favorite_twice_is_idempotent(
        self,
        engine_factory: EngineFactory,
        memory_store: MemoryStore,
    ) -> None:
        """Test membership and stored content return to the start."""
        engine = engine_factory(FakePageSource())
        record = make_record(42, "Halo")
        engine.toggle_favorite(make_record(1, "Kept"))
        before = memory_store.raw("favorites")

        engine.toggle_favorite(record)
        assert engine.is_favorite(42)
        engine.toggle_favorite(record)

        assert not engine.is_favorite(42)
        assert memory_store.raw("favorites") == before

    def test_favorites_survive_restart(
        self,
        engine_factory: EngineFactory,
        memory_store: MemoryStore,
    ) -> None:
        """Test a new engine over the same store sees earlier favorites and ratings."""
        engine = engine_factory(FakePageSource())
        engine.toggle_favorite(make_record(42, "Halo"))
        engine.set_rating(42, 5)

        restarted = engine_factory(FakePageSource(), store=memory_store)

        assert restarted.is_favorite(42)
        assert restarted.get_rating(42) == 5
        assert restarted.get_record(42) is not None

    def test_set_rating_rejects_out_of_range(self, engine_factory: EngineFactory) -> None:
        """Test invalid ratings raise and leave no trace."""
        engine = engine_factory(FakePageSource())

        with pytest.raises(InvalidRatingError):
            engine.set_rating(42, 6)
        assert engine.get_rating(42) is None

    def test_set_rating_overwrites(self, engine_factory: EngineFactory) -> None:
        """Test re-rating replaces the value."""
        engine = engine_factory(FakePageSource())
        engine.set_rating(42, 2)
        engine.set_rating(42, 4)
        assert engine.get_rating(42) == 4

    @pytest.mark.asyncio
    async def test_get_record_prefers_fetched(self, engine_factory: EngineFactory) -> None:
        """Test lookups use the catalog first and fall back to favorites."""
        engine = engine_factory(FakePageSource({1: [make_record(1, "Fresh")]}))
        engine.toggle_favorite(make_record(2, "Saved"))
        await engine.load()

        assert engine.get_record(1).name == "Fresh"  # type: ignore[union-attr]
        assert engine.get_record("2").name == "Saved"  # type: ignore[union-attr]
        assert engine.get_record(3) is None
