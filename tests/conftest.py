"""Shared fixtures: record factories and an in-memory page source."""

import asyncio
import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, cast

import pytest

from game_catalog.catalog import CatalogEngine, RemoteFetchCoordinator
from game_catalog.config import CatalogConfig
from game_catalog.contracts import GameRecord, ListingPage
from game_catalog.storage import FavoritesStore, KeyValueStore, MemoryStore, RatingsStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


def make_record(
    game_id: int | str,
    name: str | None = None,
    *,
    genres: Sequence[str] = (),
    platforms: Sequence[str] = (),
    rating: float | None = None,
    **extra: Any,
) -> GameRecord:
    """Build a record shaped like a listing API item."""
    return GameRecord.model_validate(
        {
            "id": game_id,
            "name": name if name is not None else f"Game {game_id}",
            "rating": rating,
            "genres": [{"name": g} for g in genres],
            "platforms": [{"platform": {"name": p}} for p in platforms],
            **extra,
        }
    )


class FakePageSource:
    """
    In-memory listing API.

    ``gate`` holds every fetch until it is set; ``fail`` makes every
    fetch raise it.
    """

    def __init__(
        self,
        pages: dict[int, list[GameRecord]] | None = None,
        *,
        total_pages: int | None = None,
        gate: asyncio.Event | None = None,
        fail: Exception | None = None,
    ) -> None:
        self.pages = pages or {}
        self.total_pages = total_pages if total_pages is not None else max(len(self.pages), 1)
        self.gate = gate
        self.fail = fail
        self.calls: list[int] = []

    async def fetch_page(self, page: int, *, limit: int | None = None) -> ListingPage:
        self.calls.append(page)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail is not None:
            raise self.fail
        return ListingPage(results=self.pages.get(page, []), total_pages=self.total_pages)


@pytest.fixture
def record_factory() -> Callable[..., GameRecord]:
    return make_record


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine_factory(memory_store: MemoryStore) -> Callable[..., CatalogEngine]:
    """Build an engine over a FakePageSource; keyword args go to CatalogConfig."""

    def _build(
        source: FakePageSource,
        *,
        store: KeyValueStore | None = None,
        **config: Any,
    ) -> CatalogEngine:
        kv = store if store is not None else memory_store
        return CatalogEngine(
            RemoteFetchCoordinator(source),
            FavoritesStore(kv),
            RatingsStore(kv),
            config=CatalogConfig(**config),
        )

    return _build
