"""
Command-line interface for the game catalog client.

A thin presentation layer: every command calls engine operations
and prints the resulting view as JSON.
"""

import asyncio
import json
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from game_catalog.catalog import CatalogEngine, CatalogView
from game_catalog.catalog.presenter import (
    GameCard,
    build_cards,
    build_details,
    empty_state_message,
    error_message,
    rating_confirmation,
)
from game_catalog.config import get_settings
from game_catalog.logger import get_logger, setup_logging
from game_catalog.storage import InvalidRatingError

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str))


def _card_dict(card: GameCard) -> dict[str, Any]:
    return {**asdict(card), "favorite_label": card.favorite_label}


def _view_dict(engine: CatalogEngine, view: CatalogView) -> dict[str, Any]:
    favorite_ids = {r.key for r in engine.favorites()}
    return {
        "mode": view.mode.value,
        "page": view.page_label,
        "current_page": view.current_page,
        "total_pages": view.total_pages,
        "total_count": view.total_count,
        "has_previous": view.has_previous,
        "has_next": view.has_next,
        "cards": [_card_dict(c) for c in build_cards(view, favorite_ids)],
        "messages": empty_state_message(view),
    }


def _parse_game_id(raw: str) -> int | str:
    return int(raw) if raw.isdigit() else raw


async def _load(engine: CatalogEngine) -> CatalogView:
    view = await engine.load()
    if view.error is not None:
        raise RuntimeError(error_message(view) or str(view.error))
    return view


async def cmd_test_config() -> None:
    """Show the effective configuration."""
    settings = get_settings()

    output = CLIOutput(
        success=True,
        command="test-config",
        data={
            "environment": settings.environment,
            "listing_url": settings.listing.base_url,
            "fetch_limit": settings.listing.fetch_limit,
            "page_size": settings.catalog.page_size,
            "max_accumulated_records": settings.catalog.max_accumulated_records,
            "profile_dir": str(settings.storage.profile_dir),
            "allowed_genres": settings.catalog.allowed_genres,
            "allowed_platforms": settings.catalog.allowed_platforms,
        },
    )
    print_json(output)


async def cmd_browse(
    *,
    page: int = 1,
    search: str | None = None,
    genre: str | None = None,
    platform: str | None = None,
    sort: str | None = None,
) -> None:
    """Fetch the catalog, apply criteria, and print one page."""
    logger.info("Browsing catalog", page=page, search=search, genre=genre, platform=platform)

    async with CatalogEngine.from_settings() as engine:
        view = await _load(engine)
        if search:
            view = engine.search(search)
        if genre:
            view = engine.set_genre_filter(genre)
        if platform:
            view = engine.set_platform_filter(platform)
        if sort:
            view = engine.set_rating_sort(sort)
        for _ in range(page - 1):
            if not view.has_next:
                break
            view = engine.change_page(1)

        print_json(CLIOutput(success=True, command="browse", data=_view_dict(engine, view)))


async def cmd_favorites() -> None:
    """List saved favorites; no network access needed."""
    async with CatalogEngine.from_settings() as engine:
        view = engine.toggle_view_mode()
        print_json(CLIOutput(success=True, command="favorites", data=_view_dict(engine, view)))


async def cmd_favorite(game_id: int | str) -> None:
    """Toggle a game in the favorites."""
    async with CatalogEngine.from_settings() as engine:
        record = engine.get_record(game_id)
        if record is None:
            await _load(engine)
            record = engine.get_record(game_id)
        if record is None:
            print_json(
                CLIOutput(success=False, command="favorite", error=f"Game {game_id} not found")
            )
            sys.exit(1)

        engine.toggle_favorite(record)
        print_json(
            CLIOutput(
                success=True,
                command="favorite",
                data={"game_id": record.id, "favorite": engine.is_favorite(record.id)},
            )
        )


async def cmd_rate(game_id: int | str, value: int) -> None:
    """Store a 1-5 rating for a game."""
    async with CatalogEngine.from_settings() as engine:
        engine.set_rating(game_id, value)
        print_json(
            CLIOutput(
                success=True,
                command="rate",
                data={"game_id": game_id, "rating": value, "message": rating_confirmation(value)},
            )
        )


async def cmd_show(game_id: int | str) -> None:
    """Print the details panel for a game."""
    async with CatalogEngine.from_settings() as engine:
        record = engine.get_record(game_id)
        if record is None:
            await _load(engine)
            record = engine.get_record(game_id)
        if record is None:
            print_json(CLIOutput(success=False, command="show", error=f"Game {game_id} not found"))
            sys.exit(1)

        details = build_details(
            record,
            is_favorite=engine.is_favorite(record.id),
            user_rating=engine.get_rating(record.id),
        )
        data = {
            **asdict(details),
            "favorite_label": details.favorite_label,
            "user_rating_label": details.user_rating_label,
        }
        print_json(CLIOutput(success=True, command="show", data=data))


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Game Catalog CLI
================

Usage: game-catalog <command> [arguments]

Commands:
  test-config                 Show effective configuration
  browse                      Fetch and print one page of the catalog
  favorites                   List favorite games
  favorite <game_id>          Add or remove a favorite
  rate <game_id> <1-5>        Rate a game
  show <game_id>              Show game details

Browse options:
  --page <n>                  Local page number (default 1)
  --search <term>             Name contains term (case-insensitive)
  --genre <genre>             Action, RPG, Adventure, Simulation
  --platform <platform>       PC, PlayStation, Xbox, Switch
  --sort <asc|desc>           Sort by rating

Examples:
  game-catalog browse --genre RPG --sort desc
  game-catalog rate 42 5
"""
    print(usage)


def _option(name: str) -> str | None:
    if name in sys.argv:
        idx = sys.argv.index(name)
        if idx + 1 < len(sys.argv):
            return sys.argv[idx + 1]
    return None


def _require_arg(position: int, label: str) -> str:
    if len(sys.argv) <= position:
        print(f"Error: {label} required")
        sys.exit(1)
    return sys.argv[position]


def main() -> None:
    """Main CLI entry point."""
    setup_logging()

    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    command = sys.argv[1]

    try:
        if command == "test-config":
            asyncio.run(cmd_test_config())

        elif command == "browse":
            page = _option("--page")
            asyncio.run(
                cmd_browse(
                    page=int(page) if page else 1,
                    search=_option("--search"),
                    genre=_option("--genre"),
                    platform=_option("--platform"),
                    sort=_option("--sort"),
                )
            )

        elif command == "favorites":
            asyncio.run(cmd_favorites())

        elif command == "favorite":
            asyncio.run(cmd_favorite(_parse_game_id(_require_arg(2, "game_id"))))

        elif command == "rate":
            game_id = _parse_game_id(_require_arg(2, "game_id"))
            value = int(_require_arg(3, "rating"))
            asyncio.run(cmd_rate(game_id, value))

        elif command == "show":
            asyncio.run(cmd_show(_parse_game_id(_require_arg(2, "game_id"))))

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except InvalidRatingError as e:
        print_json(CLIOutput(success=False, command=command, error=str(e)))
        sys.exit(2)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        print_json(CLIOutput(success=False, command=command, error=str(e)))
        sys.exit(1)


if __name__ == "__main__":
    main()
