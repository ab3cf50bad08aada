"""
Data contracts for the game listing API.

These Pydantic models define the expected structure of listing
responses. Fields the client does not use are kept as extras so a
record can be written back (e.g. as a favorite snapshot) unchanged.
"""

import math
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from game_catalog.logger import get_logger

_logger = get_logger(__name__, component="contracts")

GameId = int | str


class NamedRef(BaseModel):
    """A named entity attached to a game (genre, developer, publisher, platform)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int | str | None = None
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class PlatformEntry(BaseModel):
    """Platform wrapper as returned by the listing API: ``{"platform": {...}}``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    platform: NamedRef | None = None

    @property
    def name(self) -> str:
        return self.platform.name if self.platform else ""


class GameRecord(BaseModel):
    """
    A single game from the listing API.

    Immutable once fetched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: GameId = Field(..., description="Stable game identifier")
    name: str = Field(default="", description="Display name")
    released: str | None = Field(default=None, description="Release date (ISO format)")
    rating: float | None = Field(default=None, description="Average rating, 0.0-5.0")
    background_image: str | None = Field(default=None, description="Cover image URL")
    genres: list[NamedRef] = Field(default_factory=list)
    platforms: list[PlatformEntry] = Field(default_factory=list)
    description: str = Field(default="")
    developers: list[NamedRef] = Field(default_factory=list)
    publishers: list[NamedRef] = Field(default_factory=list)
    website: str | None = Field(default=None)

    @field_validator("genres", "platforms", "developers", "publishers", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        """The API sends null for empty relations."""
        return [] if v is None else v

    @field_validator("name", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("released", "background_image", "website", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def key(self) -> str:
        """Identity used by the local stores."""
        return str(self.id)

    @property
    def genre_names(self) -> list[str]:
        return [g.name for g in self.genres if g.name]

    @property
    def platform_names(self) -> list[str]:
        return [p.name for p in self.platforms if p.name]

    @property
    def developer_names(self) -> list[str]:
        return [d.name for d in self.developers if d.name]

    @property
    def publisher_names(self) -> list[str]:
        return [p.name for p in self.publishers if p.name]

    @property
    def has_rating(self) -> bool:
        return self.rating is not None and not math.isnan(self.rating)

    @property
    def effective_rating(self) -> float:
        """Rating used for sorting; missing or NaN counts as 0."""
        return self.rating if self.has_rating else 0.0  # type: ignore[return-value]

    def snapshot(self) -> dict[str, Any]:
        """Full JSON-serializable copy, extras included."""
        return self.model_dump(mode="json")


class ListingPage(BaseModel):
    """
    One page of the listing API.

    Endpoint: GET <listing-endpoint>?page=<n>&limit=<size>
    """

    model_config = ConfigDict(populate_by_name=True)

    results: list[GameRecord] = Field(default_factory=list)
    total_pages: int = Field(default=1, alias="totalPages")

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data: Any) -> Any:
        """Some deployments return the array of games directly."""
        if isinstance(data, list):
            return {"results": data}
        return data

    @field_validator("results", mode="before")
    @classmethod
    def drop_unreadable_items(cls, v: Any) -> Any:
        """
        Validate items one by one; an unreadable game is skipped, not fatal.

        A ``results`` value that is not a list still fails validation.
        """
        if v is None:
            return []
        if not isinstance(v, list):
            return v

        records: list[GameRecord] = []
        for position, item in enumerate(v):
            try:
                records.append(GameRecord.model_validate(item))
            except ValidationError as e:
                _logger.warning(
                    "Skipping unreadable listing item",
                    position=position,
                    errors=e.error_count(),
                )
        return records

    @field_validator("total_pages", mode="before")
    @classmethod
    def default_total_pages(cls, v: Any) -> Any:
        if v is None:
            return 1
        if isinstance(v, (int, float)) and v < 1:
            return 1
        return v
