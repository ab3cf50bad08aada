"""
Search, filter, and sort derivation for the catalog view.

Everything here is pure: the filtered view is a function of the
record list and the criteria only.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from game_catalog.contracts import GameRecord

ALL = "all"


class PlatformFamily(str, Enum):
    """Normalized platform categories offered by the platform filter."""

    PC = "PC"
    PLAYSTATION = "PlayStation"
    XBOX = "Xbox"
    SWITCH = "Switch"


class RatingSort(str, Enum):
    """Ordering applied to the filtered view."""

    NONE = "none"
    ASCENDING = "asc"
    DESCENDING = "desc"


def matches_platform_family(platform_name: str, family: str) -> bool:
    """
    Check whether a raw platform name belongs to a filter family.

    Families other than the four known ones match by exact name.
    """
    if family == PlatformFamily.PLAYSTATION:
        return "PlayStation" in platform_name
    if family == PlatformFamily.XBOX:
        return "Xbox" in platform_name
    if family == PlatformFamily.SWITCH:
        return "Switch" in platform_name or "Nintendo Switch" in platform_name
    if family == PlatformFamily.PC:
        return platform_name == "PC" or "PC" in platform_name or platform_name == "Windows"
    return platform_name == family


# Checked in this order when a name could belong to several families
_FOLD_ORDER = (
    PlatformFamily.PLAYSTATION,
    PlatformFamily.XBOX,
    PlatformFamily.SWITCH,
    PlatformFamily.PC,
)


def fold_platform_family(platform_name: str) -> PlatformFamily | str:
    """
    Fold a raw platform name into its family.

    Examples:
        >>> fold_platform_family("PlayStation 5")
        <PlatformFamily.PLAYSTATION: 'PlayStation'>
        >>> fold_platform_family("Windows")
        <PlatformFamily.PC: 'PC'>
        >>> fold_platform_family("Dreamcast")
        'Dreamcast'
    """
    for family in _FOLD_ORDER:
        if matches_platform_family(platform_name, family):
            return family
    return platform_name


@dataclass(frozen=True)
class FilterCriteria:
    """Search and filter selections applied to the catalog."""

    search_term: str = ""
    genre: str = ALL
    platform: str = ALL
    rating_sort: RatingSort = RatingSort.NONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "search_term", normalize_search_term(self.search_term))

    @property
    def is_filtering(self) -> bool:
        """True when search, genre, or platform narrows the view (sorting does not)."""
        return bool(self.search_term) or self.genre != ALL or self.platform != ALL

    def with_changes(self, **changes: object) -> "FilterCriteria":
        return replace(self, **changes)  # type: ignore[arg-type]


def normalize_search_term(term: str | None) -> str:
    return (term or "").strip().lower()


@dataclass
class FilterOptions:
    """
    Distinct genres and platform families seen in fetched records.

    Grows incrementally: each fetch feeds only its own batch.
    """

    genres: set[str] = field(default_factory=set)
    platforms: set[str] = field(default_factory=set)

    def update(self, records: Iterable[GameRecord]) -> None:
        for record in records:
            self.genres.update(record.genre_names)
            for name in record.platform_names:
                family = fold_platform_family(name)
                self.platforms.add(family.value if isinstance(family, PlatformFamily) else family)


def _matches_search(record: GameRecord, term: str) -> bool:
    return term in record.name.lower()


def _matches_genre(record: GameRecord, genre: str) -> bool:
    return any(name == genre for name in record.genre_names)


def _matches_platform(record: GameRecord, platform: str) -> bool:
    return any(matches_platform_family(name, platform) for name in record.platform_names)


def derive(records: Sequence[GameRecord], criteria: FilterCriteria) -> list[GameRecord]:
    """
    Apply search, genre, platform, then rating sort.

    Args:
        records: Catalog records in fetch order
        criteria: Active selections

    Returns:
        New list; the input is never modified
    """
    filtered = list(records)

    if criteria.search_term:
        filtered = [r for r in filtered if _matches_search(r, criteria.search_term)]

    if criteria.genre != ALL:
        filtered = [r for r in filtered if _matches_genre(r, criteria.genre)]

    if criteria.platform != ALL:
        filtered = [r for r in filtered if _matches_platform(r, criteria.platform)]

    # sorted() is stable, also with reverse=True
    if criteria.rating_sort == RatingSort.ASCENDING:
        filtered = sorted(filtered, key=lambda r: r.effective_rating)
    elif criteria.rating_sort == RatingSort.DESCENDING:
        filtered = sorted(filtered, key=lambda r: r.effective_rating, reverse=True)

    return filtered
