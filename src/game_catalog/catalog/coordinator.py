"""
Remote fetch coordinator.

Issues paged fetches against the listing API and folds the results
into the catalog state: fresh fetches replace the record set, append
fetches extend it.
"""

from typing import Protocol

from game_catalog.catalog.state import CatalogState
from game_catalog.contracts import ListingPage
from game_catalog.fetching import NetworkError
from game_catalog.logger import get_logger


class PageSource(Protocol):
    """Anything that can fetch one listing page (ListingClient in production)."""

    async def fetch_page(self, page: int, *, limit: int | None = None) -> ListingPage: ...


class RemoteFetchCoordinator:
    """
    Serializes fresh fetches and applies page results to a CatalogState.

    Only one fresh (non-append) fetch may be in flight; a second one
    started meanwhile is dropped without error. Append fetches neither
    set nor clear ``loading``; the caller limits them. Responses are
    applied in arrival order.
    """

    def __init__(self, source: PageSource) -> None:
        self._source = source
        self._logger = get_logger(__name__, component="coordinator")
        self.loading = False

    @property
    def source(self) -> PageSource:
        return self._source

    async def fetch_page(
        self,
        state: CatalogState,
        page_number: int,
        *,
        append: bool = False,
    ) -> ListingPage | None:
        """
        Fetch one remote page into ``state``.

        Args:
            state: Catalog state to update
            page_number: 1-based remote page
            append: Extend ``all_records`` instead of replacing it

        Returns:
            The fetched page, or None when the call was dropped because
            a fresh fetch was already running

        Raises:
            NetworkError: If the page could not be fetched; ``state`` is unchanged
        """
        if self.loading and not append:
            self._logger.debug("Dropping fetch, another load is in flight", page=page_number)
            return None

        try:
            if not append:
                self.loading = True

            listing = await self._source.fetch_page(page_number)

            if append:
                # Overlapping pages may repeat ids; they are kept as-is
                state.all_records.extend(listing.results)
            else:
                state.all_records = list(listing.results)

            state.filter_options.update(listing.results)
            state.pagination.remote_total_pages = listing.total_pages
            state.pagination.remote_current_page = page_number

            self._logger.info(
                "Applied listing page",
                page=page_number,
                append=append,
                batch=len(listing.results),
                total_records=len(state.all_records),
                remote_total_pages=listing.total_pages,
            )
            return listing

        except NetworkError as e:
            self._logger.error(
                "Listing fetch failed",
                page=page_number,
                append=append,
                error=str(e),
                status_code=e.status_code,
            )
            raise

        finally:
            # Only the fresh fetch that raised the flag may lower it
            if not append:
                self.loading = False
