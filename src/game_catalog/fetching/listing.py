"""
Listing API client.

Fetches one page of game records from the paginated listing endpoint.
"""

import time
from json import JSONDecodeError
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from game_catalog.config import get_settings
from game_catalog.contracts import ListingPage
from game_catalog.fetching.base import BaseAPIClient, PayloadError


class ListingClient(BaseAPIClient[ListingPage]):
    """
    Client for the game listing API.

    Example:
        >>> async with ListingClient() as client:
        ...     page = await client.fetch_page(1)
        ...     print(len(page.results), page.total_pages)
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        limit: int | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the listing client.

        Args:
            base_url: Listing endpoint (defaults to settings)
            limit: Records requested per page (defaults to settings)
            **kwargs: Arguments passed to BaseAPIClient
        """
        super().__init__(**kwargs)
        settings = get_settings()
        self._base_url = (base_url or settings.listing.base_url).rstrip("/")
        self.limit = limit or settings.listing.fetch_limit

    @property
    def source_name(self) -> str:
        return "listing_api"

    def _parse_response(self, raw_data: Any) -> ListingPage:
        try:
            return ListingPage.model_validate(raw_data)
        except PydanticValidationError as e:
            raise PayloadError(
                f"Response validation failed: {e}",
                source=self.source_name,
                endpoint=self._base_url,
                original_error=e,
            ) from e

    async def fetch_page(self, page: int, *, limit: int | None = None) -> ListingPage:
        """
        Fetch one page of the listing.

        Args:
            page: 1-based remote page number
            limit: Page size override

        Returns:
            ListingPage: Validated page; missing fields are defaulted

        Raises:
            NetworkError: On transport failure, error status, or malformed body
        """
        limit = limit or self.limit
        start_time = time.perf_counter()

        self._logger.info("Fetching listing page", page=page, limit=limit)

        response = await self._make_request(
            "GET",
            self._base_url,
            params={"page": page, "limit": limit},
        )

        try:
            raw_data = response.json()
        except (JSONDecodeError, UnicodeDecodeError) as e:
            self._logger.error("Response is not valid JSON", page=page)
            raise PayloadError(
                "Response is not valid JSON",
                source=self.source_name,
                endpoint=str(response.url),
                status_code=response.status_code,
                original_error=e,
            ) from e

        listing = self._parse_response(raw_data)
        duration_ms = (time.perf_counter() - start_time) * 1000

        self._logger.info(
            "Listing page fetched",
            page=page,
            records=len(listing.results),
            total_pages=listing.total_pages,
            duration_ms=round(duration_ms, 2),
        )
        return listing
