"""
Base HTTP client with retry logic and error classification.

Transient failures (transport errors, 429, 5xx) are retried with
exponential backoff; everything that still fails surfaces as a
NetworkError subclass so callers handle a single error kind.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from game_catalog.config import RetryConfig, get_settings
from game_catalog.logger import get_logger

T = TypeVar("T", bound=BaseModel)


class CatalogError(Exception):
    """Base exception for catalog client errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class NetworkError(CatalogError):
    """A page could not be fetched: transport failure, error status, or bad payload."""


class APIError(NetworkError):
    """Raised when the API returns an error response."""


class RateLimitError(APIError):
    """Raised on HTTP 429."""


class ServerError(APIError):
    """Raised on HTTP 5xx."""


class PayloadError(NetworkError):
    """Raised when the response body is not valid JSON or fails validation."""


class BaseAPIClient(ABC, Generic[T]):
    """
    Abstract base class for listing API clients.

    Provides common functionality including:
    - HTTP client management
    - Retry logic with exponential backoff
    - Error classification into NetworkError subclasses
    - Structured logging

    Subclasses must implement:
    - source_name: Identifier for the data source
    - _parse_response(): Response parsing and validation
    """

    def __init__(
        self,
        *,
        retry_config: RetryConfig | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            retry_config: Custom retry configuration (uses defaults if None)
            timeout: HTTP request timeout in seconds
            http_client: Pre-built httpx client (created lazily if None)
        """
        settings = get_settings()
        self._retry_config = retry_config or settings.retry
        self._timeout = timeout or settings.listing.timeout_seconds
        self._user_agent = settings.listing.user_agent
        self._logger = get_logger(
            self.__class__.__name__,
            component="api_client",
            source=self.source_name,
        )
        self._client = http_client

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this data source."""
        ...

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseAPIClient[T]":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type((httpx.TransportError, RateLimitError, ServerError)),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )

    def _log_retry_attempt(self, retry_state: Any) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying request",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _make_request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            httpx.Response: Successful (2xx) response

        Raises:
            RateLimitError: If still rate limited after retries
            ServerError: If the server keeps failing after retries
            APIError: For other error statuses (not retried)
            NetworkError: If the transport keeps failing after retries
        """
        retry_decorator = self._create_retry_decorator()

        @retry_decorator
        async def _request() -> httpx.Response:
            self._logger.debug("Making request", method=method, url=url)

            response = await self.client.request(method, url, **kwargs)

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After", "60")
                raise RateLimitError(
                    f"Rate limit exceeded. Retry after {retry_after}s",
                    source=self.source_name,
                    endpoint=url,
                    status_code=429,
                )

            if response.status_code >= 500:
                raise ServerError(
                    f"HTTP error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            if not response.is_success:
                raise APIError(
                    f"HTTP error: {response.status_code}",
                    source=self.source_name,
                    endpoint=url,
                    status_code=response.status_code,
                )

            return response

        try:
            return await _request()  # type: ignore[no-any-return]
        except httpx.HTTPError as e:
            self._logger.error(
                "Request failed after retries",
                url=url,
                attempts=self._retry_config.max_attempts,
                error=str(e),
            )
            raise NetworkError(
                f"Request failed after {self._retry_config.max_attempts} attempts: {e}",
                source=self.source_name,
                endpoint=url,
                original_error=e,
            ) from e

    @abstractmethod
    def _parse_response(self, raw_data: Any) -> T:
        """
        Parse and validate a decoded JSON body.

        Raises:
            PayloadError: If the body doesn't match the expected schema
        """
        ...
