"""
HTTP access to the game listing API.

The client is built on a common base with retry logic,
error classification, and structured logging.
"""

from game_catalog.fetching.base import (
    APIError,
    BaseAPIClient,
    CatalogError,
    NetworkError,
    PayloadError,
    RateLimitError,
    ServerError,
)
from game_catalog.fetching.listing import ListingClient

__all__ = [
    # Base classes and errors
    "APIError",
    "BaseAPIClient",
    "CatalogError",
    "NetworkError",
    "PayloadError",
    "RateLimitError",
    "ServerError",
    # Clients
    "ListingClient",
]
