"""
Game Catalog Client.

Fetches game listings, filters and paginates them locally, and keeps
a user's favorites and ratings across sessions.
"""

from game_catalog.config import Settings, get_settings
from game_catalog.logger import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
