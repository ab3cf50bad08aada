"""
Utility modules.
"""

from game_catalog.utils.debounce import Debouncer

__all__ = [
    "Debouncer",
]
