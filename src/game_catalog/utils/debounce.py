"""
Debouncer for bursty triggers such as search keystrokes.

Each call restarts a quiet-period timer on the running event loop;
only the last call's arguments are delivered once the timer fires.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from game_catalog.logger import get_logger


@dataclass
class Debouncer:
    """
    Coalesce rapid calls into one.

    Example:
        >>> debouncer = Debouncer(engine.search, wait_seconds=0.3)
        >>> for term in ("z", "ze", "zel"):
        ...     debouncer.call(term)
        >>> # engine.search("zel") runs once, 0.3s after the last call
    """

    callback: Callable[..., Any]
    wait_seconds: float = 0.3
    _handle: asyncio.TimerHandle | None = field(init=False, default=None)
    _fired: int = field(init=False, default=0)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = get_logger(__name__, component="debouncer")

    def call(self, *args: Any, **kwargs: Any) -> None:
        """Schedule the callback, cancelling any pending one. Needs a running loop."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait_seconds, self._fire, args, kwargs)

    def _fire(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        self._handle = None
        self._fired += 1
        self._logger.debug("Debounced call fired", fired=self._fired)
        self.callback(*args, **kwargs)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def fired_count(self) -> int:
        return self._fired
