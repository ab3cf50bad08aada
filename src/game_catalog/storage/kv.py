"""
Persistent key-value storage for JSON-serializable values.

Each key is stored as its own JSON document inside a profile
directory. Writes go through a temporary file and an atomic rename,
so a reader never sees a half-written value.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from game_catalog.logger import get_logger

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Get/set of JSON values under string keys."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> bool: ...


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key) or key.startswith("."):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class JsonFileStore:
    """
    Key-value store backed by one JSON file per key.

    Storage failures are logged and reported through return values;
    they never raise, so callers can treat persistence as best-effort.

    Example:
        >>> store = JsonFileStore(Path("data/profile"))
        >>> store.set("userRatings", {"42": 5})
        True
        >>> store.get("userRatings", {})
        {'42': 5}
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._logger = get_logger(__name__, component="kv_store")

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{_check_key(key)}.json"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when absent or unreadable."""
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with path.open(encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.warning("Could not read stored value", key=key, error=str(e))
            return default

    def set(self, key: str, value: Any) -> bool:
        """
        Persist ``value`` under ``key``.

        Returns:
            True if the value reached disk, False if storage was unavailable
        """
        path = self._path(key)
        payload = json.dumps(value, ensure_ascii=False)
        tmp_name: str | None = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._directory,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            self._logger.warning("Could not persist value", key=key, error=str(e))
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            return False

        self._logger.debug("Persisted value", key=key, bytes=len(payload))
        return True


class MemoryStore:
    """In-process store with the same JSON round-trip semantics as JsonFileStore."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> bool:
        self._data[_check_key(key)] = json.dumps(value)
        return True

    def raw(self, key: str) -> str | None:
        """Serialized form of a stored value, for inspection."""
        return self._data.get(key)
