"""Local key-value persistence for the stall list.

The whole ordered stall list is stored as one JSON array under a single
key, rewritten on every change.  Reading never raises: a missing key or
unreadable data yields an empty layout and a warning in the log.
"""

import logging
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from market_planner.schemas import Stall
from market_planner.schemas.defaults import DEFAULT_STORAGE_KEY

logger = logging.getLogger(__name__)

_STALL_LIST = TypeAdapter(list[Stall])


class KeyValueStore(Protocol):
    """Synchronous string store keyed by name."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStore:
    """In-process store, lost when the process ends."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class FileStore:
    """One UTF-8 file per key inside `directory`.

    Attributes:
        directory: Folder holding the `<key>.json` files; created lazily.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            f.write(value)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob(f"*{self.SUFFIX}"):
            path.unlink()


class StallRepository:
    """Reads and writes the stall list under one store key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.store = store
        self.key = key

    def load(self) -> list[Stall]:
        """Return the persisted stalls in their saved order.

        Returns:
            The stall list, or [] if nothing usable is stored.
        """
        try:
            raw = self.store.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read stored stalls '{self.key}': {e}")
            return []
        if raw is None:
            return []
        try:
            return _STALL_LIST.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"Discarding corrupt stall data under '{self.key}' "
                f"({e.error_count()} errors)"
            )
            return []

    def save(self, stalls: list[Stall]) -> None:
        self.store.set(self.key, _STALL_LIST.dump_json(stalls).decode("utf-8"))
        logger.debug(f"Persisted {len(stalls)} stalls under '{self.key}'")

    def clear(self) -> None:
        self.store.delete(self.key)
