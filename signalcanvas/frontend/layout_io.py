"""Persist the placed-item collection in a key-value store.

The board is stored as a single JSON array of placed items under one
well-known key (``placedFlags``), overwritten in full after every change.
The store maps string keys to string values, like browser local storage.
``JsonFileStore`` keeps all keys in one JSON object on disk; ``MemoryStore``
is the in-process equivalent.

Loading never fails: a missing key is an empty board, and so is data that
does not parse (logged, then discarded). ``save_placed_items`` logs store
I/O errors and returns False instead of raising.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from ..engine.types import PlacedItem

logger = logging.getLogger(__name__)

LAYOUT_KEY = "placedFlags"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """All keys in one JSON object file; rewritten on every ``set``."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Store file is not a JSON object: {self.path}")
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except ValueError:
            logger.warning("Overwriting unreadable store file %s", self.path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        tmp.replace(self.path)


def dump_placed_items(items: Iterable[PlacedItem]) -> str:
    return json.dumps([item.to_dict() for item in items])


def parse_placed_items(raw: str) -> list[PlacedItem]:
    """Parse a stored board. Raises ValueError if it is not a valid one."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored layout is not a JSON array")
    try:
        return [PlacedItem.from_dict(d) for d in data]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed placed item: {e!r}") from e


def load_placed_items(
    store: KeyValueStore, key: str = LAYOUT_KEY
) -> list[PlacedItem]:
    """Read the stored board; missing or corrupt data yields an empty one."""
    try:
        raw = store.get(key)
    except (OSError, ValueError) as e:
        logger.warning("Could not read layout store: %s", e)
        return []
    if raw is None:
        return []
    try:
        return parse_placed_items(raw)
    except ValueError as e:
        logger.warning("Discarding saved layout under %r: %s", key, e)
        return []


def save_placed_items(
    store: KeyValueStore,
    items: Iterable[PlacedItem],
    key: str = LAYOUT_KEY,
) -> bool:
    """Overwrite the stored board. Returns False if the store failed."""
    try:
        store.set(key, dump_placed_items(items))
    except OSError as e:
        logger.warning("Could not save layout under %r: %s", key, e)
        return False
    return True
