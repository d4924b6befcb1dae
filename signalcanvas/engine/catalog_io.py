"""Load item catalogs from JSON files.

A catalog file is an object with a ``name`` and an ordered ``items`` list of
catalog entries (``type``, ``name``, ``image``, ``category`` and optional
``keywords``). Order is preserved: it is the order the inventory shows.

Used by:
  - ``frontend/catalogs.py``: loads the built-in signal flag catalog.
  - ``frontend/cli.py``: loads a user-supplied catalog file.
"""

from __future__ import annotations

import json
from pathlib import Path

from .types import CatalogItem

# signalcanvas/catalogs/ is two levels up from engine/catalog_io.py
_CATALOGS_DIR = Path(__file__).parent.parent / "catalogs"


def builtin_catalog_path(name: str) -> Path:
    """Return the path to a built-in catalog JSON file.

    Args:
        name: Catalog name without extension (e.g. "signal_flags").

    Returns:
        Path to ``signalcanvas/catalogs/builtin/{name}.json``.
    """
    return _CATALOGS_DIR / "builtin" / f"{name}.json"


def parse_catalog(data: dict) -> list[CatalogItem]:
    """Turn a catalog dict into typed entries.

    Raises ValueError on a missing ``items`` list, a malformed entry or a
    duplicate ``type`` key.
    """
    entries = data.get("items")
    if not isinstance(entries, list):
        raise ValueError("Catalog is missing an 'items' list")
    items: list[CatalogItem] = []
    seen: set[str] = set()
    for i, entry in enumerate(entries):
        try:
            item = CatalogItem.from_dict(entry)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed catalog entry #{i}: {e!r}") from e
        if item.type in seen:
            raise ValueError(f"Duplicate catalog type: {item.type}")
        seen.add(item.type)
        items.append(item)
    return items


def load_catalog(path: Path) -> list[CatalogItem]:
    """Load a JSON catalog file and return its entries in order."""
    with open(path) as f:
        data = json.load(f)
    return parse_catalog(data)
