"""Built-in item catalogs and inventory filtering.

Pure data module with no UI dependencies, so headless tools (the CLI,
tests) can import it as well as any presentation layer.

Provides:
  - ITEM_CATALOGS: dict mapping catalog name -> ordered list of
    ``CatalogItem`` loaded from ``signalcanvas/catalogs/builtin/``.
  - CATEGORY_TABS: inventory tab label per category.
  - filter_catalog: the inventory's tab + search filter.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..engine.catalog_io import builtin_catalog_path, load_catalog
from ..engine.types import CatalogItem, Category

DEFAULT_CATALOG = "signal_flags"

CATEGORY_TABS = {
    Category.PRIMARY: "Signal Flags",
    Category.SECONDARY: "Pennants",
}

ITEM_CATALOGS: dict[str, list[CatalogItem]] = {
    DEFAULT_CATALOG: load_catalog(builtin_catalog_path(DEFAULT_CATALOG)),
}


def _matches(item: CatalogItem, term: str) -> bool:
    if term in item.name.lower():
        return True
    return any(term in keyword.lower() for keyword in item.keywords)


def filter_catalog(
    items: Iterable[CatalogItem],
    category: Category | None = None,
    search: str = "",
) -> list[CatalogItem]:
    """Items in ``category`` whose name or a keyword contains ``search``.

    Matching is case-insensitive; an empty search matches everything.
    """
    term = search.strip().lower()
    return [
        item
        for item in items
        if (category is None or item.category is category)
        and (not term or _matches(item, term))
    ]
