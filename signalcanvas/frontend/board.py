"""Board session: the placement engine's owner.

``SignalBoard`` wires the engine to its collaborators:

  * loads the saved layout from the key-value store at startup and rebuilds
    the auto-placement cursor from it;
  * writes the full layout back after every mutation (via an engine change
    listener, so no operation can forget to persist);
  * tracks the inventory selection (on compact devices selecting an item
    places it immediately, there is no drag);
  * produces the short user notifications the UI shows after an action.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..engine.placement import PlacementEngine, Snapshot
from ..engine.types import CatalogItem, GeometryProvider, PlacedItem
from .device import content_size
from .layout_io import (
    LAYOUT_KEY,
    KeyValueStore,
    load_placed_items,
    save_placed_items,
)
from .settings import BoardSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "success"  # "success" or "error"


class SignalBoard:
    def __init__(
        self,
        catalog: Sequence[CatalogItem],
        geometry: GeometryProvider,
        store: KeyValueStore,
        settings: BoardSettings | None = None,
        engine: PlacementEngine | None = None,
    ) -> None:
        settings = settings or BoardSettings()
        self.geometry = geometry
        self.store = store
        self.store_key = settings.store_key or LAYOUT_KEY
        self.engine = engine or PlacementEngine(
            catalog,
            geometry,
            profiles=settings.profiles,
            max_attempts=settings.max_attempts,
        )
        self.selected: CatalogItem | None = None
        self.notification: Notification | None = None

        saved = load_placed_items(store, self.store_key)
        self.engine.load(saved)
        if saved:
            logger.info("Loaded %d placed items", len(saved))
        self.engine.subscribe(self._persist)

    @property
    def items(self) -> Snapshot:
        return self.engine.items

    def auto_place(self, item_key: str) -> PlacedItem | None:
        placed = self.engine.auto_place(item_key)
        if placed is not None:
            self.selected = None
            self._notify(f"{placed.name} placed on canvas")
        return placed

    def place_at(
        self, item_key: str, left: float, top: float
    ) -> PlacedItem | None:
        return self.engine.place_at(item_key, left, top)

    def move(
        self, instance_id: str, left: float, top: float
    ) -> PlacedItem | None:
        return self.engine.move(instance_id, left, top)

    def remove(self, instance_id: str) -> bool:
        return self.engine.remove(instance_id)

    def clear_all(self) -> None:
        self.engine.clear_all()
        self._notify("Board cleared")

    def select_item(self, item_key: str | None) -> PlacedItem | None:
        """Select an inventory item; compact devices place it right away."""
        if item_key is None:
            self.selected = None
            return None
        entry = self.engine.catalog_item(item_key)
        self.selected = entry
        if entry is None or not self.geometry.current_geometry().compact:
            return None
        return self.auto_place(item_key)

    def content_size(self) -> tuple[float, float]:
        config = self.engine.grid_config()
        return content_size(
            self.items, config.canvas_width, config.canvas_height
        )

    def dismiss_notification(self) -> None:
        self.notification = None

    def _notify(self, message: str, kind: str = "success") -> None:
        self.notification = Notification(message, kind)

    def _persist(self, items: Snapshot) -> None:
        if not save_placed_items(self.store, items, self.store_key):
            self._notify("Could not save the board", "error")
