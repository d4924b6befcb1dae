"""Placement engine: the single owner of the placed-item collection.

``PlacementEngine`` exposes the board operations the UI layer calls:

  * ``auto_place``: one tap/click places a catalog item in the next grid
    slot (see ``cursor.py`` for the fill order and rollover rules).
  * ``place_at`` / ``move``: manual drops at an explicit point. On compact
    devices the point is clamped on-canvas; regular (desktop) canvases may
    scroll, so points are accepted as-is.
  * ``remove`` / ``clear_all``.

Every operation recomputes the ``GridConfig`` from the geometry provider,
so a resize between calls is picked up automatically. After each mutation
the engine replaces its item tuple with a new snapshot and hands it to the
subscribed listeners (the board persists it from there). Listeners never
see a half-applied change and cannot edit the engine's collection.

Unknown catalog keys and unknown item ids are silent no-ops (logged at
debug level).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace

from .collision import clamp_center, find_overlaps
from .cursor import (
    MAX_RESOLVE_ATTEMPTS,
    advance_cursor,
    reconcile,
    resolve_slot,
)
from .grid import GridProfile, compute_grid_config
from .types import (
    CatalogItem,
    DeviceClass,
    GeometryProvider,
    GridConfig,
    PlacedItem,
    PlacementCursor,
)

logger = logging.getLogger(__name__)

Snapshot = tuple[PlacedItem, ...]
ChangeListener = Callable[[Snapshot], None]


def _new_id() -> str:
    return uuid.uuid4().hex


class PlacementEngine:
    def __init__(
        self,
        catalog: Iterable[CatalogItem],
        geometry: GeometryProvider,
        *,
        profiles: dict[DeviceClass, GridProfile] | None = None,
        max_attempts: int = MAX_RESOLVE_ATTEMPTS,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._catalog: dict[str, CatalogItem] = {}
        for entry in catalog:
            self._catalog.setdefault(entry.type, entry)
        self._geometry = geometry
        self._profiles = dict(profiles or {})
        self._max_attempts = max_attempts
        self._id_factory = id_factory
        self._items: Snapshot = ()
        self._cursor = PlacementCursor()
        self._listeners: list[ChangeListener] = []

    # -- read access --

    @property
    def items(self) -> Snapshot:
        return self._items

    @property
    def cursor(self) -> PlacementCursor:
        return self._cursor

    @property
    def catalog(self) -> tuple[CatalogItem, ...]:
        return tuple(self._catalog.values())

    def catalog_item(self, item_key: str) -> CatalogItem | None:
        return self._catalog.get(item_key)

    def get(self, instance_id: str) -> PlacedItem | None:
        for item in self._items:
            if item.id == instance_id:
                return item
        return None

    def grid_config(self) -> GridConfig:
        geometry = self._geometry.current_geometry()
        profile = self._profiles.get(geometry.device_class)
        return compute_grid_config(geometry, profile)

    def overlapping_pairs(self) -> list[tuple[str, str]]:
        return find_overlaps(self._items, self.grid_config())

    def subscribe(self, listener: ChangeListener) -> None:
        """Call ``listener`` with the new snapshot after every mutation."""
        self._listeners.append(listener)

    # -- operations --

    def auto_place(self, item_key: str) -> PlacedItem | None:
        """Place ``item_key`` in the next free grid slot.

        Returns the placed item, or None when the key is unknown or the
        request was absorbed by a pending column rollover.
        """
        entry = self._catalog.get(item_key)
        if entry is None:
            logger.debug("auto_place: unknown catalog key %r", item_key)
            return None

        config = self.grid_config()
        resolution = resolve_slot(self._cursor, config, self._max_attempts)
        self._cursor = advance_cursor(self._cursor, resolution, config)
        if resolution.advance_only:
            logger.debug("auto_place: absorbed by column rollover")
            return None

        placed = PlacedItem(
            id=self._id_factory(),
            item=entry,
            left=resolution.left,
            top=resolution.top,
        )
        if resolution.forced:
            logger.warning(
                "No on-canvas slot for %s within %d attempts; "
                "placing at first slot",
                entry.name,
                self._max_attempts,
            )
        elif resolution.transitioned:
            logger.debug(
                "auto_place: rolled over to column %d, row %d",
                resolution.column,
                resolution.row,
            )
        if self._cursor.transitioning and self._cursor.slot == (0, 0):
            logger.warning(
                "Grid full after placing %s; next auto-placement wraps "
                "to the first slot",
                entry.name,
            )
        self._publish(self._items + (placed,))
        return placed

    def place_at(
        self, item_key: str, left: float, top: float
    ) -> PlacedItem | None:
        """Place ``item_key`` at an explicit drop point."""
        entry = self._catalog.get(item_key)
        if entry is None:
            logger.debug("place_at: unknown catalog key %r", item_key)
            return None

        config = self.grid_config()
        left, top = self._constrain(left, top, config)
        placed = PlacedItem(
            id=self._id_factory(), item=entry, left=left, top=top
        )
        self._publish(self._items + (placed,))
        self._cursor = reconcile(self._items, config)
        return placed

    def move(
        self, instance_id: str, left: float, top: float
    ) -> PlacedItem | None:
        """Move a placed item. Returns the moved item, or None if unknown."""
        current = self.get(instance_id)
        if current is None:
            logger.debug("move: unknown item id %r", instance_id)
            return None

        config = self.grid_config()
        left, top = self._constrain(left, top, config)
        moved = replace(current, left=left, top=top)
        self._publish(
            tuple(moved if it.id == instance_id else it for it in self._items)
        )
        self._cursor = reconcile(self._items, config)
        return moved

    def remove(self, instance_id: str) -> bool:
        if self.get(instance_id) is None:
            logger.debug("remove: unknown item id %r", instance_id)
            return False
        self._publish(tuple(it for it in self._items if it.id != instance_id))
        self._cursor = reconcile(self._items, self.grid_config())
        return True

    def clear_all(self) -> None:
        self._cursor = PlacementCursor()
        self._publish(())

    def load(self, items: Iterable[PlacedItem]) -> None:
        """Replace the collection with a stored board and rebuild the cursor.

        Does not notify listeners: the items came from storage.
        """
        self._items = tuple(items)
        self.reconcile()

    def reconcile(self) -> PlacementCursor:
        self._cursor = reconcile(self._items, self.grid_config())
        return self._cursor

    # -- internals --

    def _constrain(
        self, left: float, top: float, config: GridConfig
    ) -> tuple[float, float]:
        if self._geometry.current_geometry().compact:
            return clamp_center(left, top, config)
        return left, top

    def _publish(self, items: Snapshot) -> None:
        self._items = items
        for listener in self._listeners:
            listener(items)
