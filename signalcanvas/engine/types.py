"""Data types shared by the placement engine and its owner.

Catalog entries and placed items serialize to the same JSON shape the
board has always stored (``type``/``name``/``image``/``category``/
``keywords`` plus ``id``/``left``/``top`` for placed items), so layouts
saved by older builds load unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Protocol


class DeviceClass(str, Enum):
    COMPACT = "compact"
    REGULAR = "regular"


class Category(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"

    @staticmethod
    def from_value(value: str) -> Category:
        """Parse a category, accepting legacy ``flag``/``pennant`` names."""
        legacy = {"flag": Category.PRIMARY, "pennant": Category.SECONDARY}
        if value in legacy:
            return legacy[value]
        return Category(value)


@dataclass(frozen=True)
class CatalogItem:
    type: str
    name: str
    image: str
    category: Category
    keywords: tuple[str, ...] = ()

    @staticmethod
    def from_dict(d: dict) -> CatalogItem:
        return CatalogItem(
            type=d["type"],
            name=d["name"],
            image=d.get("image", ""),
            category=Category.from_value(d["category"]),
            keywords=tuple(d.get("keywords", ())),
        )

    def to_dict(self) -> dict:
        d: dict = {
            "type": self.type,
            "name": self.name,
            "image": self.image,
            "category": self.category.value,
        }
        if self.keywords:
            d["keywords"] = list(self.keywords)
        return d


@dataclass(frozen=True)
class PlacedItem:
    id: str
    item: CatalogItem
    left: float
    top: float

    @property
    def type(self) -> str:
        return self.item.type

    @property
    def name(self) -> str:
        return self.item.name

    @staticmethod
    def from_dict(d: dict) -> PlacedItem:
        return PlacedItem(
            id=str(d["id"]),
            item=CatalogItem.from_dict(d),
            left=float(d["left"]),
            top=float(d["top"]),
        )

    def to_dict(self) -> dict:
        d: dict = {"id": self.id}
        d.update(self.item.to_dict())
        d["left"] = self.left
        d["top"] = self.top
        return d


@dataclass(frozen=True)
class Geometry:
    """Rendered canvas size and device class, as seen by the engine."""

    width: float
    height: float
    device_class: DeviceClass = DeviceClass.REGULAR

    @property
    def measurable(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def compact(self) -> bool:
        return self.device_class is DeviceClass.COMPACT


class GeometryProvider(Protocol):
    def current_geometry(self) -> Geometry:
        """Current canvas size and device class. Re-read on every call."""
        ...


@dataclass(frozen=True)
class GridConfig:
    start_x: float
    start_y: float
    item_width: float
    item_height: float
    horizontal_spacing: float
    vertical_spacing: float
    max_items_per_column: int
    canvas_width: float
    canvas_height: float
    safety_margin: float
    max_columns: int

    @property
    def column_width(self) -> float:
        return self.item_width + self.horizontal_spacing

    @property
    def row_height(self) -> float:
        return self.item_height + self.vertical_spacing

    @property
    def max_center_x(self) -> float:
        """Rightmost center that keeps an item inside the right margin."""
        return self.canvas_width - self.safety_margin - self.item_width / 2

    def slot_center(self, column: int, row: int) -> tuple[float, float]:
        """Center of the grid slot at (column, row)."""
        left = self.start_x + column * self.column_width
        top = self.start_y + row * self.row_height + self.item_height / 2
        return left, top


@dataclass(frozen=True)
class PlacementCursor:
    """Next auto-placement slot plus per-column fill heights.

    ``transitioning`` marks a column rollover made by the last commit; the
    next auto-placement request is absorbed and only clears it.
    ``column_heights`` is copied into a read-only mapping on construction.
    """

    column: int = 0
    row: int = 0
    column_heights: Mapping[int, float] = field(default_factory=dict)
    transitioning: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "column_heights", MappingProxyType(dict(self.column_heights))
        )

    @property
    def slot(self) -> tuple[int, int]:
        return self.column, self.row


@dataclass(frozen=True)
class SlotResolution:
    column: int
    row: int
    left: float
    top: float
    advance_only: bool = False
    transitioned: bool = False  # resolution rolled past a column/row edge
    forced: bool = False  # retry cap hit, first slot used regardless of bounds
