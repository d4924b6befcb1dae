"""Responsive grid geometry for auto-placement.

``compute_grid_config`` turns the canvas's rendered size and device class
into a ``GridConfig``: item footprint, spacing, start offset and how many
columns/rows fit. It is pure and never fails: a canvas that has not been
laid out yet (width or height <= 0) gets a fixed fallback config so the
engine can always place something.

Compact (touch) devices use a smaller footprint and hug the top-left
corner; regular devices center a three-column block horizontally. Both
profiles are plain data (``GridProfile``) so settings files can override
individual values.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace

from .types import DeviceClass, Geometry, GridConfig

FALLBACK_CANVAS_WIDTH = 320.0
FALLBACK_CANVAS_HEIGHT = 480.0


def _coerce(name: str, type_name: str, value):
    # Field types are strings under postponed annotations.
    if type_name == "bool":
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be true or false, got {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if type_name == "int":
        if not number.is_integer():
            raise ValueError(f"{name} must be a whole number, got {value!r}")
        return int(number)
    return number


@dataclass(frozen=True)
class GridProfile:
    item_width: float
    item_height: float
    horizontal_spacing: float
    vertical_spacing: float
    safety_margin: float
    top_buffer: float
    bottom_buffer: float
    min_start_x: float
    min_start_y: float
    centered: bool = False
    centered_columns: int = 3
    fallback_start_x: float = 40.0
    fallback_start_y: float = 45.0
    fallback_items_per_column: int = 8
    fallback_max_columns: int = 4

    def __post_init__(self) -> None:
        for name in ("item_width", "item_height"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be greater than 0")
        for name in (
            "horizontal_spacing",
            "vertical_spacing",
            "safety_margin",
            "top_buffer",
            "bottom_buffer",
        ):
            if not getattr(self, name) >= 0:
                raise ValueError(f"{name} must not be negative")
        for name in (
            "centered_columns",
            "fallback_items_per_column",
            "fallback_max_columns",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @property
    def vertical_budget(self) -> float:
        return self.top_buffer + self.bottom_buffer

    @staticmethod
    def from_dict(d: dict, base: GridProfile | None = None) -> GridProfile:
        """Build a profile from a dict; missing keys come from ``base``.

        Numeric values are coerced (``"42"`` becomes ``42.0``). Raises
        ValueError on an unknown key, a value of the wrong type or a size
        that cannot produce a grid (zero item extent, negative spacing...).
        """
        field_types = {f.name: f.type for f in fields(GridProfile)}
        unknown = set(d) - set(field_types)
        if unknown:
            raise ValueError(
                f"Unknown grid profile keys: {', '.join(sorted(unknown))}"
            )
        values = {k: _coerce(k, field_types[k], v) for k, v in d.items()}
        if base is None:
            return GridProfile(**values)
        return replace(base, **values)

    def to_dict(self) -> dict:
        return asdict(self)


COMPACT_PROFILE = GridProfile(
    item_width=42.0,
    item_height=42.0,
    horizontal_spacing=16.0,
    vertical_spacing=10.0,
    safety_margin=16.0,
    top_buffer=40.0,
    bottom_buffer=60.0,
    min_start_x=30.0,
    min_start_y=45.0,
)

REGULAR_PROFILE = GridProfile(
    item_width=64.0,
    item_height=64.0,
    horizontal_spacing=24.0,
    vertical_spacing=20.0,
    safety_margin=16.0,
    top_buffer=100.0,
    bottom_buffer=100.0,
    min_start_x=0.0,
    min_start_y=55.0,
    centered=True,
    fallback_start_x=80.0,
    fallback_start_y=55.0,
    fallback_items_per_column=5,
)

DEFAULT_PROFILES: dict[DeviceClass, GridProfile] = {
    DeviceClass.COMPACT: COMPACT_PROFILE,
    DeviceClass.REGULAR: REGULAR_PROFILE,
}


def _fallback_config(profile: GridProfile) -> GridConfig:
    return GridConfig(
        start_x=profile.fallback_start_x,
        start_y=profile.fallback_start_y,
        item_width=profile.item_width,
        item_height=profile.item_height,
        horizontal_spacing=profile.horizontal_spacing,
        vertical_spacing=profile.vertical_spacing,
        max_items_per_column=profile.fallback_items_per_column,
        canvas_width=FALLBACK_CANVAS_WIDTH,
        canvas_height=FALLBACK_CANVAS_HEIGHT,
        safety_margin=profile.safety_margin,
        max_columns=profile.fallback_max_columns,
    )


def _start_x(profile: GridProfile, canvas_width: float) -> float:
    edge = profile.item_width / 2 + profile.safety_margin
    if not profile.centered:
        return max(edge, profile.min_start_x)
    column_width = profile.item_width + profile.horizontal_spacing
    span = profile.centered_columns * column_width - profile.horizontal_spacing
    centered = (canvas_width - span) / 2 + profile.item_width / 2
    return max(centered, edge, profile.min_start_x)


def compute_grid_config(
    geometry: Geometry,
    profile: GridProfile | None = None,
) -> GridConfig:
    """Derive the auto-placement grid for the given canvas geometry.

    Args:
        geometry: Rendered canvas size and device class.
        profile: Footprint/spacing values; defaults to the built-in
            profile for ``geometry.device_class``.
    """
    if profile is None:
        profile = DEFAULT_PROFILES[geometry.device_class]
    if not geometry.measurable:
        return _fallback_config(profile)

    width = float(geometry.width)
    height = float(geometry.height)
    column_width = profile.item_width + profile.horizontal_spacing
    row_height = profile.item_height + profile.vertical_spacing

    max_items_per_column = max(
        1, math.floor((height - profile.vertical_budget) / row_height)
    )
    usable_width = width - 2 * profile.safety_margin
    max_columns = max(
        1, math.floor((usable_width - profile.item_width) / column_width) + 1
    )
    start_y = max(
        profile.item_height / 2 + profile.safety_margin, profile.min_start_y
    )

    return GridConfig(
        start_x=_start_x(profile, width),
        start_y=start_y,
        item_width=profile.item_width,
        item_height=profile.item_height,
        horizontal_spacing=profile.horizontal_spacing,
        vertical_spacing=profile.vertical_spacing,
        max_items_per_column=max_items_per_column,
        canvas_width=width,
        canvas_height=height,
        safety_margin=profile.safety_margin,
        max_columns=max_columns,
    )
