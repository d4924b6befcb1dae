"""Canvas bounds checking, drop clamping and overlap detection.

``exceeds`` answers "would an item centered here cross the safety margin?"
and is consulted before any engine-chosen position is committed.
``clamp_center`` is the compact-device counterpart for manual drops: rather
than rejecting an off-canvas point it pulls it back inside.

``find_overlaps`` is a diagnostic over a whole layout. It builds an
axis-aligned shapely box per item and queries an STRtree, so a board with
many manual drops stays cheap to check. Touching boxes (shared edge or
corner) are not counted as overlapping.
"""

from __future__ import annotations

from collections.abc import Sequence

from shapely import STRtree
from shapely.geometry import Polygon, box

from .types import GridConfig, PlacedItem


def item_edges(
    center_x: float, center_y: float, config: GridConfig
) -> tuple[float, float, float, float]:
    """Return (left, top, right, bottom) edges of an item at a center."""
    half_w = config.item_width / 2
    half_h = config.item_height / 2
    return (
        center_x - half_w,
        center_y - half_h,
        center_x + half_w,
        center_y + half_h,
    )


def exceeds(center_x: float, center_y: float, config: GridConfig) -> bool:
    """True if any item edge falls outside the safety-margined canvas."""
    left, top, right, bottom = item_edges(center_x, center_y, config)
    margin = config.safety_margin
    return (
        left < margin
        or top < margin
        or right > config.canvas_width - margin
        or bottom > config.canvas_height - margin
    )


def _clamp_axis(
    value: float, half: float, extent: float, margin: float
) -> float:
    if value - half < margin:
        return half + margin
    if value + half > extent - margin:
        return extent - half - margin
    return value


def clamp_center(
    center_x: float, center_y: float, config: GridConfig
) -> tuple[float, float]:
    """Pull a dropped center back inside the safety-margined canvas.

    When the canvas is narrower than one item plus margins the low edge
    wins, so the item stays reachable at the top-left.
    """
    return (
        _clamp_axis(
            center_x,
            config.item_width / 2,
            config.canvas_width,
            config.safety_margin,
        ),
        _clamp_axis(
            center_y,
            config.item_height / 2,
            config.canvas_height,
            config.safety_margin,
        ),
    )


def item_box(item: PlacedItem, config: GridConfig) -> Polygon:
    """Axis-aligned footprint of a placed item as a shapely box."""
    return box(*item_edges(item.left, item.top, config))


def find_overlaps(
    items: Sequence[PlacedItem], config: GridConfig
) -> list[tuple[str, str]]:
    """Return id pairs of items whose footprints share interior area.

    Pairs are ordered by collection position: ``(earlier, later)``.
    """
    if len(items) < 2:
        return []
    boxes = [item_box(item, config) for item in items]
    tree = STRtree(boxes)
    pairs: list[tuple[str, str]] = []
    for i, footprint in enumerate(boxes):
        hits = tree.query(footprint, predicate="intersects")
        for j in sorted(int(k) for k in hits):
            if j <= i:
                continue
            if footprint.intersection(boxes[j]).area > 0:
                pairs.append((items[i].id, items[j].id))
    return pairs
