"""Auto-placement cursor transitions.

Auto-placement fills the grid column by column: top to bottom, then one
column to the right. The cursor (``PlacementCursor``) remembers the next
candidate slot and how far down each column is occupied. Everything here is
a pure function of its inputs; ``placement.py`` owns the current cursor and
swaps in the value these functions return.

A placement is a two-phase commit:

  1. ``resolve_slot`` walks from the cursor slot to the first slot whose
     item stays on-canvas (bounded by ``max_attempts``). If the previous
     commit rolled over into a new column, the resolution is *advance only*
     and nothing should be placed.
  2. ``advance_cursor`` records the committed item and moves the cursor to
     the next free slot.

``reconcile`` rebuilds the cursor from scratch out of an arbitrary item
collection. It runs after every manual add/move/remove and after loading a
saved board, so auto-placement never stacks onto manually placed items.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace

import numpy as np

from .collision import exceeds
from .types import GridConfig, PlacedItem, PlacementCursor, SlotResolution

MAX_RESOLVE_ATTEMPTS = 20


def resolve_slot(
    cursor: PlacementCursor,
    config: GridConfig,
    max_attempts: int = MAX_RESOLVE_ATTEMPTS,
) -> SlotResolution:
    """Find the slot the next auto-placed item should occupy."""
    if cursor.transitioning:
        left, top = config.slot_center(cursor.column, cursor.row)
        return SlotResolution(
            cursor.column, cursor.row, left, top, advance_only=True
        )

    col, row = cursor.slot
    if col >= config.max_columns:
        col, row = 0, 0

    max_right = config.max_center_x
    bottom_limit = config.canvas_height - config.safety_margin
    left, top = config.slot_center(col, row)
    transitioned = False
    forced = False
    attempts = 0

    while exceeds(left, top, config):
        if attempts >= max_attempts:
            col, row, forced = 0, 0, True
            break
        attempts += 1

        if left > max_right:
            transitioned = True
            col, row = 0, row + 1
            if row >= config.max_items_per_column:
                row = 0
        elif top + config.item_height / 2 > bottom_limit:
            transitioned = True
            col, row = col + 1, 0
            if col >= config.max_columns:
                col = 0
        else:
            row += 1

        left, top = config.slot_center(col, row)
        if left > max_right:
            col = 0
            left, top = config.slot_center(col, row)
            if left > max_right:
                # Not even the first column fits horizontally.
                col, row, forced, transitioned = 0, 0, True, True
                break

    left, top = config.slot_center(col, row)
    return SlotResolution(
        col,
        row,
        left,
        top,
        transitioned=transitioned,
        forced=forced,
    )


def advance_cursor(
    cursor: PlacementCursor,
    resolution: SlotResolution,
    config: GridConfig,
) -> PlacementCursor:
    """Return the cursor after committing an item at ``resolution``.

    An advance-only resolution just clears the pending rollover.
    """
    if resolution.advance_only:
        return replace(cursor, transitioning=False)

    col, row = resolution.column, resolution.row
    heights = dict(cursor.column_heights)
    bottom = resolution.top + config.item_height / 2
    heights[col] = max(heights.get(col, 0.0), bottom)

    next_top = resolution.top + config.row_height
    column_full = row + 1 >= config.max_items_per_column
    if not column_full and not exceeds(resolution.left, next_top, config):
        return PlacementCursor(col, row + 1, heights, transitioning=False)

    next_col = col + 1
    next_left, _ = config.slot_center(next_col, 0)
    if next_col >= config.max_columns or next_left > config.max_center_x:
        next_col = 0
    return PlacementCursor(next_col, 0, heights, transitioning=True)


def column_heights(
    items: Sequence[PlacedItem], config: GridConfig
) -> dict[int, float]:
    """Lowest occupied edge per grid column.

    Items left of the first column (negative column index) are ignored.
    """
    if not items:
        return {}
    lefts = np.fromiter((it.left for it in items), dtype=np.float64)
    bottoms = np.fromiter(
        (it.top + config.item_height / 2 for it in items), dtype=np.float64
    )
    cols = np.floor((lefts - config.start_x) / config.column_width).astype(
        np.int64
    )
    heights: dict[int, float] = {}
    for col in np.unique(cols[cols >= 0]):
        heights[int(col)] = float(bottoms[cols == col].max())
    return heights


def reconcile(
    items: Sequence[PlacedItem], config: GridConfig
) -> PlacementCursor:
    """Derive the cursor from the authoritative item collection."""
    if not items:
        return PlacementCursor()

    heights = column_heights(items, config)
    if not heights:
        return PlacementCursor()

    # min() keeps the first of equal heights: ties go to the lowest column.
    min_col = min(sorted(heights), key=lambda c: heights[c])
    row = max(
        0, math.ceil((heights[min_col] - config.start_y) / config.row_height)
    )

    if row >= config.max_items_per_column:
        next_col = 0
        while next_col in heights:
            next_col += 1
        return PlacementCursor(next_col, 0, heights)
    return PlacementCursor(min_col, row, heights)
