from .collision import clamp_center, exceeds, find_overlaps
from .cursor import advance_cursor, reconcile, resolve_slot
from .grid import compute_grid_config
from .placement import PlacementEngine

__all__ = [
    "PlacementEngine",
    "advance_cursor",
    "clamp_center",
    "compute_grid_config",
    "exceeds",
    "find_overlaps",
    "reconcile",
    "resolve_slot",
]
