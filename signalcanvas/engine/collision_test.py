"""Tests for canvas bounds, drop clamping and overlap detection."""

from signalcanvas.engine.collision import (
    clamp_center,
    exceeds,
    find_overlaps,
    item_edges,
)
from signalcanvas.engine.grid import compute_grid_config
from signalcanvas.engine.types import (
    CatalogItem,
    Category,
    DeviceClass,
    Geometry,
    PlacedItem,
)

CFG = compute_grid_config(Geometry(320, 480, DeviceClass.COMPACT))
ALFA = CatalogItem("A", "Alfa", "images/flags/alfa.png", Category.PRIMARY)


def _placed(id_, left, top):
    return PlacedItem(id=id_, item=ALFA, left=left, top=top)


class TestExceeds:
    def test_edges(self):
        assert item_edges(100, 200, CFG) == (79, 179, 121, 221)

    def test_inside(self):
        assert not exceeds(160, 240, CFG)

    def test_touching_margin_is_inside(self):
        assert not exceeds(37, 37, CFG)
        assert not exceeds(283, 443, CFG)

    def test_left(self):
        assert exceeds(36.9, 240, CFG)

    def test_top(self):
        assert exceeds(160, 36.9, CFG)

    def test_right(self):
        assert exceeds(283.1, 240, CFG)

    def test_bottom(self):
        assert exceeds(160, 443.1, CFG)


class TestClampCenter:
    def test_drop_near_origin(self):
        """Half an item plus the margin on both axes."""
        assert clamp_center(5, 5, CFG) == (37, 37)

    def test_drop_past_far_corner(self):
        assert clamp_center(1000, 1000, CFG) == (283, 443)

    def test_inside_point_unchanged(self):
        assert clamp_center(100, 120, CFG) == (100, 120)

    def test_axes_clamped_independently(self):
        assert clamp_center(-20, 200, CFG) == (37, 200)

    def test_clamped_point_never_exceeds(self):
        for x, y in [(-50, -50), (400, 10), (10, 900), (319, 479)]:
            assert not exceeds(*clamp_center(x, y, CFG), CFG)


class TestFindOverlaps:
    def test_empty_and_single(self):
        assert find_overlaps([], CFG) == []
        assert find_overlaps([_placed("a", 100, 100)], CFG) == []

    def test_overlapping_pair(self):
        items = [_placed("a", 100, 100), _placed("b", 120, 110)]
        assert find_overlaps(items, CFG) == [("a", "b")]

    def test_touching_is_not_overlap(self):
        items = [_placed("a", 100, 100), _placed("b", 142, 100)]
        assert find_overlaps(items, CFG) == []

    def test_same_center(self):
        items = [_placed("a", 100, 100), _placed("b", 100, 100)]
        assert find_overlaps(items, CFG) == [("a", "b")]

    def test_grid_neighbours_are_clear(self):
        items = [
            _placed(f"i{c}{r}", *CFG.slot_center(c, r))
            for c in range(3)
            for r in range(3)
        ]
        assert find_overlaps(items, CFG) == []

    def test_pairs_ordered_by_collection_position(self):
        items = [
            _placed("x", 300, 300),
            _placed("a", 100, 100),
            _placed("b", 110, 100),
            _placed("c", 105, 105),
        ]
        assert find_overlaps(items, CFG) == [
            ("a", "b"),
            ("a", "c"),
            ("b", "c"),
        ]
