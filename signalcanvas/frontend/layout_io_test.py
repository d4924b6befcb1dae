"""Tests for layout persistence in key-value stores."""

import json
import logging

import pytest

from signalcanvas.engine.types import CatalogItem, Category, PlacedItem
from signalcanvas.frontend.layout_io import (
    LAYOUT_KEY,
    JsonFileStore,
    MemoryStore,
    dump_placed_items,
    load_placed_items,
    parse_placed_items,
    save_placed_items,
)

ALFA = CatalogItem("a", "Alfa", "images/flags/alfa.png", Category.PRIMARY)
P1 = CatalogItem(
    "p1", "Pennant One", "images/pennants/p1.png", Category.SECONDARY
)


def _layout():
    return [
        PlacedItem("one", ALFA, 37.0, 66.0),
        PlacedItem("two", P1, 95.0, 66.0),
    ]


class _BrokenStore:
    def get(self, key):
        raise OSError("disk gone")

    def set(self, key, value):
        raise OSError("disk full")


class TestMemoryStore:
    def test_save_then_load(self):
        store = MemoryStore()
        assert save_placed_items(store, _layout())
        assert load_placed_items(store) == _layout()

    def test_stored_under_layout_key_as_json_array(self):
        store = MemoryStore()
        save_placed_items(store, _layout())
        data = json.loads(store.data[LAYOUT_KEY])
        assert [d["id"] for d in data] == ["one", "two"]
        assert data[1]["category"] == "secondary"

    def test_missing_key_is_empty_board(self):
        assert load_placed_items(MemoryStore()) == []

    def test_custom_key(self):
        store = MemoryStore()
        save_placed_items(store, _layout(), key="other")
        assert load_placed_items(store) == []
        assert len(load_placed_items(store, "other")) == 2

    def test_save_overwrites(self):
        store = MemoryStore()
        save_placed_items(store, _layout())
        save_placed_items(store, [])
        assert load_placed_items(store) == []


class TestCorruptData:
    def test_not_json(self, caplog):
        store = MemoryStore({LAYOUT_KEY: "{not json"})
        with caplog.at_level(logging.WARNING):
            assert load_placed_items(store) == []
        assert "Discarding saved layout" in caplog.text

    def test_not_an_array(self):
        store = MemoryStore({LAYOUT_KEY: json.dumps({"id": "x"})})
        assert load_placed_items(store) == []

    def test_record_missing_fields(self):
        store = MemoryStore({LAYOUT_KEY: json.dumps([{"id": "x"}])})
        assert load_placed_items(store) == []

    def test_parse_raises(self):
        raw = json.dumps([{"id": "x", "type": "a"}])
        with pytest.raises(ValueError, match="Malformed"):
            parse_placed_items(raw)

    def test_legacy_categories_parse(self):
        raw = dump_placed_items(_layout()).replace('"secondary"', '"pennant"')
        items = parse_placed_items(raw)
        assert items[1].item.category is Category.SECONDARY


class TestStoreFailures:
    def test_save_failure_reports_false(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert not save_placed_items(_BrokenStore(), _layout())
        assert "Could not save layout" in caplog.text

    def test_read_failure_is_empty_board(self):
        assert load_placed_items(_BrokenStore()) == []


class TestJsonFileStore:
    def test_round_trip_on_disk(self, tmp_path):
        store = JsonFileStore(tmp_path / "store.json")
        save_placed_items(store, _layout())
        again = JsonFileStore(tmp_path / "store.json")
        assert load_placed_items(again) == _layout()

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"theme": "dark"}))
        store = JsonFileStore(path)
        save_placed_items(store, _layout())
        data = json.loads(path.read_text())
        assert data["theme"] == "dark"
        assert LAYOUT_KEY in data

    def test_missing_file(self, tmp_path):
        store = JsonFileStore(tmp_path / "absent.json")
        assert store.get(LAYOUT_KEY) is None

    def test_creates_parent_directories(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "dir" / "store.json")
        store.set("k", "v")
        assert store.get("k") == "v"
        assert not (tmp_path / "nested" / "dir" / "store.json.tmp").exists()

    def test_unreadable_file_is_replaced_on_save(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2")
        store = JsonFileStore(path)
        assert load_placed_items(store) == []
        assert save_placed_items(store, _layout())
        assert load_placed_items(store) == _layout()

    def test_non_string_value_ignored(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({LAYOUT_KEY: [1, 2, 3]}))
        assert JsonFileStore(path).get(LAYOUT_KEY) is None
