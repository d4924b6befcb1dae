import json

import pytest

from signalcanvas.frontend.cli import main


@pytest.fixture
def store(tmp_path):
    return tmp_path / "store.json"


def _run(store, *argv):
    phone = ["--width", "320", "--height", "480", "--compact"]
    return main(["--store", str(store), *phone, *argv])


def _ids(store):
    data = json.loads(store.read_text())
    return [d["id"] for d in json.loads(data["placedFlags"])]


class TestCatalogCommand:
    def test_filtered_listing(self, store, capsys):
        argv = ["catalog", "--category", "secondary", "--search", "sub"]
        assert _run(store, *argv) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in lines] == ["sub1", "sub2", "sub3"]
        assert all(line.endswith("Pennants") for line in lines)
        assert not store.exists()


class TestBoardCommands:
    def test_auto_place_then_list(self, store, capsys):
        assert _run(store, "auto", "a") == 0
        out = capsys.readouterr().out
        assert "Alfa placed on canvas" in out
        assert "37.0" in out and "66.0" in out

        assert _run(store, "list") == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 1
        assert lines[0].split()[0] == _ids(store)[0]

    def test_status_shows_cursor(self, store, capsys):
        _run(store, "auto", "a")
        capsys.readouterr()
        assert _run(store, "status") == 0
        out = capsys.readouterr().out
        assert "cursor:   column 0, row 1" in out
        assert "items:    1" in out
        assert "overlap" not in out

    def test_status_reports_overlaps(self, store, capsys):
        _run(store, "place", "a", "100", "100")
        _run(store, "place", "b", "110", "100")
        capsys.readouterr()
        _run(store, "status")
        first, second = _ids(store)
        assert f"overlap:  {first} {second}" in capsys.readouterr().out

    def test_move_and_remove(self, store, capsys):
        _run(store, "auto", "a")
        (item_id,) = _ids(store)
        assert _run(store, "move", item_id, "1000", "1000") == 0
        assert "283.0" in capsys.readouterr().out
        assert _run(store, "remove", item_id) == 0
        assert _ids(store) == []

    def test_misses_return_one(self, store, capsys):
        assert _run(store, "move", "missing", "10", "10") == 1
        assert _run(store, "remove", "missing") == 1
        assert _run(store, "place", "zz", "10", "10") == 1
        assert _run(store, "auto", "zz") == 1
        out = capsys.readouterr().out
        assert "no placed item with id missing" in out
        assert "unknown catalog key: zz" in out

    def test_clear(self, store, capsys):
        _run(store, "auto", "a")
        _run(store, "auto", "b")
        assert _run(store, "clear") == 0
        assert "Board cleared" in capsys.readouterr().out
        assert _ids(store) == []


class TestErrors:
    def test_bad_settings_file(self, tmp_path, capsys):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"device_class": "watch"}))
        assert main(["--settings", str(settings), "list"]) == 2
        assert "Error:" in capsys.readouterr().err

    def test_zero_sized_profile_is_a_settings_error(self, tmp_path, capsys):
        settings = tmp_path / "settings.json"
        settings.write_text(
            json.dumps(
                {
                    "profiles": {
                        "compact": {"item_height": 0, "vertical_spacing": 0}
                    }
                }
            )
        )
        argv = ["--settings", str(settings), "--compact", "auto", "a"]
        assert main(argv) == 2
        assert "item_height" in capsys.readouterr().err

    def test_missing_catalog_file(self, tmp_path, capsys):
        settings = tmp_path / "settings.json"
        settings.write_text(
            json.dumps({"catalog_path": str(tmp_path / "absent.json")})
        )
        assert main(["--settings", str(settings), "catalog"]) == 2

    def test_settings_supply_store(self, tmp_path, capsys):
        store = tmp_path / "from-settings.json"
        settings = tmp_path / "settings.json"
        settings.write_text(
            json.dumps(
                {
                    "store_path": str(store),
                    "canvas_width": 320,
                    "canvas_height": 480,
                    "device_class": "compact",
                }
            )
        )
        assert main(["--settings", str(settings), "auto", "c"]) == 0
        assert len(_ids(store)) == 1


class TestClientGeometry:
    def test_touch_phone_gets_compact_grid(self, store, capsys):
        argv = [
            "--store", str(store),
            "--parent-width", "390", "--aspect", "1.5",
            "--touch", "--user-agent", "Mozilla/5.0 (iPhone) Mobile",
            "status",
        ]
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "canvas:   390 x 585" in out
        assert "start (37, 45)" in out

    def test_wide_parent_is_capped(self, store, capsys):
        argv = [
            "--store", str(store),
            "--parent-width", "1200", "--aspect", "0.75",
            "status",
        ]
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "canvas:   800 x 600" in out
        assert "start (312, 55)" in out

    def test_large_touch_screen_stays_regular(self, store, capsys):
        argv = [
            "--store", str(store),
            "--width", "800", "--height", "600",
            "--touch", "--viewport-width", "1366",
            "place", "a", "5", "5",
        ]
        assert main(argv) == 0
        line = capsys.readouterr().out.splitlines()[0]
        # Regular canvases scroll, so the drop is not clamped.
        assert line.split()[-2:] == ["5.0", "5.0"]

    def test_touch_small_viewport_clamps_drops(self, store, capsys):
        argv = [
            "--store", str(store),
            "--width", "320", "--height", "480",
            "--touch", "--viewport-width", "700",
            "place", "a", "5", "5",
        ]
        assert main(argv) == 0
        line = capsys.readouterr().out.splitlines()[0]
        assert line.split()[-2:] == ["37.0", "37.0"]
