"""Headless command-line driver for a signal board.

Runs one board operation against a JSON file store and prints the result,
which makes layouts scriptable and easy to inspect without a UI.

Usage:
    signalcanvas catalog --category secondary --search sub
    signalcanvas --width 320 --height 480 --compact auto a
    signalcanvas --parent-width 390 --aspect 1.5 --touch status
    signalcanvas place a 120 200
    signalcanvas move <id> 150 220
    signalcanvas remove <id>
    signalcanvas list
    signalcanvas status
    signalcanvas clear
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..engine.catalog_io import load_catalog
from ..engine.types import CatalogItem, Category, DeviceClass, PlacedItem
from .board import SignalBoard
from .catalogs import CATEGORY_TABS, ITEM_CATALOGS, filter_catalog
from .device import ViewportGeometry, detect_device_class, fit_canvas
from .layout_io import JsonFileStore
from .settings import BoardSettings, load_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signalcanvas",
        description="Place signal flags on a board from the command line.",
    )
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument(
        "--store", help="JSON store file (overrides settings)"
    )
    parser.add_argument("--width", type=float, help="Canvas width in px")
    parser.add_argument("--height", type=float, help="Canvas height in px")
    parser.add_argument(
        "--parent-width",
        type=float,
        help="Size the canvas to fit a container this wide (max 800 px)",
    )
    parser.add_argument(
        "--aspect",
        type=float,
        default=0.0,
        help="Background height/width ratio used with --parent-width",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Treat the client as a compact (touch) device",
    )
    parser.add_argument(
        "--touch",
        action="store_true",
        help="Client has a touch screen (device class is detected)",
    )
    parser.add_argument("--user-agent", default="", help="Client user agent")
    parser.add_argument(
        "--viewport-width", type=float, default=0.0, help="Viewport width"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("catalog", help="List catalog items")
    p.add_argument(
        "--category", choices=[c.value for c in Category], default=None
    )
    p.add_argument("--search", default="")

    sub.add_parser("list", help="List placed items")
    sub.add_parser("status", help="Show grid, cursor and overlaps")
    sub.add_parser("clear", help="Remove every placed item")

    p = sub.add_parser("auto", help="Auto-place a catalog item")
    p.add_argument("key")

    p = sub.add_parser("place", help="Place a catalog item at a point")
    p.add_argument("key")
    p.add_argument("x", type=float)
    p.add_argument("y", type=float)

    p = sub.add_parser("move", help="Move a placed item")
    p.add_argument("id")
    p.add_argument("x", type=float)
    p.add_argument("y", type=float)

    p = sub.add_parser("remove", help="Remove a placed item")
    p.add_argument("id")
    return parser


def _resolve_settings(args: argparse.Namespace) -> BoardSettings:
    if args.settings:
        settings = load_settings(args.settings)
    else:
        settings = BoardSettings()
    if args.store:
        settings.store_path = Path(args.store)
    if args.parent_width is not None:
        settings.canvas_width, settings.canvas_height = fit_canvas(
            args.parent_width, args.aspect
        )
    if args.width is not None:
        settings.canvas_width = args.width
    if args.height is not None:
        settings.canvas_height = args.height
    if args.touch or args.user_agent or args.viewport_width:
        settings.device_class = detect_device_class(
            args.touch, args.user_agent, args.viewport_width
        )
    if args.compact:
        settings.device_class = DeviceClass.COMPACT
    return settings


def _load_items(settings: BoardSettings) -> list[CatalogItem]:
    if settings.catalog_path is not None:
        return load_catalog(settings.catalog_path)
    if settings.catalog not in ITEM_CATALOGS:
        raise ValueError(f"Unknown catalog: {settings.catalog}")
    return ITEM_CATALOGS[settings.catalog]


def _format_item(item: PlacedItem) -> str:
    return f"{item.id}  {item.type:<10} {item.left:8.1f} {item.top:8.1f}"


def _print_status(board: SignalBoard) -> None:
    config = board.engine.grid_config()
    cursor = board.engine.cursor
    width, height = board.content_size()
    print(f"canvas:   {config.canvas_width:g} x {config.canvas_height:g}")
    print(
        f"grid:     {config.max_columns} columns x "
        f"{config.max_items_per_column} rows, "
        f"start ({config.start_x:g}, {config.start_y:g})"
    )
    print(
        f"cursor:   column {cursor.column}, row {cursor.row}"
        + (" (rollover pending)" if cursor.transitioning else "")
    )
    print(f"content:  {width:g} x {height:g}")
    print(f"items:    {len(board.items)}")
    for a, b in board.engine.overlapping_pairs():
        print(f"overlap:  {a} {b}")


def run(args: argparse.Namespace) -> int:
    settings = _resolve_settings(args)
    catalog = _load_items(settings)

    if args.command == "catalog":
        category = Category(args.category) if args.category else None
        for entry in filter_catalog(catalog, category, args.search):
            tab = CATEGORY_TABS[entry.category]
            print(f"{entry.type:<10} {entry.name:<20} {tab}")
        return 0

    geometry = ViewportGeometry(
        settings.canvas_width, settings.canvas_height, settings.device_class
    )
    board = SignalBoard(
        catalog, geometry, JsonFileStore(settings.store_path), settings
    )

    if args.command == "list":
        for item in board.items:
            print(_format_item(item))
    elif args.command == "status":
        _print_status(board)
    elif args.command == "clear":
        board.clear_all()
    elif args.command == "auto":
        placed = board.auto_place(args.key)
        if placed is None:
            print("nothing placed")
            return 1
        print(_format_item(placed))
    elif args.command == "place":
        placed = board.place_at(args.key, args.x, args.y)
        if placed is None:
            print(f"unknown catalog key: {args.key}")
            return 1
        print(_format_item(placed))
    elif args.command == "move":
        moved = board.move(args.id, args.x, args.y)
        if moved is None:
            print(f"no placed item with id {args.id}")
            return 1
        print(_format_item(moved))
    elif args.command == "remove":
        if not board.remove(args.id):
            print(f"no placed item with id {args.id}")
            return 1

    if board.notification is not None:
        print(board.notification.message)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
