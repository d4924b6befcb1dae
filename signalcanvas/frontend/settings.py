"""Board settings: where the layout lives and how the grid is sized.

Settings are a plain dataclass with ``from_dict``/``to_dict`` so they can
come from a JSON file (``load_settings``) or be built in code. Grid profile
overrides are partial: only the keys given replace the built-in values for
that device class, e.g.::

    {"profiles": {"compact": {"safety_margin": 20}}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from ..engine.cursor import MAX_RESOLVE_ATTEMPTS
from ..engine.grid import DEFAULT_PROFILES, GridProfile
from ..engine.types import DeviceClass
from .catalogs import DEFAULT_CATALOG
from .layout_io import LAYOUT_KEY

DEFAULT_STORE_PATH = Path("signalcanvas_store.json")


@dataclass
class BoardSettings:
    store_path: Path = DEFAULT_STORE_PATH
    store_key: str = LAYOUT_KEY
    catalog: str = DEFAULT_CATALOG
    catalog_path: Path | None = None
    canvas_width: float = 0.0
    canvas_height: float = 0.0
    device_class: DeviceClass = DeviceClass.REGULAR
    max_attempts: int = MAX_RESOLVE_ATTEMPTS
    profiles: dict[DeviceClass, GridProfile] = field(
        default_factory=lambda: dict(DEFAULT_PROFILES)
    )

    @staticmethod
    def from_dict(d: dict) -> BoardSettings:
        profiles = dict(DEFAULT_PROFILES)
        for name, overrides in d.get("profiles", {}).items():
            device_class = DeviceClass(name)
            profiles[device_class] = GridProfile.from_dict(
                overrides, base=profiles[device_class]
            )
        max_attempts = int(d.get("max_attempts", MAX_RESOLVE_ATTEMPTS))
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        catalog_path = d.get("catalog_path")
        return BoardSettings(
            store_path=Path(d.get("store_path", DEFAULT_STORE_PATH)),
            store_key=d.get("store_key", LAYOUT_KEY),
            catalog=d.get("catalog", DEFAULT_CATALOG),
            catalog_path=Path(catalog_path) if catalog_path else None,
            canvas_width=float(d.get("canvas_width", 0.0)),
            canvas_height=float(d.get("canvas_height", 0.0)),
            device_class=DeviceClass(
                d.get("device_class", DeviceClass.REGULAR.value)
            ),
            max_attempts=max_attempts,
            profiles=profiles,
        )

    def to_dict(self) -> dict:
        d: dict = {
            "store_path": str(self.store_path),
            "store_key": self.store_key,
            "catalog": self.catalog,
            "canvas_width": self.canvas_width,
            "canvas_height": self.canvas_height,
            "device_class": self.device_class.value,
            "max_attempts": self.max_attempts,
            "profiles": {
                dc.value: p.to_dict() for dc, p in self.profiles.items()
            },
        }
        if self.catalog_path:
            d["catalog_path"] = str(self.catalog_path)
        return d


def load_settings(path: Path | str) -> BoardSettings:
    """Load settings from a JSON file.

    Raises ValueError if the file is not a JSON object or holds an invalid
    value (unknown device class, unknown profile key, ...).
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file is not a JSON object: {path}")
    return BoardSettings.from_dict(data)
