"""Device classification and canvas sizing.

Pure helpers with no UI toolkit dependency. The presentation layer feeds in
what it knows about the client (touch capability, user agent, viewport and
container widths) and gets back the ``Geometry`` the engine reads.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from ..engine.types import DeviceClass, Geometry, PlacedItem

COMPACT_VIEWPORT_MAX = 768
MAX_CANVAS_WIDTH = 800.0
CONTENT_PADDING = 50.0

_MOBILE_UA = re.compile(
    r"android|webos|iphone|ipad|ipod|blackberry|iemobile|opera mini"
    r"|mobile|tablet",
    re.IGNORECASE,
)


def detect_device_class(
    has_touch: bool, user_agent: str = "", viewport_width: float = 0.0
) -> DeviceClass:
    """Compact means touch-capable AND (mobile user agent OR small screen)."""
    if not has_touch:
        return DeviceClass.REGULAR
    small_screen = 0 < viewport_width <= COMPACT_VIEWPORT_MAX
    if _MOBILE_UA.search(user_agent or "") or small_screen:
        return DeviceClass.COMPACT
    return DeviceClass.REGULAR


def fit_canvas(
    parent_width: float,
    aspect_ratio: float,
    max_width: float = MAX_CANVAS_WIDTH,
) -> tuple[float, float]:
    """Canvas size for a container of ``parent_width``.

    Width is capped at ``max_width``; height follows the background image's
    ``height / width`` ratio. A ratio that is not yet known (<= 0) yields a
    zero height, which the grid treats as unmeasured.
    """
    width = max(0.0, min(float(parent_width), max_width))
    if aspect_ratio <= 0:
        return width, 0.0
    return width, width * aspect_ratio


def content_size(
    items: Iterable[PlacedItem],
    canvas_width: float,
    canvas_height: float,
    item_extent: float = 64.0,
    padding: float = CONTENT_PADDING,
) -> tuple[float, float]:
    """Scrollable content extent: the canvas grown to cover every item."""
    right = bottom = 0.0
    for item in items:
        right = max(right, item.left + item_extent)
        bottom = max(bottom, item.top + item_extent)
    return (
        max(canvas_width, right + padding),
        max(canvas_height, bottom + padding),
    )


class ViewportGeometry:
    """Mutable ``GeometryProvider`` updated by the presentation layer."""

    def __init__(
        self,
        width: float = 0.0,
        height: float = 0.0,
        device_class: DeviceClass = DeviceClass.REGULAR,
    ) -> None:
        self._geometry = Geometry(width, height, device_class)

    def current_geometry(self) -> Geometry:
        return self._geometry

    def resize(self, width: float, height: float) -> None:
        self._geometry = Geometry(width, height, self._geometry.device_class)
