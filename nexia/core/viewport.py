from __future__ import annotations

import math

from nexia.core.models import Viewport
from nexia.settings import ZOOM_MAX, ZOOM_MIN

INITIAL_VIEWPORT = Viewport()


def clamp_zoom(value: float) -> float:
    return max(ZOOM_MIN, min(ZOOM_MAX, value))


def pan(viewport: Viewport, dx: float, dy: float) -> Viewport:
    return Viewport(viewport.offset_x + dx, viewport.offset_y + dy, viewport.zoom)


def zoom(viewport: Viewport, factor: float) -> Viewport:
    """
    Multiply the zoom by `factor` and clamp to [ZOOM_MIN, ZOOM_MAX].

    A NaN product keeps the current viewport.
    """
    product = viewport.zoom * factor
    if math.isnan(product):
        return viewport
    return Viewport(viewport.offset_x, viewport.offset_y, clamp_zoom(product))


def reset() -> Viewport:
    return INITIAL_VIEWPORT
