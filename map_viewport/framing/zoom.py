"""Zoom solver: the largest zoom at which bounds fit a pixel canvas.

Standard slippy-map inversion.  At zoom ``z`` the world is
``256 · 2**z`` pixels wide, so with the canvas inset by ``padding_px``
on every edge::

    lon_zoom = log2(effective_width  · 360 / (lon_span · 256))
    lat_zoom = log2(effective_height · 360 / (lat_span · 256))      # linear
    zoom     = min(lat_zoom, lon_zoom) − 0.1, clamped to [1, 17]

The ``mercator`` strategy replaces the latitude term with the span of
the bounds in Web Mercator (EPSG:3857) metres, which is exact for
north-south framing at high latitudes.

A zero span makes its term infinite; such terms are left out of the
``min`` instead of propagating infinities.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pyproj import Transformer

from map_viewport.core.constants import (
    DEFAULT_ZOOM_PADDING_PX,
    MAX_MERCATOR_LATITUDE,
    MAX_ZOOM,
    MIN_EFFECTIVE_CANVAS_PX,
    MIN_ZOOM,
    TILE_SIZE_PX,
    WEB_MERCATOR_EXTENT_M,
    ZOOM_OUT_BIAS,
    ZoomStrategy,
)

if TYPE_CHECKING:
    from map_viewport.models.geometry import Bounds

# Immutable and thread-safe, so one instance serves every call.
_WGS84_TO_WEB_MERCATOR = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


def solve_zoom(
    bounds: Bounds,
    width_px: float,
    height_px: float,
    padding_px: float = DEFAULT_ZOOM_PADDING_PX,
    *,
    strategy: ZoomStrategy = ZoomStrategy.LINEAR,
) -> float:
    """Return the zoom at which ``bounds`` fits the canvas, in ``[1, 17]``.

    Args:
        bounds: Padded bounds to frame.
        width_px: Canvas width in pixels.
        height_px: Canvas height in pixels.
        padding_px: Pixels kept free on each canvas edge.  Canvases
            smaller than twice the padding are floored at 1 px of
            usable space.
        strategy: Latitude treatment (``LINEAR`` or ``MERCATOR``).
    """
    effective_width = max(width_px - 2 * padding_px, MIN_EFFECTIVE_CANVAS_PX)
    effective_height = max(height_px - 2 * padding_px, MIN_EFFECTIVE_CANVAS_PX)

    if strategy is ZoomStrategy.MERCATOR:
        lat_zoom = _mercator_lat_zoom(bounds, effective_height)
    else:
        lat_zoom = _degree_zoom(bounds.lat_span, effective_height)
    lon_zoom = _degree_zoom(bounds.lon_span, effective_width)

    terms = [z for z in (lat_zoom, lon_zoom) if math.isfinite(z)]
    if not terms:
        return MAX_ZOOM

    zoom = min(terms) - ZOOM_OUT_BIAS
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def _degree_zoom(span_deg: float, pixels: float) -> float:
    if span_deg <= 0:
        return math.inf
    return math.log2(pixels * 360 / (span_deg * TILE_SIZE_PX))


def _mercator_lat_zoom(bounds: Bounds, pixels: float) -> float:
    south = max(-MAX_MERCATOR_LATITUDE, bounds.south)
    north = min(MAX_MERCATOR_LATITUDE, bounds.north)
    _, y_south = _WGS84_TO_WEB_MERCATOR.transform(0.0, south)
    _, y_north = _WGS84_TO_WEB_MERCATOR.transform(0.0, north)
    span_m = y_north - y_south
    if span_m <= 0:
        return math.inf
    return math.log2(pixels * WEB_MERCATOR_EXTENT_M / (span_m * TILE_SIZE_PX))
