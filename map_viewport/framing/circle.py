"""Circle rasterisation on a spherical Earth.

Approximates a geodesic circle as an ordered ring of boundary points by
solving the direct geodesic problem ("destination given distance and
bearing") for equally spaced bearings on a sphere of radius
``EARTH_RADIUS_M``:

    lat_i = asin(sin(lat0)·cos(δ) + cos(lat0)·sin(δ)·cos(θ_i))
    lon_i = lon0 + atan2(sin(θ_i)·sin(δ)·cos(lat0), cos(δ) − sin(lat0)·sin(lat_i))

with δ = radius / EARTH_RADIUS_M and θ_i = 2π·i / segments.

Output longitudes are normalised into [-180, 180], so a circle that
crosses the antimeridian yields points on both sides of it.
"""

from __future__ import annotations

import math

import numpy as np

from map_viewport.core.constants import (
    DEFAULT_CIRCLE_SEGMENTS,
    EARTH_RADIUS_M,
    MAX_LATITUDE,
    MIN_LATITUDE,
)
from map_viewport.core.exceptions import ValidationError
from map_viewport.models.geometry import LATITUDE, LONGITUDE, Point, parse_coordinate


class InvalidCircleError(ValidationError):
    """Raised when a circle's radius or segment count is unusable."""

    default_stage = "circle"
    default_code = "CIRCLE_INVALID"


def circle_points(
    center_lat: float,
    center_lon: float,
    radius_m: float,
    segments: int = DEFAULT_CIRCLE_SEGMENTS,
) -> list[Point]:
    """Return ``segments`` points on the circle, starting due north, clockwise.

    Args:
        center_lat: Centre latitude in degrees.
        center_lon: Centre longitude in degrees.
        radius_m: Great-circle radius in metres (> 0).
        segments: Number of boundary points (>= 1).

    Raises:
        InvalidCoordinateError: If the centre is invalid.
        InvalidCircleError: If the radius or segment count is invalid.
    """
    lat0 = math.radians(parse_coordinate(center_lat, LATITUDE))
    lon0 = math.radians(parse_coordinate(center_lon, LONGITUDE))

    if isinstance(radius_m, bool) or not isinstance(radius_m, int | float):
        msg = f"Circle radius must be a number of metres, got {radius_m!r}"
        raise InvalidCircleError(msg)
    if not math.isfinite(radius_m) or radius_m <= 0:
        msg = f"Circle radius must be a positive finite number of metres, got {radius_m!r}"
        raise InvalidCircleError(msg)
    if isinstance(segments, bool) or not isinstance(segments, int) or segments < 1:
        msg = f"Circle segments must be a positive integer, got {segments!r}"
        raise InvalidCircleError(msg)

    delta = radius_m / EARTH_RADIUS_M
    bearings = 2 * np.pi * np.arange(segments) / segments

    lats = np.arcsin(
        np.sin(lat0) * np.cos(delta) + np.cos(lat0) * np.sin(delta) * np.cos(bearings)
    )
    lons = lon0 + np.arctan2(
        np.sin(bearings) * np.sin(delta) * np.cos(lat0),
        np.cos(delta) - np.sin(lat0) * np.sin(lats),
    )

    lat_deg = np.clip(np.degrees(lats), MIN_LATITUDE, MAX_LATITUDE)
    lon_deg = _normalise_longitudes(np.degrees(lons))

    return [Point(lat=float(lat), lon=float(lon)) for lat, lon in zip(lat_deg, lon_deg, strict=True)]


def _normalise_longitudes(lons: np.ndarray) -> np.ndarray:
    wrapped = (lons + 180.0) % 360.0 - 180.0
    # Keep an exact +180 input on the eastern edge rather than folding it to -180.
    return np.where((wrapped == -180.0) & (lons > 0), 180.0, wrapped)
