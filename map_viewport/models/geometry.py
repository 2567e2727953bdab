"""Geographic value objects: ``Point`` and ``Bounds``.

Both are frozen dataclasses that validate their invariants at
construction, so any instance that exists is known to be legal WGS 84.

Design notes:
- ``Point`` is the single canonical coordinate type.  Every input shape
  (named fields, lat-first pairs, lon-first rings) is resolved into it
  once, at the boundary, by ``map_viewport.framing.coordinates``.
- ``Bounds`` never wraps the antimeridian: ``west <= east`` always holds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from map_viewport.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)
from map_viewport.core.exceptions import ValidationError, ViewportError

if TYPE_CHECKING:
    from collections.abc import Iterable

LATITUDE = "latitude"
LONGITUDE = "longitude"

_RANGES = {
    LATITUDE: (MIN_LATITUDE, MAX_LATITUDE),
    LONGITUDE: (MIN_LONGITUDE, MAX_LONGITUDE),
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InvalidCoordinateError(ValidationError):
    """Raised when a coordinate is non-numeric or outside WGS 84 range."""

    default_stage = "extract"
    default_code = "COORDINATE_INVALID"


class ModelValidationError(ValueError, ViewportError):
    """Raised when a value object is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        ViewportError.__init__(self, formatted)


# ---------------------------------------------------------------------------
# Coordinate parsing
# ---------------------------------------------------------------------------


def parse_coordinate(value: object, axis: str) -> float:
    """Parse a raw coordinate component and check it against its axis range.

    Accepts ints, floats and numeric strings.  Booleans, ``None``, NaN and
    infinities are non-numeric for this purpose.

    Args:
        value: Raw component as received from the caller.
        axis: ``"latitude"`` or ``"longitude"``.

    Returns:
        The component as a float.

    Raises:
        InvalidCoordinateError: If the value is non-numeric or out of range.
    """
    if value is None or isinstance(value, bool):
        msg = f"Invalid {axis} coordinate: {value!r}"
        raise InvalidCoordinateError(msg)
    try:
        num = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"Invalid {axis} coordinate: {value!r}"
        raise InvalidCoordinateError(msg) from exc
    if math.isnan(num):
        msg = f"Invalid {axis} coordinate: {value!r}"
        raise InvalidCoordinateError(msg)

    low, high = _RANGES[axis]
    if not low <= num <= high:
        msg = f"{axis.capitalize()} out of range [{low:g}, {high:g}]: {num:g}"
        raise InvalidCoordinateError(msg)
    return num


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """A validated WGS 84 coordinate.

    Attributes:
        lat: Latitude in degrees, ``[-90, 90]``.
        lon: Longitude in degrees, ``[-180, 180]``.
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        for axis, value in ((LATITUDE, self.lat), (LONGITUDE, self.lon)):
            if isinstance(value, bool) or not isinstance(value, int | float):
                msg = f"Invalid {axis} coordinate: {value!r}"
                raise InvalidCoordinateError(msg)
            parse_coordinate(value, axis)

    def to_lon_lat(self) -> tuple[float, float]:
        """Return ``(lon, lat)``, the GeoJSON axis order."""
        return (self.lon, self.lat)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Bounds:
    """An axis-aligned rectangle in latitude/longitude degrees.

    Invariants: ``south <= north``, ``west <= east``, and every edge lies
    in the legal WGS 84 range.  Antimeridian wrapping is not supported.

    Attributes:
        north: Northern edge latitude.
        south: Southern edge latitude.
        east: Eastern edge longitude.
        west: Western edge longitude.
    """

    north: float
    south: float
    east: float
    west: float

    def __post_init__(self) -> None:
        for name, axis in (
            ("north", LATITUDE),
            ("south", LATITUDE),
            ("east", LONGITUDE),
            ("west", LONGITUDE),
        ):
            value = getattr(self, name)
            low, high = _RANGES[axis]
            if isinstance(value, bool) or not isinstance(value, int | float) or not low <= value <= high:
                raise ModelValidationError("Bounds", name, value, f"must be in [{low:g}, {high:g}]")
        if self.south > self.north:
            raise ModelValidationError("Bounds", "south", self.south, "must be <= north")
        if self.west > self.east:
            raise ModelValidationError("Bounds", "west", self.west, "must be <= east")

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Bounds:
        """Tight bounds around ``points``.

        Raises:
            ValueError: If ``points`` is empty.
        """
        pts = list(points)
        if not pts:
            msg = "Cannot compute bounds of an empty point set"
            raise ValueError(msg)
        lats = [p.lat for p in pts]
        lons = [p.lon for p in pts]
        return cls(north=max(lats), south=min(lats), east=max(lons), west=min(lons))

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lon_span(self) -> float:
        return self.east - self.west

    @property
    def span(self) -> float:
        """The larger of the latitude and longitude extents, in degrees."""
        return max(self.lat_span, self.lon_span)

    @property
    def center(self) -> tuple[float, float]:
        """Arithmetic midpoint as ``(lon, lat)``."""
        return ((self.west + self.east) / 2, (self.south + self.north) / 2)

    def expand(self, degrees: float) -> Bounds:
        """Grow every edge by ``degrees``, clamped to the legal range."""
        return Bounds(
            north=min(MAX_LATITUDE, self.north + degrees),
            south=max(MIN_LATITUDE, self.south - degrees),
            east=min(MAX_LONGITUDE, self.east + degrees),
            west=max(MIN_LONGITUDE, self.west - degrees),
        )

    def contains(self, other: Bounds) -> bool:
        return (
            self.south <= other.south
            and self.north >= other.north
            and self.west <= other.west
            and self.east >= other.east
        )

    def contains_point(self, point: Point) -> bool:
        return self.south <= point.lat <= self.north and self.west <= point.lon <= self.east

    def to_bbox(self) -> list[float]:
        """Return ``[west, south, east, north]``."""
        return [self.west, self.south, self.east, self.north]

    def to_dict(self) -> dict[str, float]:
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west,
        }
