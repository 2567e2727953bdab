"""Coordinate extraction: resolve heterogeneous point inputs into ``Point``.

Accepted shapes, tried in this fixed order:

1. a list/tuple of at least two numbers, read as ``[lat, lon]``;
2. a mapping with a ``coordinates`` list of at least two numbers, read as ``[lat, lon]``;
3. a mapping with ``lat`` and ``lon`` fields.

Polygon rings are the one input read lon-first (GeoJSON order).  They use
``parse_lon_first`` explicitly; no parser guesses axis order from values.

A malformed feature is dropped, not fatal: ``extract`` returns ``None``
and emits one WARNING diagnostic carrying ``{type, index, reason}`` in
the record's ``diagnostic`` attribute.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from map_viewport.models.geometry import (
    LATITUDE,
    LONGITUDE,
    InvalidCoordinateError,
    Point,
    parse_coordinate,
)

logger = logging.getLogger("map_viewport.framing.coordinates")

__all__ = [
    "InvalidCoordinateError",
    "extract",
    "parse_lat_first",
    "parse_lon_first",
    "report_dropped",
    "resolve_point",
]


def parse_lat_first(pair: Sequence[object]) -> Point:
    """Parse a ``[lat, lon, ...]`` sequence.

    Raises:
        InvalidCoordinateError: If the pair is too short or a value is invalid.
    """
    _check_pair(pair)
    return Point(lat=parse_coordinate(pair[0], LATITUDE), lon=parse_coordinate(pair[1], LONGITUDE))


def parse_lon_first(pair: Sequence[object]) -> Point:
    """Parse a ``[lon, lat, ...]`` sequence (GeoJSON order).

    Raises:
        InvalidCoordinateError: If the pair is too short or a value is invalid.
    """
    _check_pair(pair)
    return Point(lat=parse_coordinate(pair[1], LATITUDE), lon=parse_coordinate(pair[0], LONGITUDE))


def resolve_point(item: object) -> Point:
    """Resolve one point input of any accepted shape.

    Raises:
        InvalidCoordinateError: If no shape matches or the values are invalid.
    """
    if isinstance(item, list | tuple):
        return parse_lat_first(item)

    if isinstance(item, Mapping):
        coordinates = item.get("coordinates")
        if isinstance(coordinates, list | tuple):
            return parse_lat_first(coordinates)
        if item.get("lat") is not None and item.get("lon") is not None:
            return Point(
                lat=parse_coordinate(item["lat"], LATITUDE),
                lon=parse_coordinate(item["lon"], LONGITUDE),
            )

    msg = f"Could not extract coordinates from {type(item).__name__}"
    raise InvalidCoordinateError(msg)


def extract(item: object, index: int | str, kind: str = "marker") -> Point | None:
    """Resolve ``item`` or drop it with a diagnostic.

    Args:
        item: Raw point input.
        index: Position of the item, used in the diagnostic
            (``"2-5"`` style for route vertices).
        kind: Feature type named in the diagnostic.

    Returns:
        The canonical ``Point``, or ``None`` if the item was dropped.
    """
    try:
        return resolve_point(item)
    except InvalidCoordinateError as exc:
        report_dropped(kind, index, exc.message)
        return None


def report_dropped(kind: str, index: int | str, reason: str) -> None:
    """Emit the structured diagnostic for one dropped feature."""
    logger.warning(
        "Dropped %s | index=%s | reason=%s",
        kind,
        index,
        reason,
        extra={"diagnostic": {"type": kind, "index": index, "reason": reason}},
    )


def _check_pair(pair: Sequence[object]) -> None:
    if len(pair) < 2:
        msg = f"Coordinate pair needs at least 2 values, got {len(pair)}"
        raise InvalidCoordinateError(msg)
