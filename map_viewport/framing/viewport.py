"""Viewport composer: features or an explicit bbox in, ``Viewport`` out.

Two entry paths share the same tail (padding → zoom):

- feature-driven: ``parse_features`` → ``collect_points`` →
  ``compute_bounds`` → ``solve_zoom``;
- explicit bbox: the four edges are validated, the two corners are
  framed as a two-marker feature set, and the result is padded like any
  other.  An explicit bbox is never used verbatim.

Structural failures (``NoValidGeometryError``, ``DegenerateBoundsError``,
``InvalidBboxError``) propagate unchanged.  There is no retry and no
fallback viewport.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from map_viewport.core.config import ViewportConfig
from map_viewport.core.constants import (
    DEFAULT_HEIGHT_PX,
    DEFAULT_WIDTH_PX,
    DEFAULT_ZOOM_PADDING_PX,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    ZoomStrategy,
)
from map_viewport.core.exceptions import ValidationError
from map_viewport.framing.bounds import compute_bounds
from map_viewport.framing.collect import collect_points, parse_features
from map_viewport.framing.zoom import solve_zoom
from map_viewport.models.features import FeatureCounts, FeatureSet
from map_viewport.models.geometry import (
    LATITUDE,
    LONGITUDE,
    InvalidCoordinateError,
    Point,
    parse_coordinate,
)
from map_viewport.models.viewport import Viewport

logger = logging.getLogger("map_viewport.framing.viewport")

BBOX_LENGTH_MESSAGE = "bbox must contain exactly 4 numbers [west, south, east, north]"
BBOX_ORDER_MESSAGE = "Invalid bounds: west must be < east and south must be < north"

_BBOX_EDGES = (
    ("west", LONGITUDE, MIN_LONGITUDE, MAX_LONGITUDE),
    ("south", LATITUDE, MIN_LATITUDE, MAX_LATITUDE),
    ("east", LONGITUDE, MIN_LONGITUDE, MAX_LONGITUDE),
    ("north", LATITUDE, MIN_LATITUDE, MAX_LATITUDE),
)


class InvalidBboxError(ValidationError):
    """Raised when an explicit bbox fails its length, range or ordering checks."""

    default_stage = "compose"
    default_code = "BBOX_INVALID"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_viewport(request: Mapping[str, object], *, config: ViewportConfig | None = None) -> Viewport:
    """Compute the viewport for one rendering request.

    Args:
        request: Either ``{"bbox": [west, south, east, north]}`` or
            ``{"markers": [...], "routes": [...], "polygons": [...]}``,
            optionally with ``width``/``height`` in pixels.  A present
            ``bbox`` wins over features.
        config: Engine settings.  Defaults apply when omitted.

    Raises:
        InvalidBboxError: If an explicit bbox is malformed.
        NoValidGeometryError: If no feature yields a valid point.
    """
    config = config or ViewportConfig()
    bbox = request.get("bbox")

    features = FeatureSet()
    if bbox is None:
        features = parse_features(
            request.get("markers"),  # type: ignore[arg-type]
            request.get("routes"),  # type: ignore[arg-type]
            request.get("polygons"),  # type: ignore[arg-type]
            segments=config.circle_segments,
        )
    return compose_viewport(
        features,
        bbox=bbox,  # type: ignore[arg-type]
        width=request.get("width"),  # type: ignore[arg-type]
        height=request.get("height"),  # type: ignore[arg-type]
        config=config,
    )


def compose_viewport(
    features: FeatureSet,
    *,
    bbox: Sequence[object] | None = None,
    width: float | None = None,
    height: float | None = None,
    config: ViewportConfig | None = None,
) -> Viewport:
    """Frame ``bbox`` when given, otherwise the parsed ``features``.

    A missing or zero ``width``/``height`` falls back to the configured
    canvas.

    Raises:
        InvalidBboxError: If an explicit bbox is malformed.
        NoValidGeometryError: If no bbox is given and ``features`` holds
            no valid point.
    """
    config = config or ViewportConfig()
    width = width or config.default_width
    height = height or config.default_height

    if bbox is not None:
        return frame_bbox(
            bbox,
            width,
            height,
            padding_px=config.zoom_padding_px,
            strategy=config.zoom_strategy,
        )
    return frame_features(
        features,
        width,
        height,
        padding_px=config.zoom_padding_px,
        strategy=config.zoom_strategy,
    )


def frame_features(
    features: FeatureSet,
    width: float = DEFAULT_WIDTH_PX,
    height: float = DEFAULT_HEIGHT_PX,
    *,
    padding_px: float = DEFAULT_ZOOM_PADDING_PX,
    strategy: ZoomStrategy = ZoomStrategy.LINEAR,
) -> Viewport:
    """Frame an already-parsed feature set.

    Raises:
        NoValidGeometryError: If ``features`` holds no valid point.
    """
    points = collect_points(features)
    return _frame(points, features.counts, width, height, padding_px, strategy, source="features")


def frame_bbox(
    bbox: Sequence[object],
    width: float = DEFAULT_WIDTH_PX,
    height: float = DEFAULT_HEIGHT_PX,
    *,
    padding_px: float = DEFAULT_ZOOM_PADDING_PX,
    strategy: ZoomStrategy = ZoomStrategy.LINEAR,
) -> Viewport:
    """Frame an explicit ``[west, south, east, north]`` box, with padding.

    Raises:
        InvalidBboxError: If ``bbox`` is not four in-range numbers with
            ``west < east`` and ``south < north``.
    """
    west, south, east, north = _parse_bbox(bbox)
    corners = [Point(lat=south, lon=west), Point(lat=north, lon=east)]
    return _frame(corners, FeatureCounts(markers=len(corners)), width, height, padding_px, strategy, source="bbox")


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _frame(
    points: list[Point],
    counts: FeatureCounts,
    width: float,
    height: float,
    padding_px: float,
    strategy: ZoomStrategy,
    *,
    source: str,
) -> Viewport:
    result = compute_bounds(points, counts)
    zoom = solve_zoom(result.padded, width, height, padding_px, strategy=strategy)
    viewport = Viewport.from_bounds(result.padded, zoom)
    logger.info(
        "Viewport computed | source=%s | points=%d | zoom=%.2f | center=[%.5f, %.5f] | canvas=%sx%s",
        source,
        len(points),
        viewport.zoom,
        *viewport.center,
        width,
        height,
    )
    return viewport


def _parse_bbox(bbox: object) -> tuple[float, float, float, float]:
    if isinstance(bbox, str | bytes) or not isinstance(bbox, Sequence) or len(bbox) != 4:
        raise InvalidBboxError(BBOX_LENGTH_MESSAGE)

    values: list[float] = []
    for value, (edge, axis, low, high) in zip(bbox, _BBOX_EDGES, strict=True):
        try:
            values.append(parse_coordinate(value, axis))
        except InvalidCoordinateError as exc:
            msg = f"Invalid bbox: {edge} {value} out of range [{low:g}, {high:g}]"
            raise InvalidBboxError(msg) from exc

    west, south, east, north = values
    if west >= east or south >= north:
        raise InvalidBboxError(BBOX_ORDER_MESSAGE)
    return west, south, east, north
