"""Bounds and content-aware padding.

Raw bounds are the tight rectangle around every collected point.  The
padded bounds grow it by the same number of degrees on all four sides,
chosen from a small table of fixed multiples of the geographic span:

====================================  =========================
Condition (first match wins)          Base padding (degrees)
====================================  =========================
exactly one marker supplied           span × 0.3
span < 0.001°                         0.01
0.001° <= span < 0.01°                span × 0.5
otherwise                             span × 0.25
====================================  =========================

then, compounding: ×1.5 if routes are present and more than one marker
was supplied, and ×1.2 if more than three markers were supplied.  The
result is clamped to ±90° latitude and ±180° longitude.

A single marker with zero span would get no padding from its ratio, so
it falls through to the near-degenerate 0.01° instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from map_viewport.core.constants import (
    DEFAULT_PADDING_RATIO,
    MANY_MARKERS_PADDING_MULTIPLIER,
    MANY_MARKERS_THRESHOLD,
    NEAR_DEGENERATE_PADDING_DEG,
    NEAR_DEGENERATE_SPAN_DEG,
    ROUTE_PADDING_MULTIPLIER,
    SINGLE_MARKER_PADDING_RATIO,
    SMALL_SPAN_DEG,
    SMALL_SPAN_PADDING_RATIO,
)
from map_viewport.core.exceptions import PermanentError
from map_viewport.models.geometry import Bounds

if TYPE_CHECKING:
    from collections.abc import Sequence

    from map_viewport.models.features import FeatureCounts
    from map_viewport.models.geometry import Point

logger = logging.getLogger("map_viewport.framing.bounds")


class DegenerateBoundsError(PermanentError):
    """Raised when bounds cannot enclose a positive area.

    Unreachable for callers that collect points first: an empty point
    set is rejected earlier with ``NoValidGeometryError``.
    """

    default_stage = "bounds"
    default_code = "DEGENERATE_BOUNDS"


@dataclass(frozen=True, slots=True)
class BoundsResult:
    """Raw and padded bounds of one point set.

    Attributes:
        raw: Tight bounds around the points.
        padded: ``raw`` grown by ``padding_deg`` and clamped.
        padding_deg: Padding applied to each side, in degrees.
    """

    raw: Bounds
    padded: Bounds
    padding_deg: float


def compute_raw_bounds(points: Sequence[Point]) -> Bounds:
    """Tight ``{north, south, east, west}`` around ``points``.

    Raises:
        DegenerateBoundsError: If ``points`` is empty.
    """
    if not points:
        msg = "Cannot compute bounds: no points supplied"
        raise DegenerateBoundsError(msg)
    return Bounds.from_points(points)


def select_padding(span: float, counts: FeatureCounts) -> float:
    """Padding in degrees for a point set of the given span.

    Args:
        span: Larger of the raw latitude and longitude extents, in degrees.
        counts: Supplied feature counts; only markers and routes matter.
    """
    if counts.markers == 1 and span > 0:
        padding = span * SINGLE_MARKER_PADDING_RATIO
    elif span < NEAR_DEGENERATE_SPAN_DEG:
        padding = NEAR_DEGENERATE_PADDING_DEG
    elif span < SMALL_SPAN_DEG:
        padding = span * SMALL_SPAN_PADDING_RATIO
    else:
        padding = span * DEFAULT_PADDING_RATIO

    if counts.has_routes and counts.markers > 1:
        padding *= ROUTE_PADDING_MULTIPLIER

    if counts.markers > MANY_MARKERS_THRESHOLD:
        padding *= MANY_MARKERS_PADDING_MULTIPLIER

    return padding


def compute_bounds(points: Sequence[Point], counts: FeatureCounts) -> BoundsResult:
    """Compute raw bounds and content-aware padded bounds.

    Raises:
        DegenerateBoundsError: If ``points`` is empty or the padded
            rectangle has no area on either axis.
    """
    raw = compute_raw_bounds(points)
    padding = select_padding(raw.span, counts)
    padded = raw.expand(padding)

    if padded.west >= padded.east or padded.south >= padded.north:
        msg = (
            "Degenerate bounds after padding: "
            f"west={padded.west:g} east={padded.east:g} south={padded.south:g} north={padded.north:g}"
        )
        raise DegenerateBoundsError(msg)

    logger.debug(
        "Bounds padded | span=%.6f | padding=%.6f | markers=%d | routes=%d | bbox=[%.5f, %.5f, %.5f, %.5f]",
        raw.span,
        padding,
        counts.markers,
        counts.routes,
        *padded.to_bbox(),
    )
    return BoundsResult(raw=raw, padded=padded, padding_deg=padding)
