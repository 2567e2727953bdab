"""Shared framing constants.

The padding multipliers and zoom clamp were tuned empirically against
the supported base-map styles.  They are pinned by the unit tests and
must not drift.
"""

from __future__ import annotations

import enum

# ---------------------------------------------------------------------------
# Coordinate ranges (WGS 84)
# ---------------------------------------------------------------------------

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# Web Mercator is undefined at the poles; EPSG:3857 stops here.
MAX_MERCATOR_LATITUDE = 85.05112878

# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------

EARTH_RADIUS_M = 6_371_000.0
"""Mean Earth radius used for spherical circle rasterisation."""

DEFAULT_CIRCLE_SEGMENTS = 64

# ---------------------------------------------------------------------------
# Padding heuristic (degrees)
# ---------------------------------------------------------------------------

SINGLE_MARKER_PADDING_RATIO = 0.3
NEAR_DEGENERATE_SPAN_DEG = 0.001
NEAR_DEGENERATE_PADDING_DEG = 0.01
SMALL_SPAN_DEG = 0.01
SMALL_SPAN_PADDING_RATIO = 0.5
DEFAULT_PADDING_RATIO = 0.25

ROUTE_PADDING_MULTIPLIER = 1.5
"""Applied when routes are present and more than one marker is supplied."""

MANY_MARKERS_THRESHOLD = 3
MANY_MARKERS_PADDING_MULTIPLIER = 1.2

# ---------------------------------------------------------------------------
# Zoom solver
# ---------------------------------------------------------------------------

TILE_SIZE_PX = 256
MIN_ZOOM = 1.0
MAX_ZOOM = 17.0
ZOOM_OUT_BIAS = 0.1
DEFAULT_ZOOM_PADDING_PX = 80
MIN_EFFECTIVE_CANVAS_PX = 1.0

# Full Web Mercator extent (metres) along each axis of EPSG:3857.
WEB_MERCATOR_EXTENT_M = 2 * 20_037_508.342789244

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

MIN_CANVAS_PX = 100
MAX_CANVAS_PX = 2048
DEFAULT_WIDTH_PX = 800
DEFAULT_HEIGHT_PX = 600

# ---------------------------------------------------------------------------
# Map backends
# ---------------------------------------------------------------------------

BACKEND_GENESIS = "genesis"
BACKEND_ORBIS = "orbis"
MAP_BACKENDS = (BACKEND_GENESIS, BACKEND_ORBIS)


class ZoomStrategy(enum.Enum):
    """How the zoom solver treats the latitude axis.

    Values:
        LINEAR:   Degree span mapped linearly onto the tile pyramid.
        MERCATOR: Latitude span measured in Web Mercator (EPSG:3857) metres.
    """

    LINEAR = "linear"
    MERCATOR = "mercator"
