"""Shared pytest fixtures for the Map Viewport test suite."""

from __future__ import annotations

from typing import Any

import pytest

from map_viewport.core.config import ViewportConfig

# ---------------------------------------------------------------------------
# Sample locations
# ---------------------------------------------------------------------------

AMSTERDAM = {"lat": 52.3732, "lon": 4.8907}
BERLIN = {"lat": 52.5234, "lon": 13.4114}
ROTTERDAM = {"lat": 51.9244, "lon": 4.4777}
UTRECHT = {"lat": 52.0907, "lon": 5.1214}


@pytest.fixture()
def config() -> ViewportConfig:
    """Default engine configuration."""
    return ViewportConfig()


@pytest.fixture()
def amsterdam() -> dict[str, float]:
    return dict(AMSTERDAM)


@pytest.fixture()
def berlin() -> dict[str, float]:
    return dict(BERLIN)


# ---------------------------------------------------------------------------
# Feature input fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def dutch_markers() -> list[dict[str, Any]]:
    """Four markers spread over the Randstad."""
    return [dict(AMSTERDAM), dict(ROTTERDAM), dict(UTRECHT), {"lat": 52.0705, "lon": 4.3007}]


@pytest.fixture()
def amsterdam_polygon() -> dict[str, Any]:
    """A small polygon around central Amsterdam, ``[lon, lat]`` ring."""
    return {
        "type": "polygon",
        "coordinates": [[4.88, 52.36], [4.91, 52.36], [4.91, 52.38], [4.88, 52.38]],
        "label": "Centre",
    }


@pytest.fixture()
def amsterdam_circle() -> dict[str, Any]:
    """A 1 km circle around the Amsterdam marker."""
    return {"type": "circle", "center": dict(AMSTERDAM), "radius": 1000, "label": "1 km"}
