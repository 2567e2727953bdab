"""Tests for the viewport composer.

Covers:
- Feature-driven scenarios (single marker, two distant markers, mixed features)
- Explicit bbox path (always padded, validation messages)
- Error propagation and idempotence
- Configuration threading (canvas defaults, strategy, circle segments)
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from map_viewport.core.config import ViewportConfig
from map_viewport.core.constants import ZoomStrategy
from map_viewport.framing.collect import NoValidGeometryError, parse_features
from map_viewport.framing.coordinates import extract
from map_viewport.framing.viewport import (
    InvalidBboxError,
    compose_viewport,
    compute_viewport,
    frame_bbox,
    frame_features,
)
from map_viewport.framing.zoom import solve_zoom
from map_viewport.models.features import FeatureSet
from map_viewport.models.geometry import Bounds


class TestFeatureScenarios:
    def test_single_marker(self) -> None:
        vp = compute_viewport({"markers": [{"lat": 52.3732, "lon": 4.8907}], "width": 800, "height": 600})
        assert vp.bounds.north > 52.3732 > vp.bounds.south
        assert vp.bounds.east > 4.8907 > vp.bounds.west
        assert vp.bounds.lat_span > 0
        assert vp.bounds.lon_span > 0
        assert 1 <= vp.zoom <= 17

    def test_single_marker_with_tiny_polygon_uses_marker_ratio(self) -> None:
        request = {
            "markers": [{"lat": 52.0, "lon": 4.0}],
            "polygons": [{"coordinates": [[4.0, 52.0], [4.0005, 52.0], [4.0005, 52.0005]]}],
        }
        vp = compute_viewport(request)
        assert vp.bounds.north == pytest.approx(52.0005 + 0.00015)
        assert vp.bounds.south == pytest.approx(52.0 - 0.00015)

    def test_two_distant_markers(self, amsterdam: dict, berlin: dict) -> None:
        vp = compute_viewport({"markers": [amsterdam, berlin]})
        assert vp.bounds.north > 52.5234
        assert vp.bounds.south < 52.3732
        assert vp.bounds.east > 13.4114
        assert vp.bounds.west < 4.8907

    def test_center_is_midpoint_of_padded_bounds(self, amsterdam: dict, berlin: dict) -> None:
        vp = compute_viewport({"markers": [amsterdam, berlin]})
        assert vp.center == (
            (vp.bounds.west + vp.bounds.east) / 2,
            (vp.bounds.south + vp.bounds.north) / 2,
        )

    def test_mixed_features(
        self, dutch_markers: list, amsterdam_polygon: dict, amsterdam_circle: dict
    ) -> None:
        request = {
            "markers": dutch_markers,
            "routes": [{"points": [[52.37, 4.89], [51.92, 4.48]]}],
            "polygons": [amsterdam_polygon, amsterdam_circle],
        }
        vp = compute_viewport(request)
        for marker in dutch_markers:
            assert vp.bounds.south < marker["lat"] < vp.bounds.north
            assert vp.bounds.west < marker["lon"] < vp.bounds.east

    def test_route_only(self) -> None:
        vp = compute_viewport({"routes": [[[52.0, 4.0], [52.5, 5.0]]]})
        assert vp.bounds.contains(Bounds(north=52.5, south=52.0, east=5.0, west=4.0))

    def test_circle_only_covers_radius(self, amsterdam_circle: dict) -> None:
        vp = compute_viewport({"polygons": [amsterdam_circle]})
        # 1 km is roughly 0.009 degrees of latitude.
        assert vp.bounds.north > 52.3732 + 0.0089
        assert vp.bounds.south < 52.3732 - 0.0089


class TestInvalidCoordinateScenario:
    def test_extract_returns_none(self) -> None:
        assert extract({"lat": 200, "lon": 4.89}, 0) is None

    def test_only_marker_invalid_raises(self) -> None:
        with pytest.raises(NoValidGeometryError, match="No valid coordinates found to calculate bounds"):
            compute_viewport({"markers": [{"lat": 200, "lon": 4.89}]})

    def test_invalid_marker_dropped_others_framed(self, amsterdam: dict) -> None:
        vp = compute_viewport({"markers": [{"lat": 200, "lon": 4.89}, amsterdam]})
        assert vp.bounds.contains_point(extract(amsterdam, 0))  # type: ignore[arg-type]

    def test_empty_request_raises(self) -> None:
        with pytest.raises(NoValidGeometryError):
            compute_viewport({})


class TestExplicitBbox:
    BBOX = [4.85, 52.35, 4.95, 52.40]

    def test_padded_bounds_strictly_contain_bbox(self) -> None:
        vp = compute_viewport({"bbox": self.BBOX})
        west, south, east, north = self.BBOX
        assert vp.bounds.west < west
        assert vp.bounds.south < south
        assert vp.bounds.east > east
        assert vp.bounds.north > north

    def test_padding_is_two_marker_padding(self) -> None:
        vp = frame_bbox(self.BBOX)
        # span 0.1 degrees, two corners: 0.25 of the span on each side.
        assert vp.bounds.west == pytest.approx(4.85 - 0.025)
        assert vp.bounds.north == pytest.approx(52.40 + 0.025)

    def test_bbox_wins_over_features(self, berlin: dict) -> None:
        vp = compute_viewport({"bbox": self.BBOX, "markers": [berlin]})
        assert vp.bounds.east < 13.4114

    def test_numeric_strings_accepted(self) -> None:
        assert frame_bbox(["4.85", "52.35", "4.95", "52.40"]) == frame_bbox(self.BBOX)

    @pytest.mark.parametrize("bbox", [[4.85, 52.35, 4.95], [1, 2, 3, 4, 5], [], "4.85,52.35,4.95,52.40", 42])
    def test_wrong_length(self, bbox: Any) -> None:
        with pytest.raises(InvalidBboxError, match=r"bbox must contain exactly 4 numbers \[west, south, east, north\]"):
            compute_viewport({"bbox": bbox})

    def test_out_of_range_names_edge(self) -> None:
        with pytest.raises(InvalidBboxError, match=r"Invalid bbox: south 95 out of range \[-90, 90\]"):
            frame_bbox([4.85, 95, 4.95, 96])

    def test_out_of_range_longitude(self) -> None:
        with pytest.raises(InvalidBboxError, match=r"Invalid bbox: east 200 out of range \[-180, 180\]"):
            frame_bbox([4.85, 52.35, 200, 52.40])

    def test_non_numeric_component(self) -> None:
        with pytest.raises(InvalidBboxError, match="Invalid bbox: west"):
            frame_bbox(["west", 52.35, 4.95, 52.40])

    @pytest.mark.parametrize(
        "bbox",
        [[4.95, 52.35, 4.85, 52.40], [4.85, 52.40, 4.95, 52.35], [4.85, 52.35, 4.85, 52.40]],
    )
    def test_bad_ordering(self, bbox: list[float]) -> None:
        with pytest.raises(
            InvalidBboxError, match="Invalid bounds: west must be < east and south must be < north"
        ):
            frame_bbox(bbox)

    def test_no_fallback_to_markers(self, amsterdam: dict) -> None:
        with pytest.raises(InvalidBboxError):
            compute_viewport({"bbox": [10, 10, 0, 0], "markers": [amsterdam]})


class TestPurity:
    def test_idempotent(self, dutch_markers: list, amsterdam_circle: dict) -> None:
        request = {"markers": dutch_markers, "polygons": [amsterdam_circle], "width": 1024, "height": 768}
        assert compute_viewport(request) == compute_viewport(request)

    def test_request_not_mutated(self, amsterdam: dict, berlin: dict) -> None:
        request = {"markers": [amsterdam, berlin]}
        snapshot = {"markers": [dict(amsterdam), dict(berlin)]}
        compute_viewport(request)
        assert request == snapshot


class TestConfigThreading:
    def test_canvas_defaults_from_config(self, amsterdam: dict, berlin: dict) -> None:
        request = {"markers": [amsterdam, berlin]}
        small = compute_viewport(request, config=ViewportConfig(default_width=400, default_height=300))
        large = compute_viewport(request, config=ViewportConfig(default_width=2000, default_height=1500))
        assert large.zoom > small.zoom

    def test_request_canvas_overrides_config(self, amsterdam: dict, berlin: dict) -> None:
        request = {"markers": [amsterdam, berlin], "width": 800, "height": 600}
        assert compute_viewport(request, config=ViewportConfig(default_width=2000)) == compute_viewport(request)

    def test_zoom_matches_solver(self, amsterdam: dict, berlin: dict) -> None:
        vp = compute_viewport({"markers": [amsterdam, berlin]})
        assert vp.zoom == solve_zoom(vp.bounds, 800, 600)

    def test_mercator_strategy(self) -> None:
        request = {"markers": [{"lat": 69.0, "lon": 18.0}, {"lat": 70.0, "lon": 18.1}]}
        linear = compute_viewport(request)
        mercator = compute_viewport(request, config=ViewportConfig(zoom_strategy=ZoomStrategy.MERCATOR))
        assert mercator.bounds == linear.bounds
        assert mercator.zoom < linear.zoom

    def test_circle_segments_from_config(self, amsterdam_circle: dict) -> None:
        coarse = compute_viewport({"polygons": [amsterdam_circle]}, config=ViewportConfig(circle_segments=4))
        fine = compute_viewport({"polygons": [amsterdam_circle]})
        assert coarse.bounds.contains(fine.bounds) or fine.bounds.contains(coarse.bounds)


class TestFrameFeatures:
    def test_equivalent_to_compute_viewport(self, amsterdam: dict, berlin: dict) -> None:
        features = parse_features(markers=[amsterdam, berlin])
        assert frame_features(features) == compute_viewport({"markers": [amsterdam, berlin]})

    def test_logs_result(self, amsterdam: dict, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="map_viewport.framing.viewport"):
            frame_features(parse_features(markers=[amsterdam]))
        assert any("Viewport computed" in r.getMessage() for r in caplog.records)


class TestComposeViewport:
    def test_bbox_wins_over_features(self, berlin: dict) -> None:
        features = parse_features(markers=[berlin])
        vp = compose_viewport(features, bbox=[4.85, 52.35, 4.95, 52.40])
        assert vp == frame_bbox([4.85, 52.35, 4.95, 52.40])

    def test_features_without_bbox(self, amsterdam: dict, berlin: dict) -> None:
        features = parse_features(markers=[amsterdam, berlin])
        assert compose_viewport(features) == frame_features(features)

    def test_canvas_falls_back_to_config(self, amsterdam: dict, berlin: dict) -> None:
        features = parse_features(markers=[amsterdam, berlin])
        config = ViewportConfig(default_width=400, default_height=300)
        assert compose_viewport(features, config=config) == frame_features(features, 400, 300)

    def test_empty_features_without_bbox_raises(self) -> None:
        with pytest.raises(NoValidGeometryError):
            compose_viewport(FeatureSet())
