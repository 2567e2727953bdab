"""MCP server entry point: Map Viewport tools.

This module registers the tools exposed to agents over the Model Context
Protocol using FastMCP.

All business logic lives in the map_viewport package. This file is purely
the wiring layer between tool calls and application code.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from map_viewport.core.config import ViewportConfig
from map_viewport.handlers.dynamic_map import handle_dynamic_map

logger = logging.getLogger("map_viewport.mcp_server")

DYNAMIC_MAP_TOOL = "dynamic-map"
DYNAMIC_MAP_DESCRIPTION = (
    "Frame markers, routes, polygons and circles on a map canvas. "
    "Returns the viewport (bounds, center, zoom) and GeoJSON layers for rendering."
)


def server_name(config: ViewportConfig) -> str:
    return f"Map Viewport MCP Server ({'Orbis' if config.is_orbis else 'Genesis'})"


def render_dynamic_map(params: dict[str, Any], config: ViewportConfig) -> dict[str, Any]:
    """Run the dynamic-map handler and unwrap its tool result.

    Raises:
        ToolError: If the handler reports an error.  The message is the
            handler's error text, unchanged.
    """
    result = handle_dynamic_map(params, config)
    payload = json.loads(result["content"][0]["text"])
    if result["isError"]:
        raise ToolError(payload["error"])
    return payload


def create_server(config: ViewportConfig | None = None) -> FastMCP:
    """Build the FastMCP server and register the enabled tools."""
    config = config or ViewportConfig.from_env()
    server = FastMCP(server_name(config))

    if not config.enable_dynamic_maps:
        logger.info("Dynamic maps disabled | tool=%s", DYNAMIC_MAP_TOOL)
        return server

    def dynamic_map(
        bbox: list[float] | None = None,
        width: int | None = None,
        height: int | None = None,
        markers: list[dict[str, Any]] | None = None,
        routes: list[Any] | None = None,
        route: list[Any] | None = None,
        polygons: list[dict[str, Any]] | None = None,
        isRoute: bool = False,  # noqa: N803
        origin: dict[str, Any] | None = None,
        destination: dict[str, Any] | None = None,
        waypoints: list[dict[str, Any]] | None = None,
        showLabels: bool = False,  # noqa: N803
        routeLabel: str | None = None,  # noqa: N803
        routeInfoDetail: str | None = None,  # noqa: N803
        use_orbis: bool = False,
    ) -> dict[str, Any]:
        options = {
            "bbox": bbox,
            "width": width,
            "height": height,
            "markers": markers,
            "routes": routes,
            "route": route,
            "polygons": polygons,
            "isRoute": isRoute,
            "origin": origin,
            "destination": destination,
            "waypoints": waypoints,
            "showLabels": showLabels,
            "routeLabel": routeLabel,
            "routeInfoDetail": routeInfoDetail,
            "use_orbis": use_orbis,
        }
        return render_dynamic_map({k: v for k, v in options.items() if v is not None}, config)

    server.tool(name=DYNAMIC_MAP_TOOL, description=DYNAMIC_MAP_DESCRIPTION)(dynamic_map)
    logger.info("Tool registered | tool=%s | backend=%s", DYNAMIC_MAP_TOOL, config.maps_backend)
    return server


def main() -> None:
    config = ViewportConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    create_server(config).run()


if __name__ == "__main__":
    main()
