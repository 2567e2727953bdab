"""Map viewport framing engine.

Computes the geographic bounds, centre and zoom level that frame an
arbitrary set of map features (markers, routes, polygons, circles) on a
raster canvas, and exposes the result to AI agents as a dynamic-map tool.
"""

__version__ = "0.1.0"
