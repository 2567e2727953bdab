"""Viewport-framing engine.

Each stage consumes only the stages before it:
- coordinates: Resolve heterogeneous point inputs into ``Point``
- circle: Rasterise geodesic circles into boundary rings
- collect: Resolve raw feature arrays and flatten them into points
- bounds: Raw bounds plus content-aware padding
- zoom: Largest zoom at which the padded bounds fit the canvas
- viewport: Orchestrate the stages into ``{bounds, center, zoom}``
"""
