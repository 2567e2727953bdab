"""Tool handlers.

- dynamic_map: Resolve dynamic-map tool options into a ``RenderPlan``
- layers: GeoJSON layer hand-off to the external renderer
"""
