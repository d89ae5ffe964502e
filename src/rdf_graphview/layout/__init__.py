"""
Layout: force-directed positioning and viewport fitting.
"""

from rdf_graphview.layout.params import LayoutParams, DEFAULT_LAYOUT_PARAMS
from rdf_graphview.layout.engine import LayoutEngine, LayoutState, PositionCache
from rdf_graphview.layout.viewport import ViewportTransform, fit

__all__ = [
    "LayoutParams",
    "DEFAULT_LAYOUT_PARAMS",
    "LayoutEngine",
    "LayoutState",
    "PositionCache",
    "ViewportTransform",
    "fit",
]
