# File: src/panel_topology/elements/__init__.py
"""
Element model for planar structural panels.

This module provides:
- Immutable Panel, Opening and Edge value types
- Tagged curve and surface property variants
- Release and Support edge metadata
- Conversion of edge loops to planar 2D loops

Example:
    >>> from panel_topology.elements import Edge, Line, Panel
    >>> square = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    >>> edges = [Edge(Line(square[i], square[(i + 1) % 4])) for i in range(4)]
    >>> panel = Panel(external_edges=edges)
"""

from .panel_types import (
    Point3,
    CurveKind,
    DOFType,
    SurfacePropertyKind,
    Line,
    Polyline,
    Arc,
    Curve,
    Release,
    Support,
    ConstantThickness,
    Ribbed,
    Waffle,
    LoadingPanelProperty,
    SurfaceProperty,
    Edge,
    Opening,
    Panel,
)

from .edge_geometry import (
    edge_points,
    edge_segments,
    edge_segments_2d,
    loop_points,
    loop_from_edges,
    panel_frame,
    panel_outline,
    opening_outline,
)

__all__ = [
    # Types
    "Point3",
    "CurveKind",
    "DOFType",
    "SurfacePropertyKind",
    "Line",
    "Polyline",
    "Arc",
    "Curve",
    "Release",
    "Support",
    "ConstantThickness",
    "Ribbed",
    "Waffle",
    "LoadingPanelProperty",
    "SurfaceProperty",
    "Edge",
    "Opening",
    "Panel",
    # Edge geometry
    "edge_points",
    "edge_segments",
    "edge_segments_2d",
    "loop_points",
    "loop_from_edges",
    "panel_frame",
    "panel_outline",
    "opening_outline",
]
