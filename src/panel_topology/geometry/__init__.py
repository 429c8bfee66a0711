# File: src/panel_topology/geometry/__init__.py
"""
Planar geometry for panel topology.

This module provides:
- Canonical plane frames mapping 3D panel outlines to 2D loops
- Plain-tuple loop and segment utilities
- The geometry kernel (shapely booleans, networkx loop joining)

Example:
    >>> from panel_topology.geometry import PlaneFrame, union
    >>> rings = union([[(0, 0), (1, 0), (1, 1), (0, 1)],
    ...                [(1, 0), (2, 0), (2, 1), (1, 1)]], 1e-6)
    >>> len(rings)
    1
"""

from .plane import (
    PlaneFrame,
    newell_normal,
)

from .loops import (
    Point2,
    Segment2,
    Loop2,
    PointRegistry,
    distance,
    points_close,
    point_to_segment_distance,
    segment_length,
    reverse_segment,
    segments_collinear,
    loop_segments,
    signed_area,
    loop_area,
    orient,
    rotate_to_min,
    strip_closing_point,
    remove_duplicate_vertices,
    drop_collinear_vertices,
    ring_alignment,
    rings_match,
    loop_sets_match,
)

from .kernel import (
    union,
    difference,
    strictly_contains,
    loops_coincide,
    intersections,
    split_at,
    join_into_loops,
    area,
    loop_to_polygon,
    polygon_rings,
)

from .containment import (
    coincident_equal_area,
    contains,
    loops_overlap,
    parents,
    classify_nested,
    smallest_container,
    distribute_holes,
)

__all__ = [
    # Plane frames
    "PlaneFrame",
    "newell_normal",
    # Loops
    "Point2",
    "Segment2",
    "Loop2",
    "PointRegistry",
    "distance",
    "points_close",
    "point_to_segment_distance",
    "segment_length",
    "reverse_segment",
    "segments_collinear",
    "loop_segments",
    "signed_area",
    "loop_area",
    "orient",
    "rotate_to_min",
    "strip_closing_point",
    "remove_duplicate_vertices",
    "drop_collinear_vertices",
    "ring_alignment",
    "rings_match",
    "loop_sets_match",
    # Kernel
    "union",
    "difference",
    "strictly_contains",
    "loops_coincide",
    "intersections",
    "split_at",
    "join_into_loops",
    "area",
    "loop_to_polygon",
    "polygon_rings",
    # Containment
    "coincident_equal_area",
    "contains",
    "loops_overlap",
    "parents",
    "classify_nested",
    "smallest_container",
    "distribute_holes",
]
