# File: src/panel_topology/elements/edge_geometry.py
"""
Conversion of edge curves to straight segments and planar loops.

Topology code only works with straight-sided geometry. Each curve variant is
reduced to a chain of points by a handler looked up on its CurveKind; arcs
have a handler that rejects them with GeometryConversionError.
"""

import math
import logging
from typing import Callable, Dict, List, Sequence, Tuple

from ..errors import GeometryConversionError
from ..geometry.loops import Loop2, Segment2, remove_duplicate_vertices
from ..geometry.plane import PlaneFrame
from .panel_types import Arc, CurveKind, Edge, Line, Opening, Panel, Point3, Polyline

logger = logging.getLogger(__name__)


def _line_points(curve: Line) -> List[Point3]:
    return [tuple(curve.start), tuple(curve.end)]


def _polyline_points(curve: Polyline) -> List[Point3]:
    return [tuple(p) for p in curve.points]


def _reject_arc(curve: Arc) -> List[Point3]:
    raise GeometryConversionError(
        "Curved edges are not supported; arc edges cannot be reconciled",
        {"start": curve.start, "mid": curve.mid, "end": curve.end},
    )


_POINT_CHAINS: Dict[CurveKind, Callable] = {
    CurveKind.LINE: _line_points,
    CurveKind.POLYLINE: _polyline_points,
    CurveKind.ARC: _reject_arc,
}


def edge_points(edge: Edge) -> List[Point3]:
    """Ordered points of an edge curve.

    Raises:
        GeometryConversionError: If the curve is not straight-sided.
    """
    handler = _POINT_CHAINS.get(getattr(edge.curve, "kind", None))
    if handler is None:
        raise GeometryConversionError(
            f"Unsupported edge curve {type(edge.curve).__name__}",
            {"edge": edge.name},
        )
    return handler(edge.curve)


def edge_segments(edge: Edge) -> List[Tuple[Point3, Point3]]:
    """Straight 3D segments of an edge, in curve direction."""
    pts = edge_points(edge)
    return [(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]


def edge_segments_2d(edge: Edge, frame: PlaneFrame, tolerance: float) -> List[Segment2]:
    """Straight segments of an edge projected into a plane frame."""
    pts = frame.project_all(edge_points(edge), tolerance)
    return [(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]


# =============================================================================
# Loops
# =============================================================================


def loop_points(edges: Sequence[Edge], tolerance: float) -> List[Point3]:
    """Chain edges into a closed loop of 3D vertices.

    Edges must be given in loop order but may individually be stored in
    either direction.

    Raises:
        GeometryConversionError: If an edge is curved, an edge does not
            connect to the previous one, or the chain is not closed.
    """
    if not edges:
        raise GeometryConversionError("Cannot build a loop from zero edges")

    chains = [edge_points(edge) for edge in edges]

    first = chains[0]
    if len(chains) > 1:
        following = chains[1]
        joins_end = any(math.dist(first[-1], p) <= tolerance for p in (following[0], following[-1]))
        joins_start = any(math.dist(first[0], p) <= tolerance for p in (following[0], following[-1]))
        if joins_start and not joins_end:
            first = list(reversed(first))

    vertices = list(first)
    for index, chain in enumerate(chains[1:], start=1):
        end = vertices[-1]
        if math.dist(chain[0], end) <= tolerance:
            vertices.extend(chain[1:])
        elif math.dist(chain[-1], end) <= tolerance:
            vertices.extend(list(reversed(chain))[1:])
        else:
            raise GeometryConversionError(
                f"Edge {index} does not connect to the previous edge",
                {"edge_index": index, "gap_from": end},
            )

    if math.dist(vertices[0], vertices[-1]) > tolerance:
        raise GeometryConversionError(
            "Edge chain is not closed",
            {"start": vertices[0], "end": vertices[-1]},
        )
    return vertices[:-1]


def loop_from_edges(edges: Sequence[Edge], frame: PlaneFrame, tolerance: float) -> Loop2:
    """Closed 2D loop of a chain of edges in a plane frame."""
    local = frame.project_all(loop_points(edges, tolerance), tolerance)
    loop = remove_duplicate_vertices(local, tolerance)
    if len(loop) < 3:
        raise GeometryConversionError(
            f"Edge loop collapses to {len(loop)} vertices",
            {"edge_count": len(edges)},
        )
    return loop


def panel_frame(panel: Panel, tolerance: float) -> PlaneFrame:
    """Canonical plane frame of a panel's outer loop."""
    return PlaneFrame.from_points(loop_points(panel.external_edges, tolerance), tolerance)


def panel_outline(panel: Panel, frame: PlaneFrame, tolerance: float) -> Loop2:
    return loop_from_edges(panel.external_edges, frame, tolerance)


def opening_outline(opening: Opening, frame: PlaneFrame, tolerance: float) -> Loop2:
    return loop_from_edges(opening.edges, frame, tolerance)
